"""Click command printing the prose spans of a document."""

import json
import sys

import click

from deflink.cli.context import CliContext
from deflink.lib.errors import DefLinkError
from deflink.lib.span_locator import prose_spans


@click.command(name="spans")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Output spans as JSON",
)
@click.pass_obj
def spans(obj: CliContext, document: str, as_json: bool) -> None:
    """Show the parts of DOCUMENT where terms would be linked.

    Each span is printed as start-end offsets followed by its text.
    """
    try:
        source_id = obj.vault.source_id(document)
        content = obj.vault.read_document(source_id)
    except DefLinkError as e:
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)

    found = prose_spans(content, obj.service.cache)

    if as_json:
        payload = [
            {"start": span.start, "end": span.end, "text": span.text(content)}
            for span in found
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    for span in found:
        click.echo(f"{span.start}-{span.end}: {span.text(content)!r}")
