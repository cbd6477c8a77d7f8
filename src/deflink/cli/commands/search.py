"""Click command looking up definitions by alias."""

import json
import sys

import click

from deflink.cli.context import CliContext
from deflink.lib.errors import DefLinkError


@click.command(name="search")
@click.argument("query")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Output matching definitions as JSON",
)
@click.pass_obj
def search(obj: CliContext, query: str, as_json: bool) -> None:
    """Find definitions with an alias containing QUERY (case-insensitive)."""
    try:
        obj.refresh()
    except DefLinkError as e:
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)

    matches = obj.service.search(query)

    if as_json:
        click.echo(json.dumps([d.model_dump() for d in matches], indent=2))
        return

    if not matches:
        click.secho(f"No definition matches '{query}'", fg="yellow")
        return

    for definition in matches:
        click.echo(f"{definition.source_id}#{definition.heading}")
        click.echo(f"  {', '.join(definition.aliases)}")
