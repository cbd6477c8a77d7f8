"""Click command linking glossary terms in vault documents."""

import sys

import click

from deflink.cli.context import CliContext
from deflink.lib.errors import DefLinkError
from deflink.lib.logging_config import get_logger

logger = get_logger(__name__)


@click.command(name="rewrite")
@click.argument(
    "documents",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--all",
    "rewrite_all",
    is_flag=True,
    help="Rewrite every document outside the definitions folder",
)
@click.option(
    "--check",
    is_flag=True,
    help="Only report documents that would change (exit code 1 if any)",
)
@click.pass_obj
def rewrite(
    obj: CliContext,
    documents: tuple[str, ...],
    rewrite_all: bool,
    check: bool,
) -> None:
    """Link glossary terms in DOCUMENTS to their definitions.

    Every occurrence of a term or alias in prose becomes a link of the form
    [[<definition file>#<heading>|<matched text>]]. Code, existing links and
    bracketed text are left untouched. Documents are rewritten in place.

    \b
    EXAMPLES:

        deflink rewrite notes/meeting.md

        deflink rewrite --all --check
    """
    if not documents and not rewrite_all:
        raise click.UsageError("Pass one or more DOCUMENTS or use --all.")

    try:
        obj.refresh()
        if obj.service.snapshot.is_empty:
            click.secho(
                f"No definitions found in '{obj.config.definitions_folder}', "
                "nothing to do",
                fg="yellow",
            )
            return

        if rewrite_all:
            targets = [source_id for source_id, _ in obj.vault.list_rewrite_targets()]
        else:
            targets = [obj.vault.source_id(document) for document in documents]

        changed: list[str] = []
        for source_id in targets:
            if obj.vault.is_definition_source(source_id):
                click.echo(f"Skipping definition source {source_id}")
                continue

            result = obj.service.rewrite(obj.vault.read_document(source_id))
            if not result.changed:
                logger.debug(f"No terms to link in {source_id}")
                continue

            changed.append(source_id)
            if check:
                click.echo(f"Would rewrite {source_id}")
            else:
                obj.vault.write_document(source_id, result.content)
                click.echo(f"Rewrote {source_id}")
    except DefLinkError as e:
        logger.error(f"Rewrite failed: {e}", exc_info=True)
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)

    verb = "would change" if check else "changed"
    click.secho(f"{len(changed)} of {len(targets)} documents {verb}", fg="green")
    if check and changed:
        sys.exit(1)
