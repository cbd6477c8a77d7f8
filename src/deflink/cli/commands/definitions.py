"""Click command listing the glossary and its alias conflicts."""

import json
import sys

import click

from deflink.cli.context import CliContext
from deflink.lib.errors import DefLinkError
from deflink.lib.logging_config import get_logger

logger = get_logger(__name__)


@click.command(name="definitions")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Output definitions and conflicts as JSON",
)
@click.pass_obj
def definitions(obj: CliContext, as_json: bool) -> None:
    """List the definitions declared in the definitions folder.

    Aliases declared by more than one definition are reported as conflicts.
    Conflicts do not stop rewriting; every owner still links its own
    occurrences.

    \b
    EXAMPLES:

        deflink definitions

        deflink --vault notes definitions --json
    """
    try:
        obj.refresh()
    except DefLinkError as e:
        logger.error(f"Failed to load definitions: {e}", exc_info=True)
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)

    snapshot = obj.service.snapshot

    if as_json:
        payload = {
            "definitions": [d.model_dump() for d in snapshot.definitions],
            "conflicts": {
                alias: [f"{d.source_id}#{d.heading}" for d in owners]
                for alias, owners in snapshot.conflicts.items()
            },
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if snapshot.is_empty:
        click.secho(
            f"No definitions found in '{obj.config.definitions_folder}'",
            fg="yellow",
        )
        return

    for definition in snapshot.definitions:
        click.echo(
            f"{definition.source_id}#{definition.heading}: "
            f"{', '.join(definition.aliases)}"
        )

    if snapshot.conflicts:
        click.echo()
        click.secho(f"{len(snapshot.conflicts)} conflicting aliases:", fg="yellow")
        for alias, owners in snapshot.conflicts.items():
            owner_names = ", ".join(f"{d.source_id}#{d.heading}" for d in owners)
            click.echo(f"  {alias}: {owner_names}")
