"""Entry point for the ``deflink`` command line interface."""

import sys

import click

from deflink import __version__
from deflink.cli.commands.definitions import definitions
from deflink.cli.commands.rewrite import rewrite
from deflink.cli.commands.search import search
from deflink.cli.commands.spans import spans
from deflink.cli.context import CliContext
from deflink.config.loader import ConfigLoader
from deflink.lib.errors import ConfigError, DefLinkError, FileNotFoundError
from deflink.lib.logging_config import get_logger, setup_logging
from deflink.services.glossary_service import GlossaryService
from deflink.services.vault import FolderVault

logger = get_logger(__name__)


@click.group()
@click.version_option(__version__, prog_name="deflink")
@click.option(
    "--vault",
    "vault_dir",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Vault root directory (default: current directory)",
)
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(),
    help="Configuration file (default: deflink.yaml in the vault root)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
@click.pass_context
def main(
    ctx: click.Context,
    vault_dir: str,
    config_file: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Link glossary terms in markdown documents to their definitions.

    Definitions live in the definitions folder of the vault, each declared
    as a level-1 heading followed by an aliases line:

    \b
        # Term
        aliases: Alias1, Alias2

    \b
    EXAMPLES:

        List the glossary and any conflicting aliases:
            deflink definitions

        Link terms in every document of the vault:
            deflink rewrite --all

        Check which documents would change:
            deflink rewrite --all --check
    """
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        config = ConfigLoader().load(config_file, base_dir=vault_dir)
        vault = FolderVault(vault_dir, config)
    except (ConfigError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        click.secho("Error: Failed to load configuration", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(2)
    except DefLinkError as e:
        logger.error(f"Vault error: {e}", exc_info=True)
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)

    ctx.obj = CliContext(
        config=config,
        vault=vault,
        service=GlossaryService(config=config),
    )


main.add_command(definitions)
main.add_command(rewrite)
main.add_command(spans)
main.add_command(search)


if __name__ == "__main__":
    main()
