"""State shared by CLI subcommands."""

from dataclasses import dataclass

from deflink.models.config import DefLinkConfig
from deflink.services.glossary_service import GlossaryService
from deflink.services.vault import FolderVault


@dataclass
class CliContext:
    """Objects shared by every subcommand through ``click.Context.obj``."""

    config: DefLinkConfig
    vault: FolderVault
    service: GlossaryService

    def refresh(self) -> None:
        """Load the glossary from the vault's definitions folder."""
        self.service.refresh_from(self.vault)
