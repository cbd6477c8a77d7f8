"""Glossary coordination and host integration."""

from deflink.services.glossary_service import GlossaryService, refresh_glossary
from deflink.services.host import Command, DocumentHost, build_commands
from deflink.services.vault import FolderVault

__all__ = [
    "Command",
    "DocumentHost",
    "FolderVault",
    "GlossaryService",
    "build_commands",
    "refresh_glossary",
]
