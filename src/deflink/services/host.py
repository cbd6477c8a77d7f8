"""Host integration points.

A host (an editor plugin, a static site build, the CLI) provides documents
through the DocumentHost protocol and exposes deflink's actions through
whatever UI it has. Actions are plain data so that no UI toolkit is needed
to register them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from deflink.lib.logging_config import get_logger

if TYPE_CHECKING:
    from deflink.services.glossary_service import GlossaryService

logger = get_logger(__name__)


@runtime_checkable
class DocumentHost(Protocol):
    """Document store consumed by the glossary service."""

    def list_definition_sources(self) -> Iterable[tuple[str, str]]:
        """Return ``(source_id, content)`` for every glossary document."""
        ...

    def list_rewrite_targets(self) -> Iterable[tuple[str, str]]:
        """Return ``(source_id, content)`` for every document to rewrite."""
        ...

    def read_document(self, source_id: str) -> str:
        """Return the content of a document."""
        ...

    def write_document(self, source_id: str, content: str) -> None:
        """Replace the content of a document."""
        ...

    def open_by_source_id(self, source_id: str) -> None:
        """Navigate to a document, e.g. after a definition was picked."""
        ...


@dataclass(frozen=True)
class Command:
    """A user-facing action.

    Attributes:
        id: Stable identifier, used for key bindings
        name: Label shown in menus and command palettes
        handler: Callable performing the action. Commands taking an argument
            receive the document id or search query as a string.
    """

    id: str
    name: str
    handler: Callable[..., object]

    def __call__(self, *args: str) -> object:
        logger.debug(f"Running command {self.id}")
        return self.handler(*args)


def build_commands(service: GlossaryService, host: DocumentHost) -> list[Command]:
    """Build the actions a host should expose.

    Args:
        service: Glossary service backing the actions
        host: Document store the actions operate on

    Returns:
        Commands for refreshing the glossary, rewriting one or all documents,
        and opening the document that defines a term.
    """

    def refresh() -> int:
        return len(service.refresh_from(host).definitions)

    def rewrite_document(source_id: str) -> bool:
        return service.rewrite_in(host, source_id).changed

    def rewrite_all() -> list[str]:
        changed: list[str] = []
        for source_id, _ in host.list_rewrite_targets():
            if service.rewrite_in(host, source_id).changed:
                changed.append(source_id)
        return changed

    def open_definition(query: str) -> str | None:
        matches = service.search(query)
        if not matches:
            logger.info(f"No definition matches '{query}'")
            return None
        host.open_by_source_id(matches[0].source_id)
        return matches[0].source_id

    return [
        Command("refresh-definitions", "Refresh definitions", refresh),
        Command(
            "rewrite-document", "Link definitions in document", rewrite_document
        ),
        Command(
            "rewrite-all-documents", "Link definitions in all documents", rewrite_all
        ),
        Command("open-definition", "Open definition", open_definition),
    ]
