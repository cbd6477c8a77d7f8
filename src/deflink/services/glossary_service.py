"""Glossary coordinator.

The GlossaryService owns the current glossary snapshot and exposes the two
entry points a host calls from its hooks: refreshing the glossary from the
definition sources and rewriting a document with it. Each refresh builds a
new immutable snapshot and swaps it in as a whole.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from deflink.lib.ast_cache import ASTCache
from deflink.lib.definition_parser import parse_definitions
from deflink.lib.duplicate_checker import find_duplicate_aliases
from deflink.lib.logging_config import get_logger
from deflink.lib.rewriter import rewrite_definitions
from deflink.models.config import DefLinkConfig
from deflink.models.definition import (
    ConflictReport,
    Definition,
    GlossarySnapshot,
    RewriteResult,
    RewriteStatus,
)

if TYPE_CHECKING:
    from deflink.services.host import DocumentHost

logger = get_logger(__name__)


def refresh_glossary(
    sources: Iterable[tuple[str, str]],
) -> tuple[list[Definition], ConflictReport]:
    """Parse every definition source and detect conflicting aliases.

    Args:
        sources: ``(source_id, content)`` pairs of the glossary documents

    Returns:
        The glossary in source order and the alias conflicts within it.
    """
    definitions: list[Definition] = []
    for source_id, content in sources:
        definitions.extend(parse_definitions(source_id, content))
    return definitions, find_duplicate_aliases(definitions)


class GlossaryService:
    """Holds the glossary and applies it to documents.

    Attributes:
        config: Settings controlling the save hook and cache size
        cache: Tree cache shared by every rewrite of this service

    Example:
        >>> service = GlossaryService()
        >>> _ = service.refresh([("test.md", "# Term1\\naliases: Alias1")])
        >>> service.rewrite("Alias1 here").content
        '[[test.md#Term1|Alias1]] here'
    """

    def __init__(
        self,
        config: DefLinkConfig | None = None,
        cache: ASTCache | None = None,
    ) -> None:
        """Initialize the service with an empty glossary.

        Args:
            config: Settings, defaults to DefLinkConfig()
            cache: Tree cache, defaults to a new cache sized from config
        """
        self.config = config or DefLinkConfig()
        self.cache = cache or ASTCache(capacity=self.config.cache_size)
        self._snapshot = GlossarySnapshot()
        self._source_ids: frozenset[str] = frozenset()
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> GlossarySnapshot:
        """Get the current glossary snapshot."""
        return self._snapshot

    @property
    def definitions(self) -> tuple[Definition, ...]:
        """Get the definitions of the current snapshot."""
        return self._snapshot.definitions

    def is_definition_source(self, source_id: str) -> bool:
        """Return True if the document was a source of the last refresh."""
        return source_id in self._source_ids

    def refresh(self, sources: Iterable[tuple[str, str]]) -> GlossarySnapshot:
        """Rebuild the glossary from its source documents.

        Args:
            sources: ``(source_id, content)`` pairs of the glossary documents

        Returns:
            The new snapshot, which is also installed as current.
        """
        materialized = list(sources)
        definitions, conflicts = refresh_glossary(materialized)
        snapshot = GlossarySnapshot(
            definitions=tuple(definitions), conflicts=conflicts
        )

        with self._lock:
            self._snapshot = snapshot
            self._source_ids = frozenset(source_id for source_id, _ in materialized)

        logger.info(
            f"Loaded {len(definitions)} definitions from "
            f"{len(materialized)} documents"
        )
        for alias, owners in conflicts.items():
            owner_names = ", ".join(f"{d.source_id}#{d.heading}" for d in owners)
            logger.warning(f"Alias '{alias}' is declared by: {owner_names}")
        return snapshot

    def rewrite(self, content: str) -> RewriteResult:
        """Rewrite a document with the current glossary.

        Args:
            content: Complete markdown document

        Returns:
            The rewritten content and whether anything happened. An empty
            glossary is reported as ``NO_DEFINITIONS`` rather than success.
        """
        snapshot = self._snapshot
        if snapshot.is_empty:
            return RewriteResult(status=RewriteStatus.NO_DEFINITIONS, content=content)

        rewritten = rewrite_definitions(snapshot.definitions, content, self.cache)
        status = (
            RewriteStatus.REWRITTEN if rewritten != content else RewriteStatus.UNCHANGED
        )
        return RewriteResult(status=status, content=rewritten)

    def search(self, query: str) -> list[Definition]:
        """Find definitions with an alias containing ``query``.

        Matching is a case-insensitive substring test; an empty query
        returns every definition.
        """
        needle = query.strip().casefold()
        return [
            definition
            for definition in self._snapshot.definitions
            if any(needle in alias.casefold() for alias in definition.aliases)
        ]

    def handle_document_saved(self, source_id: str, content: str) -> str | None:
        """Save-hook entry point.

        Args:
            source_id: Identifier of the saved document
            content: Its content as saved

        Returns:
            The rewritten content when the document should be updated, or
            None when automatic rewriting is off, the document is a glossary
            source, or nothing changed.
        """
        if not self.config.auto_rewrite_on_save:
            return None
        if self.is_definition_source(source_id):
            logger.debug(f"Not rewriting definition source {source_id}")
            return None

        result = self.rewrite(content)
        if not result.changed:
            return None
        logger.info(f"Rewrote {source_id} on save")
        return result.content

    def refresh_from(self, host: DocumentHost) -> GlossarySnapshot:
        """Refresh the glossary from a host's definition sources."""
        return self.refresh(host.list_definition_sources())

    def rewrite_in(self, host: DocumentHost, source_id: str) -> RewriteResult:
        """Rewrite a host document and write it back when it changed."""
        result = self.rewrite(host.read_document(source_id))
        if result.changed:
            host.write_document(source_id, result.content)
            logger.info(f"Rewrote {source_id}")
        return result
