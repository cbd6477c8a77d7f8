"""Shared fixtures for service tests."""

from collections.abc import Callable

import pytest


class InMemoryHost:
    """DocumentHost keeping documents in dictionaries."""

    def __init__(self, definitions: dict[str, str], documents: dict[str, str]):
        self.definitions = definitions
        self.documents = documents
        self.writes: list[str] = []
        self.opened: list[str] = []

    def list_definition_sources(self) -> list[tuple[str, str]]:
        return list(self.definitions.items())

    def list_rewrite_targets(self) -> list[tuple[str, str]]:
        return list(self.documents.items())

    def read_document(self, source_id: str) -> str:
        return self.documents[source_id]

    def write_document(self, source_id: str, content: str) -> None:
        self.writes.append(source_id)
        self.documents[source_id] = content

    def open_by_source_id(self, source_id: str) -> None:
        self.opened.append(source_id)


@pytest.fixture
def terms_source() -> tuple[str, str]:
    """Glossary document declaring Term1 with aliases Alias1 and Alias2."""
    return ("definitions/terms.md", "# Term1\naliases: Alias1, Alias2\n")


@pytest.fixture
def make_host(terms_source: tuple[str, str]) -> Callable[..., InMemoryHost]:
    """Create an in-memory host whose glossary is the terms document.

    Returns:
        Callable taking the rewrite targets as ``{source_id: content}``
    """

    def _make(documents: dict[str, str] | None = None) -> InMemoryHost:
        return InMemoryHost(dict([terms_source]), dict(documents or {}))

    return _make
