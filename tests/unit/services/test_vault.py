"""Tests for the filesystem document host."""

from collections.abc import Callable
from pathlib import Path

import pytest

from deflink.lib.errors import DocumentError
from deflink.models.config import DefLinkConfig
from deflink.services.vault import FolderVault

VaultFactory = Callable[[dict[str, str]], Path]

FILES = {
    "definitions/terms.md": "# Term1\naliases: Alias1\n",
    "definitions/nested/more.md": "# Term2\naliases: Alias3\n",
    "notes/a.md": "Term1 here",
    "b.md": "Alias1 there",
    "notes/image.png": "not markdown",
    ".obsidian/workspace.md": "hidden",
}


@pytest.fixture
def vault(make_vault: VaultFactory) -> FolderVault:
    """Vault with two definition documents and two notes."""
    return FolderVault(make_vault(FILES))


@pytest.mark.unit
class TestFolderVault:
    """Tests for FolderVault."""

    def test_root_must_be_directory(self, temp_dir: Path) -> None:
        """Test that a missing root is rejected."""
        with pytest.raises(DocumentError, match="not a directory"):
            FolderVault(temp_dir / "missing")

    def test_iter_documents(self, vault: FolderVault) -> None:
        """Test that markdown documents are listed, sorted, without hidden ones."""
        assert list(vault.iter_documents()) == [
            "b.md",
            "definitions/nested/more.md",
            "definitions/terms.md",
            "notes/a.md",
        ]

    def test_definition_sources(self, vault: FolderVault) -> None:
        """Test that only documents in the definitions folder are sources."""
        assert vault.list_definition_sources() == [
            ("definitions/nested/more.md", "# Term2\naliases: Alias3\n"),
            ("definitions/terms.md", "# Term1\naliases: Alias1\n"),
        ]

    def test_rewrite_targets(self, vault: FolderVault) -> None:
        """Test that every other document is a rewrite target."""
        assert [sid for sid, _ in vault.list_rewrite_targets()] == [
            "b.md",
            "notes/a.md",
        ]

    def test_missing_definitions_folder(self, make_vault: VaultFactory) -> None:
        """Test that a vault without the folder has no sources."""
        vault = FolderVault(make_vault({"a.md": "text"}))
        assert vault.list_definition_sources() == []

    def test_custom_definitions_folder(self, make_vault: VaultFactory) -> None:
        """Test that the configured folder is used."""
        root = make_vault(
            {"glossary/g.md": "# G\naliases: g\n", "definitions/d.md": ""}
        )
        vault = FolderVault(root, DefLinkConfig(definitions_folder="glossary"))
        assert [sid for sid, _ in vault.list_definition_sources()] == ["glossary/g.md"]

    def test_folder_prefix_is_a_path_component(self, vault: FolderVault) -> None:
        """Test that similarly named folders are not definition sources."""
        assert vault.is_definition_source("definitions/terms.md")
        assert not vault.is_definition_source("definitions-old/terms.md")

    def test_custom_extensions(self, make_vault: VaultFactory) -> None:
        """Test that configured extensions select documents."""
        root = make_vault({"a.md": "", "b.markdown": "", "c.txt": ""})
        vault = FolderVault(root, DefLinkConfig(file_extensions=[".markdown"]))
        assert list(vault.iter_documents()) == ["b.markdown"]

    def test_read_preserves_line_endings(self, make_vault: VaultFactory) -> None:
        """Test that CRLF content is returned verbatim."""
        vault = FolderVault(make_vault({"a.md": "one\r\ntwo\r\n"}))
        assert vault.read_document("a.md") == "one\r\ntwo\r\n"

    def test_write_round_trip(self, vault: FolderVault) -> None:
        """Test that written content is read back unchanged."""
        vault.write_document("notes/a.md", "new\r\ncontent")
        assert vault.read_document("notes/a.md") == "new\r\ncontent"

    def test_read_missing_document(self, vault: FolderVault) -> None:
        """Test that a missing document raises DocumentError."""
        with pytest.raises(DocumentError) as exc_info:
            vault.read_document("nope.md")
        assert exc_info.value.source_id == "nope.md"

    def test_path_cannot_escape_vault(self, vault: FolderVault) -> None:
        """Test that ids pointing outside the root are refused."""
        with pytest.raises(DocumentError, match="escapes"):
            vault.path_of("../outside.md")

    def test_source_id_of_path(self, vault: FolderVault) -> None:
        """Test that paths map back to POSIX ids."""
        assert vault.source_id(vault.root / "notes" / "a.md") == "notes/a.md"

    def test_source_id_outside_vault(self, vault: FolderVault, tmp_path: Path) -> None:
        """Test that a path outside the vault has no id."""
        with pytest.raises(DocumentError, match="not inside vault"):
            vault.source_id(tmp_path / "elsewhere.md")

    def test_open_records_selection(self, vault: FolderVault) -> None:
        """Test that opened documents are remembered."""
        vault.open_by_source_id("definitions/terms.md")
        assert vault.opened == ["definitions/terms.md"]

    def test_definitions_dir(self, vault: FolderVault) -> None:
        """Test the absolute definitions folder path."""
        assert vault.definitions_dir == vault.root / "definitions"
