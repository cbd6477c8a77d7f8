"""Filesystem document host.

A vault is a directory of markdown documents. Documents are identified by
their POSIX path relative to the vault root, which is also what ends up as
the target of generated links (``[[definitions/terms.md#Term|term]]``).
"""

from collections.abc import Iterator
from pathlib import Path

from deflink.lib.errors import DocumentError
from deflink.lib.logging_config import get_logger
from deflink.models.config import DefLinkConfig

logger = get_logger(__name__)


class FolderVault:
    """DocumentHost over a directory of markdown files.

    Definition sources are the documents under ``config.definitions_folder``;
    rewrite targets are all other documents. Content is read and written as
    UTF-8 with line endings preserved.

    Attributes:
        root: Vault root directory
        config: Settings naming the definitions folder and file extensions
        opened: Source ids passed to ``open_by_source_id``, most recent last
    """

    def __init__(self, root: str | Path, config: DefLinkConfig | None = None) -> None:
        """Initialize the vault.

        Args:
            root: Vault root directory
            config: Settings, defaults to DefLinkConfig()

        Raises:
            DocumentError: If the root is not a directory
        """
        self.root = Path(root).resolve()
        self.config = config or DefLinkConfig()
        self.opened: list[str] = []
        if not self.root.is_dir():
            raise DocumentError(str(root), "vault root is not a directory")

    @property
    def definitions_dir(self) -> Path:
        """Get the absolute path of the definitions folder."""
        return self.root / self.config.definitions_folder

    def source_id(self, path: str | Path) -> str:
        """Return the source id of a path inside the vault.

        Raises:
            DocumentError: If the path is outside the vault
        """
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = Path.cwd() / resolved
        try:
            return resolved.resolve().relative_to(self.root).as_posix()
        except ValueError as e:
            raise DocumentError(str(path), f"not inside vault {self.root}") from e

    def path_of(self, source_id: str) -> Path:
        """Return the absolute path of a document.

        Raises:
            DocumentError: If the id escapes the vault root
        """
        path = (self.root / source_id).resolve()
        if not path.is_relative_to(self.root):
            raise DocumentError(source_id, "path escapes the vault root")
        return path

    def is_definition_source(self, source_id: str) -> bool:
        """Return True if the document lives in the definitions folder."""
        folder = self.config.definitions_folder
        return source_id == folder or source_id.startswith(f"{folder}/")

    def iter_documents(self) -> Iterator[str]:
        """Yield the source id of every markdown document, sorted."""
        extensions = set(self.config.file_extensions)
        paths = sorted(
            path
            for path in self.root.rglob("*")
            if path.is_file() and path.suffix.lower() in extensions
        )
        for path in paths:
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            yield relative.as_posix()

    def list_definition_sources(self) -> list[tuple[str, str]]:
        """Return ``(source_id, content)`` of every definition document."""
        if not self.definitions_dir.is_dir():
            logger.warning(f"Definitions folder {self.definitions_dir} does not exist")
            return []
        return [
            (source_id, self.read_document(source_id))
            for source_id in self.iter_documents()
            if self.is_definition_source(source_id)
        ]

    def list_rewrite_targets(self) -> list[tuple[str, str]]:
        """Return ``(source_id, content)`` of every non-definition document."""
        return [
            (source_id, self.read_document(source_id))
            for source_id in self.iter_documents()
            if not self.is_definition_source(source_id)
        ]

    def read_document(self, source_id: str) -> str:
        """Read a document.

        Raises:
            DocumentError: If the document cannot be read
        """
        path = self.path_of(source_id)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(source_id, f"cannot read {path}: {e}") from e

    def write_document(self, source_id: str, content: str) -> None:
        """Overwrite a document.

        Raises:
            DocumentError: If the document cannot be written
        """
        path = self.path_of(source_id)
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise DocumentError(source_id, f"cannot write {path}: {e}") from e
        logger.debug(f"Wrote {len(content)} characters to {source_id}")

    def open_by_source_id(self, source_id: str) -> None:
        """Record the selection; a plain folder has no view to open it in."""
        self.opened.append(source_id)
        logger.info(f"Selected {self.path_of(source_id)}")
