"""Tests for custom exception hierarchy in deflink.lib.errors."""

import builtins

import pytest

from deflink.lib.errors import (
    ConfigError,
    DefLinkError,
    DocumentError,
    FileNotFoundError,
)


@pytest.mark.unit
class TestDefLinkError:
    """Tests for base DefLinkError exception."""

    def test_deflink_error_creates_with_message(self) -> None:
        """Test that DefLinkError can be created with a message."""
        error = DefLinkError("Test error message")
        assert str(error) == "Test error message"

    def test_deflink_error_is_exception(self) -> None:
        """Test that DefLinkError is an Exception subclass."""
        assert isinstance(DefLinkError("Test"), Exception)

    def test_deflink_error_preserves_message(self) -> None:
        """Test that DefLinkError preserves the original message."""
        msg = "Detailed error description"
        assert DefLinkError(msg).args[0] == msg


@pytest.mark.unit
class TestConfigError:
    """Tests for ConfigError exception."""

    def test_config_error_formats_message_with_field(self) -> None:
        """Test that ConfigError formats messages with field information."""
        error = ConfigError("cache_size", "must be positive")
        assert str(error) == "Configuration error in 'cache_size': must be positive"

    def test_config_error_keeps_attributes(self) -> None:
        """Test that field and message are available separately."""
        error = ConfigError("definitions_folder", "cannot be empty")
        assert error.field == "definitions_folder"
        assert error.message == "cannot be empty"

    def test_config_error_is_deflink_error(self) -> None:
        """Test that ConfigError is a DefLinkError subclass."""
        assert isinstance(ConfigError("test_field", "Test message"), DefLinkError)

    def test_config_error_with_multiline_message(self) -> None:
        """Test ConfigError handles multiline messages."""
        error = ConfigError("field", "Line 1\nLine 2")
        assert "Line 1" in str(error)
        assert "Line 2" in str(error)


@pytest.mark.unit
class TestFileNotFoundError:
    """Tests for FileNotFoundError exception."""

    def test_file_not_found_error_includes_path(self) -> None:
        """Test that FileNotFoundError includes the file path."""
        error = FileNotFoundError("/path/to/deflink.yaml", "File not found")
        assert "/path/to/deflink.yaml" in str(error)
        assert error.path == "/path/to/deflink.yaml"

    def test_file_not_found_error_is_deflink_error(self) -> None:
        """Test that FileNotFoundError is a DefLinkError subclass."""
        assert isinstance(FileNotFoundError("/x", "missing"), DefLinkError)

    def test_file_not_found_error_shadows_builtin(self) -> None:
        """Test that the builtin is not caught by mistake."""
        assert not issubclass(FileNotFoundError, builtins.FileNotFoundError)


@pytest.mark.unit
class TestDocumentError:
    """Tests for DocumentError exception."""

    def test_document_error_formats_message(self) -> None:
        """Test that the source id appears in the message."""
        error = DocumentError("notes/a.md", "cannot read")
        assert str(error) == "Document 'notes/a.md': cannot read"
        assert error.source_id == "notes/a.md"
        assert error.message == "cannot read"

    def test_document_error_is_deflink_error(self) -> None:
        """Test that DocumentError is a DefLinkError subclass."""
        assert isinstance(DocumentError("a.md", "x"), DefLinkError)
