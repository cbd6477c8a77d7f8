"""Custom exception hierarchy for deflink configuration and document access.

The linking engine itself never raises for malformed markdown; these
exceptions cover the layers around it (configuration loading and the
document host).
"""


class DefLinkError(Exception):
    """Base exception for all deflink errors.

    All deflink-specific exceptions inherit from this class, enabling
    centralized exception handling in the command line interface.
    """

    pass


class ConfigError(DefLinkError):
    """Exception raised for configuration errors.

    Raised when the configuration file cannot be parsed or when a field
    fails validation.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class FileNotFoundError(DefLinkError):
    """Exception raised when a configuration file is not found.

    Attributes:
        path: Path to the file that was not found
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize FileNotFoundError with path and message.

        Args:
            path: Path to the file that was not found
            message: Descriptive error message, optionally with suggestions
        """
        self.path = path
        self.message = message
        super().__init__(f"File not found: {path}\n{message}")


class DocumentError(DefLinkError):
    """Exception raised when a host cannot read or write a document."""

    def __init__(self, source_id: str, message: str) -> None:
        """Create a document error for the given source identifier."""
        self.source_id = source_id
        self.message = message
        super().__init__(f"Document '{source_id}': {message}")
