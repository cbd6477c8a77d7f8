"""Configuration model for deflink."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deflink.config.defaults import DEFAULT_CONFIG


class DefLinkConfig(BaseModel):
    """Settings that the host would normally persist.

    Attributes:
        definitions_folder: Folder (relative to the vault root) whose documents
            declare definitions
        auto_rewrite_on_save: Whether the save hook rewrites documents
        cache_size: Capacity of the parsed-document cache
        file_extensions: File suffixes treated as markdown documents
    """

    model_config = ConfigDict(extra="forbid")

    definitions_folder: str = Field(
        DEFAULT_CONFIG["definitions_folder"],
        description="Folder containing definition documents",
    )
    auto_rewrite_on_save: bool = Field(
        DEFAULT_CONFIG["auto_rewrite_on_save"],
        description="Rewrite documents automatically when they are saved",
    )
    cache_size: int = Field(
        DEFAULT_CONFIG["cache_size"],
        ge=1,
        description="Maximum number of parsed documents kept in memory",
    )
    file_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONFIG["file_extensions"]),
        min_length=1,
        description="File suffixes treated as markdown documents",
    )

    @field_validator("definitions_folder")
    @classmethod
    def validate_definitions_folder(cls, v: str) -> str:
        """Normalize the folder to a relative POSIX path without slashes."""
        folder = v.strip().replace("\\", "/").strip("/")
        if not folder:
            raise ValueError("definitions_folder cannot be empty")
        return folder

    @field_validator("file_extensions")
    @classmethod
    def validate_file_extensions(cls, v: list[str]) -> list[str]:
        """Ensure every extension is lowercase and starts with a dot."""
        normalized: list[str] = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("file_extensions cannot contain empty values")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized
