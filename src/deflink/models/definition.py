"""Glossary data models.

Definitions are parsed from glossary source documents. Each one anchors a
canonical heading and its aliases to the document that declares them, and
is the unit that the rewriter turns into cross-reference links.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Definition(BaseModel):
    """A glossary entry: a heading plus the aliases that resolve to it.

    Attributes:
        source_id: Opaque identifier of the defining document (e.g. its path)
        heading: Canonical display term, exactly as written in the heading
        aliases: Heading followed by the declared aliases in document order.
            Matching is case-insensitive; the original casing is kept.

    Example:
        >>> definition = Definition(
        ...     source_id="definitions/terms.md",
        ...     heading="Term1",
        ...     aliases=["Term1", "Alias1", "Alias2"],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(..., description="Identifier of the defining document")
    heading: str = Field(..., description="Canonical display term")
    aliases: tuple[str, ...] = Field(
        ..., min_length=1, description="Heading followed by declared aliases"
    )

    @field_validator("aliases")
    @classmethod
    def validate_aliases(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject empty alias strings, which would match everywhere."""
        for alias in v:
            if not alias:
                raise ValueError("aliases cannot contain empty strings")
        return v


ConflictReport = dict[str, list[Definition]]


class GlossarySnapshot(BaseModel):
    """Immutable view of a refreshed glossary.

    A new snapshot is built on every refresh and swapped in as a whole, so
    a rewrite never observes a partially rebuilt glossary.
    """

    model_config = ConfigDict(frozen=True)

    definitions: tuple[Definition, ...] = ()
    conflicts: ConflictReport = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return True when the glossary holds no definitions."""
        return not self.definitions


class RewriteStatus(str, Enum):
    """Outcome of a rewrite request, for host-facing reporting."""

    NO_DEFINITIONS = "no_definitions"
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"


class RewriteResult(BaseModel):
    """Rewritten document content together with what happened to it."""

    status: RewriteStatus
    content: str

    @property
    def changed(self) -> bool:
        """Return True when the content differs from the input."""
        return self.status == RewriteStatus.REWRITTEN


@dataclass(frozen=True)
class ProseSpan:
    """Half-open character range of substitutable prose in a document.

    Attributes:
        start: Offset of the first character of the span
        end: Offset one past the last character of the span
    """

    start: int
    end: int

    def text(self, content: str) -> str:
        """Return the part of ``content`` covered by this span."""
        return content[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start
