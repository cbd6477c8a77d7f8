"""Definition extraction from glossary source documents.

A definition is declared by a level-1 heading immediately followed by an
``aliases:`` line::

    # Force Majeure
    aliases: act of god, superior force

The heading is the canonical term; it is also the first alias. Anything
that does not fit this shape is ignored, so parsing never fails.
"""

import re

from deflink.lib.logging_config import get_logger
from deflink.models.definition import Definition

logger = get_logger(__name__)

# H1 heading line, then on the very next line the aliases list
DEFINITION_PATTERN = re.compile(
    r"^# ([^\r\n]+)\r?\naliases:([^\r\n]*)",
    re.MULTILINE,
)
ALIAS_SEPARATOR = ","


def split_aliases(raw: str) -> list[str]:
    """Split a comma-separated alias list, trimming and dropping empty entries."""
    return [alias.strip() for alias in raw.split(ALIAS_SEPARATOR) if alias.strip()]


def parse_definitions(source_id: str, content: str) -> list[Definition]:
    """Extract every definition declared in a document.

    Args:
        source_id: Identifier of the document, stored on each definition
        content: Raw markdown text of the document

    Returns:
        Definitions in document order. Each definition's aliases start with
        its heading, followed by the declared aliases in order (duplicates
        within one declaration are kept).

    Example:
        >>> [d.aliases for d in parse_definitions("f.md", "# Term\\naliases: A, B")]
        [['Term', 'A', 'B']]
    """
    definitions: list[Definition] = []

    for match in DEFINITION_PATTERN.finditer(content):
        heading = match.group(1).strip()
        aliases = split_aliases(match.group(2))
        if not heading or not aliases:
            logger.debug(
                f"Skipping incomplete definition in {source_id} at offset "
                f"{match.start()}"
            )
            continue

        definitions.append(
            Definition(
                source_id=source_id,
                heading=heading,
                aliases=[heading, *aliases],
            )
        )

    logger.debug(f"Parsed {len(definitions)} definitions from {source_id}")
    return definitions
