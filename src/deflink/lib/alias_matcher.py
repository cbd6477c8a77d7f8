"""Bracket-aware, case-insensitive literal replacement.

This is the lexical layer under the structural span exclusion of the
rewriter: even inside a prose span, text wrapped in ``[...]`` (including
links produced by an earlier replacement) is never matched again.
"""

import re

# Placeholder in a replacement template for the verbatim matched text
SAME_CAPTURE_GROUP = "$&"


def build_pattern(from_: str) -> re.Pattern[str]:
    """Compile the search pattern for a literal alias.

    The pattern refuses matches that start with ``[`` and matches followed
    by a ``]`` with no ``[`` in between. Only the closing side is checked,
    so ``Term] x`` is left alone while ``[Term x`` is not.

    Args:
        from_: Literal text to search for; regex metacharacters are escaped.

    Returns:
        Case-insensitive compiled pattern.
    """
    return re.compile(
        rf"(?!\[[^\]]*){re.escape(from_)}(?![^\[]*\])",
        re.IGNORECASE,
    )


def replace_outside_brackets(from_: str, to: str, content: str) -> str:
    """Replace every occurrence of ``from_`` that is not inside brackets.

    Matching is literal and case-insensitive. ``SAME_CAPTURE_GROUP`` inside
    ``to`` is substituted with the text that actually matched, so the
    original casing survives in the replacement. Nothing else in ``to`` is
    interpreted (backslashes and other ``$`` sequences are kept as-is).

    Args:
        from_: Literal text to search for
        to: Replacement template
        content: Text to search in

    Returns:
        A new string with the replacements applied.

    Example:
        >>> replace_outside_brackets("world", "[$&]", "Hello, World! [world]")
        'Hello, [World]! [world]'
    """
    if not content or not from_:
        return content

    pattern = build_pattern(from_)
    if SAME_CAPTURE_GROUP in to:
        return pattern.sub(
            lambda m: to.replace(SAME_CAPTURE_GROUP, m.group(0)), content
        )
    return pattern.sub(lambda m: to, content)
