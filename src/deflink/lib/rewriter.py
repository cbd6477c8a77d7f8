"""Rewrite documents so that glossary terms link to their definitions."""

from collections.abc import Sequence

from deflink.lib.alias_matcher import SAME_CAPTURE_GROUP, replace_outside_brackets
from deflink.lib.ast_cache import ASTCache
from deflink.lib.logging_config import get_logger
from deflink.lib.span_locator import prose_spans
from deflink.models.definition import Definition

logger = get_logger(__name__)


def format_link(definition: Definition, display: str = SAME_CAPTURE_GROUP) -> str:
    """Build the cross-reference link to a definition.

    Args:
        definition: Definition to link to
        display: Visible link text; by default the matched text is kept

    Returns:
        ``[[<source_id>#<heading>|<display>]]``
    """
    return f"[[{definition.source_id}#{definition.heading}|{display}]]"


def rewrite_definitions(
    definitions: Sequence[Definition],
    content: str,
    cache: ASTCache | None = None,
) -> str:
    """Replace every glossary alias in the prose of ``content`` with a link.

    Spans are processed left to right. Inside a span, definitions are applied
    in glossary order and aliases in declaration order, each pass working on
    the output of the previous one. Links written by an earlier pass are
    bracketed, so later passes never match inside them. Text between spans
    (code, links, HTML) is copied verbatim.

    Args:
        definitions: Glossary to apply
        content: Complete markdown document
        cache: Tree cache to use, defaults to the process-wide cache

    Returns:
        The rewritten document, or ``content`` itself when there is nothing
        to apply or no prose to apply it to.

    Example:
        >>> term = Definition(
        ...     source_id="test.md", heading="Term1", aliases=["Term1", "Alias2"]
        ... )
        >>> rewrite_definitions([term], "Term1 and alias2")
        '[[test.md#Term1|Term1]] and [[test.md#Term1|alias2]]'
    """
    if not definitions:
        return content

    spans = prose_spans(content, cache)
    if not spans:
        return content

    replacements = [
        (alias, format_link(definition))
        for definition in definitions
        for alias in definition.aliases
    ]

    out: list[str] = []
    previous = 0
    for span in spans:
        out.append(content[previous : span.start])
        text = span.text(content)
        for alias, link in replacements:
            text = replace_outside_brackets(alias, link, text)
        out.append(text)
        previous = span.end
    out.append(content[previous:])

    logger.debug(
        f"Applied {len(replacements)} aliases over {len(spans)} prose spans"
    )
    return "".join(out)
