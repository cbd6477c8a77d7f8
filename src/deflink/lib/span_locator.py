"""Locate the prose spans of a document that may receive links."""

from collections.abc import Iterator

from deflink.lib.ast_cache import ASTCache, get_default_cache
from deflink.lib.markdown_tree import LINK_NODE_TYPES, MarkdownNode, NodeType
from deflink.models.definition import ProseSpan


def iter_text_nodes(tree: MarkdownNode) -> Iterator[MarkdownNode]:
    """Yield the substitutable text nodes of a tree in document order.

    Text nodes that are direct children of a link-like node are skipped:
    they are either a caption or the literal link target.
    """
    for node, parent in tree.walk():
        if node.type is not NodeType.TEXT or node.start >= node.end:
            continue
        if parent is not None and parent.type in LINK_NODE_TYPES:
            continue
        yield node


def prose_spans(content: str, cache: ASTCache | None = None) -> list[ProseSpan]:
    """Return the spans of ``content`` that contain only plain prose.

    Args:
        content: Complete markdown document
        cache: Tree cache to use, defaults to the process-wide cache

    Returns:
        Ascending, non-overlapping spans. Code, link text, inline HTML and
        front matter are never covered. Empty when there is no prose.
    """
    tree = (cache or get_default_cache()).get_or_parse(content)
    return [ProseSpan(node.start, node.end) for node in iter_text_nodes(tree)]
