"""Lightweight markdown structure tree with source offsets.

This module turns a markdown document into an immutable tree of
``MarkdownNode`` objects whose ``start``/``end`` offsets point back into the
original string. Only the constructs that matter for linking are modelled:

- Block level (via markdown-it-py): paragraphs, headings, fenced and
  indented code, HTML blocks and YAML front matter
- Inline level (via a small scanner): plain text runs, code spans, standard
  and reference links, images, wiki links (``[[target|display]]``),
  autolinks, bare URLs and inline HTML

Everything else (emphasis, lists, tables, block quotes) is passed through as
plain text of the enclosing paragraph, which is enough to never break it.

Key Features:
- Offsets are exact character positions in the input, whatever its line
  endings (``\\n``, ``\\r\\n`` or ``\\r``)
- A text run spans soft line breaks, but is split where a container marker
  such as ``> `` sits between two lines, so markers never sit inside a
  text node
- Link labels are a single text child of their link node
"""

import bisect
import re
from collections import defaultdict
import string
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin

from deflink.lib.logging_config import get_logger

logger = get_logger(__name__)


class NodeType(str, Enum):
    """Kinds of nodes in the structure tree.

    Attributes:
        ROOT: The whole document
        PARAGRAPH: Paragraph block (also inside lists and block quotes)
        HEADING: ATX or setext heading
        CODE: Fenced or indented code block
        HTML: Raw HTML block
        FRONT_MATTER: YAML front matter at the top of the document
        TEXT: Plain prose run
        INLINE_CODE: Backtick code span
        LINK: Inline or reference link
        IMAGE: Inline or reference image
        WIKI_LINK: Internal cross-reference ``[[target|display]]`` or embed
        AUTOLINK: ``<scheme:...>``, ``<user@host>`` or bare URL
        HTML_INLINE: Inline HTML tag or comment
    """

    ROOT = "root"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE = "code"
    HTML = "html"
    FRONT_MATTER = "front_matter"
    TEXT = "text"
    INLINE_CODE = "inline_code"
    LINK = "link"
    IMAGE = "image"
    WIKI_LINK = "wiki_link"
    AUTOLINK = "autolink"
    HTML_INLINE = "html_inline"


# Nodes whose direct text children are captions or literal targets
LINK_NODE_TYPES = frozenset(
    {NodeType.LINK, NodeType.IMAGE, NodeType.WIKI_LINK, NodeType.AUTOLINK}
)


@dataclass(frozen=True)
class MarkdownNode:
    """A node of the structure tree.

    Attributes:
        type: Node kind
        start: Offset of the first character in the source document
        end: Offset one past the last character in the source document
        children: Child nodes in document order
        target: Link destination, wiki link target, reference label or code
            fence info string, when applicable

    Example:
        >>> tree = parse_markdown("See [docs](http://x) and `code`")
        >>> [(n.type.value, n.start, n.end) for n in tree.children[0].children]
        [('text', 0, 4), ('link', 4, 20), ('text', 20, 25), ('inline_code', 25, 31)]
    """

    type: NodeType
    start: int
    end: int
    children: tuple["MarkdownNode", ...] = ()
    target: str | None = None

    def walk(
        self, parent: "MarkdownNode | None" = None
    ) -> Iterator[tuple["MarkdownNode", "MarkdownNode | None"]]:
        """Yield ``(node, parent)`` pairs depth-first in document order."""
        yield self, parent
        for child in self.children:
            yield from child.walk(self)

    def text(self, content: str) -> str:
        """Return the source text covered by this node."""
        return content[self.start : self.end]


_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ASCII_PUNCTUATION = frozenset(string.punctuation)

_SPECIAL = re.compile(r"[\\`\[!<]|(?<![\w/])(?:https?://|www\.)", re.IGNORECASE)
_BACKTICKS = re.compile(r"`+")
_BRACKET_WALK = re.compile(r"[\\`\[\]]")
_WIKI_STOP = re.compile(r"[\[\]\n]")
_SOFT_BREAK = re.compile(r"[ \t]*(?:\r\n|\r|\n)[ \t]*")
_AUTOLINK = re.compile(r"<([A-Za-z][A-Za-z0-9+.\-]{1,31}:[^\s<>]*)>")
_EMAIL_AUTOLINK = re.compile(
    r"<([A-Za-z0-9.!#$%&'*+/=?^_`{|}~\-]+@[A-Za-z0-9]"
    r"(?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?)*)>"
)
_HTML_INLINE = re.compile(
    r"<!--.*?-->"
    r"|</[A-Za-z][A-Za-z0-9\-]*\s*>"
    r"|<[A-Za-z][A-Za-z0-9\-]*"
    r"(?:\s+[A-Za-z_:][\w.:\-]*(?:\s*=\s*(?:[^\s\"'=<>`]+|'[^']*'|\"[^\"]*\"))?)*"
    r"\s*/?>",
    re.DOTALL,
)
_BARE_URL = re.compile(
    r"(?:https?://|www\.)[^\s<>]*[^\s<>?!.,:;*_~'\")\]]", re.IGNORECASE
)


def _build_parser() -> MarkdownIt:
    """Create the block-level parser shared by all parse calls."""
    md = MarkdownIt("commonmark")
    md.use(front_matter_plugin)
    # Inline structure comes from _InlineScanner
    md.disable("inline")
    return md


_BLOCK_PARSER = _build_parser()


def normalize_label(label: str) -> str:
    """Normalize a link reference label for case-insensitive lookup."""
    return " ".join(label.split()).casefold()


def line_bounds(content: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of every line, excluding line breaks."""
    bounds: list[tuple[int, int]] = []
    position = 0
    for match in _LINE_BREAK.finditer(content):
        bounds.append((position, match.start()))
        position = match.end()
    bounds.append((position, len(content)))
    return bounds


@dataclass(frozen=True)
class _Inline:
    """Inline construct found by the scanner, in scan-string coordinates."""

    type: NodeType
    start: int
    end: int
    label: tuple[int, int] | None = None
    target: str | None = None


class _SourceMap:
    """Maps offsets of an inline scan string back to the source document.

    The scan string is the inline content of one block: one exact source
    substring per line, joined with ``\\n``.
    """

    def __init__(self, pieces: list[tuple[int, int]]) -> None:
        self._scan_starts: list[int] = []
        self._pieces = pieces
        position = 0
        for source_start, source_end in pieces:
            self._scan_starts.append(position)
            position += source_end - source_start + 1

    def to_source(self, position: int) -> int:
        """Translate a scan-string offset to a source offset."""
        index = bisect.bisect_right(self._scan_starts, position) - 1
        source_start, source_end = self._pieces[index]
        return min(source_start + position - self._scan_starts[index], source_end)

    def to_source_range(self, start: int, end: int) -> tuple[int, int]:
        """Translate a non-empty half-open scan-string range."""
        return self.to_source(start), self.to_source(end - 1) + 1


class _InlineScanner:
    """Finds code spans, links and HTML in the inline content of one block.

    Closing backtick runs and matching brackets are looked up in tables
    built once per scan string, so unmatched openers cost no rescans.
    """

    def __init__(self, text: str, references: frozenset[str]) -> None:
        self.text = text
        self.references = references
        self._runs_by_length: dict[int, list[int]] = defaultdict(list)
        for run in _BACKTICKS.finditer(text):
            self._runs_by_length[len(run.group())].append(run.start())
        self._bracket_close: dict[int, int | None] = {}

    def scan(self) -> list[_Inline]:
        """Return the constructs in order, with text runs filling the gaps."""
        text = self.text
        nodes: list[_Inline] = []
        text_start = 0
        position = 0

        while position < len(text):
            match = _SPECIAL.search(text, position)
            if match is None:
                break
            index = match.start()
            found, advance = self._construct_at(index)
            if found is None:
                position = index + advance
                continue
            if text_start < found.start:
                nodes.append(_Inline(NodeType.TEXT, text_start, found.start))
            nodes.append(found)
            position = text_start = found.end

        if text_start < len(text):
            nodes.append(_Inline(NodeType.TEXT, text_start, len(text)))
        return nodes

    def _construct_at(self, index: int) -> tuple[_Inline | None, int]:
        """Try to read a construct at ``index``.

        Returns:
            The construct (or None) and, when None, how far to skip ahead.
        """
        text = self.text
        char = text[index]

        if char == "\\":
            if index + 1 < len(text) and text[index + 1] in _ASCII_PUNCTUATION:
                return None, 2
            return None, 1

        run = _BACKTICKS.match(text, index)
        if run is not None:
            close = self._find_code_close(run.end(), len(run.group()))
            if close is None:
                return None, len(run.group())
            return _Inline(NodeType.INLINE_CODE, index, close), 0

        if char == "!":
            if text.startswith("![[", index):
                wiki = self._wiki_link(index + 1)
                if wiki is not None:
                    return _Inline(
                        NodeType.WIKI_LINK,
                        index,
                        wiki.end,
                        label=wiki.label,
                        target=wiki.target,
                    ), 0
            if text.startswith("![", index):
                image = self._link(index + 1)
                if image is not None:
                    return _Inline(
                        NodeType.IMAGE, index, image.end, target=image.target
                    ), 0
            return None, 1

        if char == "[":
            if text.startswith("[[", index):
                wiki = self._wiki_link(index)
                if wiki is not None:
                    return wiki, 0
            return self._link(index), 1

        if char == "<":
            return self._angle(index), 1

        url = _BARE_URL.match(text, index)
        if url is not None:
            return _Inline(
                NodeType.AUTOLINK,
                index,
                url.end(),
                label=(index, url.end()),
                target=url.group(),
            ), 0
        return None, 1

    def _find_code_close(self, position: int, length: int) -> int | None:
        """Return the end of the backtick run closing a code span, if any."""
        starts = self._runs_by_length.get(length)
        if not starts:
            return None
        index = bisect.bisect_left(starts, position)
        if index == len(starts):
            return None
        return starts[index] + length

    def _skip_code(self, position: int) -> int:
        """Return the offset after the code span or backtick run at ``position``."""
        run = _BACKTICKS.match(self.text, position)
        if run is None:
            return position + 1
        close = self._find_code_close(run.end(), len(run.group()))
        return close if close is not None else run.end()

    def _match_bracket(self, index: int) -> int | None:
        """Return the index of the ``]`` matching the ``[`` at ``index``."""
        if index not in self._bracket_close:
            self._pair_brackets(index)
        return self._bracket_close[index]

    def _pair_brackets(self, start: int) -> None:
        """Pair every bracket reachable from ``start`` in one pass.

        Escapes and code spans are stepped over. Each ``[`` met on the way
        is recorded with its matching ``]``, or None when it is unmatched.
        """
        text = self.text
        opened: list[int] = []
        position = start
        while True:
            match = _BRACKET_WALK.search(text, position)
            if match is None:
                break
            position = match.start()
            char = text[position]
            if char == "\\":
                position += 2
            elif char == "`":
                position = self._skip_code(position)
            elif char == "[":
                opened.append(position)
                position += 1
            else:
                if opened:
                    self._bracket_close.setdefault(opened.pop(), position)
                position += 1
        for unmatched in opened:
            self._bracket_close.setdefault(unmatched, None)

    def _skip_whitespace(self, position: int) -> int:
        text = self.text
        while position < len(text) and text[position] in " \t\n":
            position += 1
        return position

    def _link_tail(self, index: int) -> tuple[int, str] | None:
        """Parse ``(destination "title")`` starting at the ``(`` at ``index``.

        Returns:
            End offset after ``)`` and the destination, or None.
        """
        text = self.text
        position = self._skip_whitespace(index + 1)

        if position < len(text) and text[position] == "<":
            close = text.find(">", position + 1)
            if close < 0 or "\n" in text[position + 1 : close]:
                return None
            destination = text[position + 1 : close]
            after = close + 1
        else:
            start = position
            depth = 0
            while position < len(text):
                char = text[position]
                if char == "\\" and position + 1 < len(text):
                    position += 2
                    continue
                if char.isspace() or ord(char) < 0x20:
                    break
                if char == "(":
                    depth += 1
                elif char == ")":
                    if depth == 0:
                        break
                    depth -= 1
                position += 1
            if depth != 0:
                return None
            destination = text[start:position]
            after = position

        position = self._skip_whitespace(after)
        if position > after and position < len(text) and text[position] in "\"'(":
            closer = ")" if text[position] == "(" else text[position]
            position += 1
            while position < len(text) and text[position] != closer:
                if text[position] == "\\":
                    position += 1
                position += 1
            if position >= len(text):
                return None
            position = self._skip_whitespace(position + 1)

        if position < len(text) and text[position] == ")":
            return position + 1, destination
        return None

    def _link(self, index: int) -> _Inline | None:
        """Read a link whose label opens at ``index``."""
        text = self.text
        close = self._match_bracket(index)
        if close is None:
            return None
        label = (index + 1, close)
        after = close + 1

        if after < len(text) and text[after] == "(":
            tail = self._link_tail(after)
            if tail is not None:
                end, destination = tail
                return _Inline(
                    NodeType.LINK, index, end, label=label, target=destination
                )

        if not self.references:
            return None

        if after < len(text) and text[after] == "[":
            ref_close = text.find("]", after + 1)
            if ref_close >= 0:
                reference = text[after + 1 : ref_close] or text[label[0] : label[1]]
                if normalize_label(reference) in self.references:
                    return _Inline(
                        NodeType.LINK,
                        index,
                        ref_close + 1,
                        label=label,
                        target=reference,
                    )

        reference = text[label[0] : label[1]]
        if normalize_label(reference) in self.references:
            return _Inline(NodeType.LINK, index, after, label=label, target=reference)
        return None

    def _wiki_link(self, index: int) -> _Inline | None:
        """Read ``[[target]]`` or ``[[target|display]]`` at ``index``."""
        text = self.text
        stop = _WIKI_STOP.search(text, index + 2)
        if stop is None or stop.start() == index + 2:
            return None
        close = stop.start()
        if not text.startswith("]]", close):
            return None
        inner = text[index + 2 : close]

        target, divider, _ = inner.partition("|")
        label_start = index + 2 + len(target) + len(divider)
        return _Inline(
            NodeType.WIKI_LINK,
            index,
            close + 2,
            label=(label_start, close) if label_start < close else None,
            target=target.strip(),
        )

    def _angle(self, index: int) -> _Inline | None:
        """Read an autolink or inline HTML starting with ``<``."""
        for pattern in (_AUTOLINK, _EMAIL_AUTOLINK):
            match = pattern.match(self.text, index)
            if match is not None:
                return _Inline(
                    NodeType.AUTOLINK,
                    index,
                    match.end(),
                    label=(index + 1, match.end() - 1),
                    target=match.group(1),
                )
        match = _HTML_INLINE.match(self.text, index)
        if match is not None:
            return _Inline(NodeType.HTML_INLINE, index, match.end())
        return None


def _text_nodes(
    content: str, scan_text: str, start: int, end: int, source_map: _SourceMap
) -> list[MarkdownNode]:
    """Build text nodes for a scan range.

    Lines joined by a bare line break (plus indentation) form one node, as
    in a soft-wrapped paragraph. A new node starts wherever a container
    marker such as ``> `` sits between two lines.
    """
    nodes: list[MarkdownNode] = []
    segment_start = start
    while True:
        newline = scan_text.find("\n", segment_start, end)
        segment_end = end if newline < 0 else newline
        if segment_end > segment_start:
            source_start, source_end = source_map.to_source_range(
                segment_start, segment_end
            )
            if nodes and _SOFT_BREAK.fullmatch(content, nodes[-1].end, source_start):
                nodes[-1] = MarkdownNode(NodeType.TEXT, nodes[-1].start, source_end)
            else:
                nodes.append(MarkdownNode(NodeType.TEXT, source_start, source_end))
        if newline < 0:
            return nodes
        segment_start = newline + 1


def _align_inline(
    content: str,
    bounds: list[tuple[int, int]],
    first_line: int,
    inline_content: str,
) -> list[tuple[int, int]] | None:
    """Locate each line of an inline token's content in the source.

    markdown-it strips container markers and indentation from the start of
    each line (and trims the block), so every content line is found at the
    end of its source line.

    Returns:
        One ``(start, end)`` source range per line, or None if the content
        cannot be aligned with the source.
    """
    pieces: list[tuple[int, int]] = []
    for offset, line in enumerate(inline_content.split("\n")):
        line_index = first_line + offset
        if line_index >= len(bounds):
            return None
        line_start, line_end = bounds[line_index]
        source_line = content[line_start:line_end]

        found = source_line.rfind(line)
        if found < 0:
            # Tabs in indentation are expanded by markdown-it
            stripped = line.lstrip()
            found = source_line.rfind(stripped)
            if found < 0:
                return None
            line = stripped
        pieces.append((line_start + found, line_start + found + len(line)))
    return pieces


def _parse_inline(
    content: str,
    bounds: list[tuple[int, int]],
    line_map: list[int],
    inline_content: str,
    references: frozenset[str],
) -> tuple[MarkdownNode, ...]:
    """Parse one inline token into nodes with source offsets."""
    pieces = _align_inline(content, bounds, line_map[0], inline_content)
    if pieces is None:
        logger.debug(f"Could not align inline content at line {line_map[0] + 1}")
        return ()

    source_map = _SourceMap(pieces)
    scan_text = "\n".join(content[start:end] for start, end in pieces)
    nodes: list[MarkdownNode] = []

    for item in _InlineScanner(scan_text, references).scan():
        if item.type is NodeType.TEXT:
            nodes.extend(
                _text_nodes(content, scan_text, item.start, item.end, source_map)
            )
            continue

        children: tuple[MarkdownNode, ...] = ()
        if item.label is not None and item.type is not NodeType.IMAGE:
            label_start, label_end = item.label
            children = tuple(
                _text_nodes(content, scan_text, label_start, label_end, source_map)
            )
        start, end = source_map.to_source_range(item.start, item.end)
        nodes.append(MarkdownNode(item.type, start, end, children, item.target))

    return tuple(nodes)


def _block_range(
    bounds: list[tuple[int, int]], line_map: list[int]
) -> tuple[int, int]:
    """Convert a markdown-it ``[first, last)`` line map to source offsets."""
    first, last = line_map
    last = min(max(last, first + 1), len(bounds))
    return bounds[first][0], bounds[last - 1][1]


_BLOCK_TYPES: dict[str, NodeType] = {
    "fence": NodeType.CODE,
    "code_block": NodeType.CODE,
    "html_block": NodeType.HTML,
    "front_matter": NodeType.FRONT_MATTER,
}
_CONTAINER_TYPES: dict[str, NodeType] = {
    "paragraph_open": NodeType.PARAGRAPH,
    "heading_open": NodeType.HEADING,
}


def parse_markdown(content: str) -> MarkdownNode:
    """Parse a markdown document into a structure tree.

    Args:
        content: Complete markdown document

    Returns:
        Root node spanning the whole document. Its children are the blocks
        that can contain prose (paragraphs, headings) and the blocks that
        must be left alone (code, HTML, front matter).
    """
    env: dict[str, Any] = {}
    tokens = _BLOCK_PARSER.parse(content, env)
    references = frozenset(
        normalize_label(label) for label in env.get("references", {})
    )
    bounds = line_bounds(content)
    blocks: list[MarkdownNode] = []

    for index, token in enumerate(tokens):
        if token.map is None:
            continue

        if token.type in _BLOCK_TYPES:
            start, end = _block_range(bounds, token.map)
            blocks.append(
                MarkdownNode(
                    _BLOCK_TYPES[token.type], start, end, target=token.info or None
                )
            )
            continue

        if token.type != "inline" or index == 0:
            continue
        container = _CONTAINER_TYPES.get(tokens[index - 1].type)
        if container is None:
            continue

        opener_map = tokens[index - 1].map or token.map
        start, end = _block_range(bounds, opener_map)
        children = _parse_inline(content, bounds, token.map, token.content, references)
        blocks.append(MarkdownNode(container, start, end, children))

    logger.debug(f"Parsed markdown into {len(blocks)} blocks")
    return MarkdownNode(NodeType.ROOT, 0, len(content), tuple(blocks))
