"""Fingerprint-keyed LRU cache of parsed markdown structure trees.

Rewriting a document usually happens on every save while the content of
most documents does not change in between, so trees are cached by a fast
hash of the text rather than by document identity.

Fingerprints are 64-bit xxHash digests and are trusted as-is: two different
texts sharing a fingerprint would share a tree. With a bounded working set
this is an accepted risk rather than a handled error.
"""

import threading
from collections import OrderedDict
from collections.abc import Callable

import xxhash

from deflink.config.defaults import DEFAULT_CONFIG
from deflink.lib.logging_config import get_logger
from deflink.lib.markdown_tree import MarkdownNode, parse_markdown

logger = get_logger(__name__)

DEFAULT_CAPACITY: int = DEFAULT_CONFIG["cache_size"]


def fingerprint(content: str) -> int:
    """Return the 64-bit xxHash fingerprint of a document's text."""
    return xxhash.xxh64_intdigest(content.encode("utf-8", "surrogatepass"))


class ASTCache:
    """Bounded LRU cache from document fingerprint to structure tree.

    All lookups, inserts and recency updates happen under a single lock, so
    one cache can be shared between threads. Parsing runs outside the lock;
    two threads missing on the same text may both parse it, which is harmless
    because trees are immutable.

    Attributes:
        capacity: Maximum number of trees kept
        hits: Number of lookups served from the cache
        misses: Number of lookups that required a parse

    Example:
        >>> cache = ASTCache(capacity=2)
        >>> tree = cache.get_or_parse("# Title")
        >>> cache.get_or_parse("# Title") is tree
        True
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        parser: Callable[[str], MarkdownNode] = parse_markdown,
    ) -> None:
        """Initialize an empty cache.

        Args:
            capacity: Maximum number of entries. Must be positive.
            parser: Function producing a tree from document text.

        Raises:
            ValueError: If capacity is not positive.
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._parser = parser
        self._entries: OrderedDict[int, MarkdownNode] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        """Get the maximum number of cached trees."""
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, content: object) -> bool:
        if not isinstance(content, str):
            return False
        with self._lock:
            return fingerprint(content) in self._entries

    def get_or_parse(self, content: str) -> MarkdownNode:
        """Return the tree for ``content``, parsing it on a cache miss.

        A hit marks the entry as most recently used. A miss parses the text
        and inserts the tree, evicting the least recently used entry when the
        cache is full.

        Args:
            content: Complete document text

        Returns:
            The structure tree of the document.
        """
        key = fingerprint(content)

        with self._lock:
            tree = self._entries.get(key)
            if tree is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return tree
            self.misses += 1

        tree = self._parser(content)

        with self._lock:
            self._entries[key] = tree
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted tree {evicted:016x} from cache")
        return tree

    def clear(self) -> None:
        """Drop every cached tree and reset the counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


_default_cache: ASTCache | None = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> ASTCache:
    """Return the process-wide cache used when callers do not pass one."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = ASTCache()
        return _default_cache
