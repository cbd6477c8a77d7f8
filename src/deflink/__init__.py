"""deflink - Link glossary terms in markdown documents to their definitions.

Definitions are declared in glossary documents as a level-1 heading followed
by an ``aliases:`` line. deflink rewrites other documents so that every
occurrence of a term or alias becomes a wiki-style link to its definition,
leaving code, existing links and bracketed text alone.

Main features:
- Definition parsing and alias conflict detection
- Structure-aware prose detection backed by a cached markdown parse
- Bracket-safe, case-preserving link substitution
- Filesystem vault host and command line interface
"""

from collections.abc import Sequence

from deflink.lib.alias_matcher import SAME_CAPTURE_GROUP, replace_outside_brackets
from deflink.lib.ast_cache import ASTCache
from deflink.lib.definition_parser import parse_definitions
from deflink.lib.duplicate_checker import find_duplicate_aliases
from deflink.lib.errors import ConfigError, DefLinkError, DocumentError
from deflink.lib.rewriter import format_link, rewrite_definitions
from deflink.lib.span_locator import prose_spans
from deflink.models.definition import (
    ConflictReport,
    Definition,
    GlossarySnapshot,
    ProseSpan,
    RewriteResult,
    RewriteStatus,
)
from deflink.services.glossary_service import GlossaryService, refresh_glossary

__version__ = "0.1.0"


def rewrite_document(glossary: Sequence[Definition], content: str) -> str:
    """Rewrite ``content`` with the given glossary snapshot."""
    return rewrite_definitions(glossary, content)


__all__ = [
    "__version__",
    "ASTCache",
    "ConfigError",
    "ConflictReport",
    "DefLinkError",
    "Definition",
    "DocumentError",
    "GlossaryService",
    "GlossarySnapshot",
    "ProseSpan",
    "RewriteResult",
    "RewriteStatus",
    "SAME_CAPTURE_GROUP",
    "find_duplicate_aliases",
    "format_link",
    "parse_definitions",
    "prose_spans",
    "refresh_glossary",
    "replace_outside_brackets",
    "rewrite_definitions",
    "rewrite_document",
]
