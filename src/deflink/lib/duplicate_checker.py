"""Detection of aliases claimed by more than one definition."""

from collections.abc import Iterable

from deflink.models.definition import ConflictReport, Definition


def find_duplicate_aliases(definitions: Iterable[Definition]) -> ConflictReport:
    """Find aliases declared by two or more definitions.

    Aliases are compared exactly as declared (case-sensitive). A definition
    that repeats one of its own aliases is counted once for it.

    Args:
        definitions: The full glossary, in glossary order

    Returns:
        Mapping from alias to the definitions declaring it, in encounter
        order. Keys appear in the order the alias was first seen; aliases
        with a single owner are omitted.

    Example:
        >>> a = Definition(source_id="a.md", heading="A", aliases=["a1", "a2"])
        >>> b = Definition(source_id="b.md", heading="B", aliases=["a2", "a3"])
        >>> find_duplicate_aliases([a, b]) == {"a2": [a, b]}
        True
    """
    alias_to_definitions: dict[str, list[Definition]] = {}

    for definition in definitions:
        for alias in dict.fromkeys(definition.aliases):
            alias_to_definitions.setdefault(alias, []).append(definition)

    return {
        alias: owners
        for alias, owners in alias_to_definitions.items()
        if len(owners) >= 2
    }
