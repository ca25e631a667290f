"""Helpers for hierarchical resource names.

A name such as `apps/123/releases/456` denotes itself and each of its
ancestors `apps/123/releases`, `apps/123` and `apps`. Watch matching and
garbage collection are both defined in terms of this relation.
"""

__all__ = [
    "SEPARATOR",
    "ancestor_names",
    "is_descendant",
]

SEPARATOR = "/"


def ancestor_names(name: str, separator: str = SEPARATOR) -> list[str]:
    """Return every ancestor prefix of the name, ordered coarse to fine.

    The name itself is always the last element.
    """
    parts = name.split(separator)
    return [separator.join(parts[: i + 1]) for i in range(len(parts))]


def is_descendant(name: str, ancestor: str, separator: str = SEPARATOR) -> bool:
    """Return True if `ancestor` is an ancestor prefix of `name` or equal to it."""
    return ancestor in ancestor_names(name, separator)
