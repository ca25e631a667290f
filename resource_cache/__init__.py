"""
resource-cache is a client-side in-memory cache of named resources.

Resources are keyed by hierarchical names such as `apps/123/releases/456`.
Observers watch a set of names and are notified of changes to those names
or to any of their descendants, and unreferenced entries are reclaimed by
garbage collection.
"""

__all__ = [
    "config",
    "exceptions",
    "names",
    "resource",
    "store",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
