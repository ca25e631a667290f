"""
The store module provides the in-memory cache of named resources.

- Uses the hierarchical resource name as the key for all resources.
- Notifies watchers of changes to a name or any of its descendants.
- Reclaims resources that are no longer watched with garbage collection.

The abstract interface allows consumers to depend on the `Store` while the
application constructs a single `ResourceStore` and passes it around.
"""

from .store import Store, WatchCallback, ArrayWatchCallback
from .in_memory import ResourceStore
from .watcher import WatchHandle

__all__ = [
    "Store",
    "ResourceStore",
    "WatchHandle",
    "WatchCallback",
    "ArrayWatchCallback",
]
