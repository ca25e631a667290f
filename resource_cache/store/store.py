"""Store module for holding resources and notifying watchers of changes."""

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Callable, Iterable
from typing import TYPE_CHECKING

from resource_cache.resource import Resource

if TYPE_CHECKING:
    from .watcher import WatchHandle


WatchCallback = Callable[[str, Resource | None], None]
"""Called with the changed name and the new resource, or None on delete."""

ArrayWatchCallback = Callable[[list[Resource], str, Resource | None], None]
"""Called with the present resources of a watch, the changed name and data."""


class Store(ABC):
    """Abstract base class for a cache of named resources with watch support."""

    @abstractmethod
    def add(self, *items: Resource) -> "WatchHandle":
        """Add or replace resources in the store.

        Resources structurally equal to the stored value under the same name
        are skipped without notifying watchers.

        Returns a watch handle scoped to the names of the added resources.
        """

    @abstractmethod
    def get(self, name: str) -> Resource | None:
        """Return the resource stored under the name, or None if absent."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the resource stored under the name and notify watchers."""

    @abstractmethod
    def watch(self, *names: str) -> "WatchHandle":
        """Return a handle used to register callbacks for the names."""

    @abstractmethod
    def garbage_collect(self) -> list[str]:
        """Remove every resource that is not covered by a live watch.

        Watchers are not notified of removals. Returns the removed names.
        """

    @abstractmethod
    def list_resources(self, prefix: str | None = None) -> list[Resource]:
        """List all resources in the store, optionally under a name prefix."""

    @abstractmethod
    def watch_count(self, name: str) -> int:
        """Return the number of live subscriptions for exactly the name."""

    @abstractmethod
    def register_callback(self, callback: WatchCallback, names: Iterable[str]) -> None:
        """Register a notification callback holding a reference to each name.

        Registering a callback that is already registered has no effect.
        """

    @abstractmethod
    def unregister_callback(self, callback: WatchCallback) -> None:
        """Remove a callback and release the names it was registered with."""

    @abstractmethod
    async def watch_exists(self, name: str) -> Resource:
        """
        Wait for a resource to exist in the store.

        If the resource already exists, returns it immediately. The caller is
        expected to handle timeouts.

        Args:
            name: The name of the resource to wait for.

        Returns:
            The resource once it has been added to the store.

        Raises:
            asyncio.CancelledError: If the watch is cancelled.
        """

    @abstractmethod
    async def watch_changes(
        self, *names: str
    ) -> AsyncGenerator[tuple[str, Resource | None]]:
        """
        Watch for changes to the names or any of their descendants.

        This is an asynchronous iterator that yields a tuple of the changed
        name and the new resource, or None when the resource was deleted.

        Args:
            names: The names to watch.

        Yields:
            A tuple of the changed name and its resource.
        """
        if TYPE_CHECKING:
            yield "", None
