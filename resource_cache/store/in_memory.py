"""Module for in memory resource store."""

import asyncio
from collections.abc import AsyncGenerator, Callable, Iterable
import logging

from resource_cache.config import StoreConfig
from resource_cache.names import ancestor_names, is_descendant
from resource_cache.resource import Resource, resources_equal

from .store import Store, WatchCallback
from .watcher import WatchHandle


_LOGGER = logging.getLogger(__name__)


class ResourceStore(Store):
    """In-memory implementation of the Store interface.

    Resources are keyed by their hierarchical name. Watch callbacks are
    notified synchronously, in registration order, before the mutating call
    returns. Each name requested by a live callback holds a reference count
    that protects the name and its descendants from garbage collection.
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        equal: Callable[[Resource, Resource], bool] = resources_equal,
    ) -> None:
        """Initialize the ResourceStore.

        Args:
            config: Store configuration, defaults are used when omitted.
            equal: Returns True when two resources with the same name are
                equivalent and replacing one with the other is not a change.
        """
        self._config = config or StoreConfig()
        self._equal = equal
        self._entries: dict[str, Resource] = {}
        self._watched: dict[str, int] = {}
        # Registered callbacks, in order, with the names each one holds
        self._callbacks: dict[WatchCallback, frozenset[str]] = {}

    @property
    def config(self) -> StoreConfig:
        """The store configuration."""
        return self._config

    def add(self, *items: Resource) -> WatchHandle:
        """Add or replace resources in the store."""
        names: list[str] = []
        for item in items:
            name = item.get_name()
            names.append(name)
            if (existing := self._entries.get(name)) is not None:
                if self._equal(existing, item):
                    _LOGGER.debug("Resource %s already exists in store, skipping", name)
                    continue
                _LOGGER.debug("Replacing existing resource %s in store", name)
            else:
                _LOGGER.debug("Adding resource %s to store", name)
            self._entries[name] = item
            self._publish(name, item)
        return self.watch(*names)

    def get(self, name: str) -> Resource | None:
        """Return the resource stored under the name, or None if absent."""
        return self._entries.get(name)

    def delete(self, name: str) -> None:
        """Remove the resource stored under the name and notify watchers."""
        if self._entries.pop(name, None) is None:
            _LOGGER.debug("Resource %s not in store, nothing to delete", name)
            return
        _LOGGER.debug("Deleted resource %s from store", name)
        self._publish(name, None)

    def watch(self, *names: str) -> WatchHandle:
        """Return a handle used to register callbacks for the names."""
        return WatchHandle(self, names, separator=self._config.separator)

    def garbage_collect(self) -> list[str]:
        """Remove every resource that is not covered by a live watch."""
        removed = []
        for name in list(self._entries):
            if any(
                n in self._watched
                for n in ancestor_names(name, self._config.separator)
            ):
                continue
            del self._entries[name]
            removed.append(name)
        _LOGGER.debug(
            "Garbage collected %d resource(s), %d remaining",
            len(removed),
            len(self._entries),
        )
        return removed

    def list_resources(self, prefix: str | None = None) -> list[Resource]:
        """List all resources in the store, optionally under a name prefix."""
        if prefix is None:
            return list(self._entries.values())
        return [
            resource
            for name, resource in self._entries.items()
            if is_descendant(name, prefix, self._config.separator)
        ]

    def watch_count(self, name: str) -> int:
        """Return the number of live subscriptions for exactly the name."""
        return self._watched.get(name, 0)

    def register_callback(self, callback: WatchCallback, names: Iterable[str]) -> None:
        """Register a notification callback holding a reference to each name."""
        if callback in self._callbacks:
            _LOGGER.debug("Callback %s already registered, ignoring", callback)
            return
        held = frozenset(names)
        self._callbacks[callback] = held
        for name in held:
            self._watched[name] = self._watched.get(name, 0) + 1

    def unregister_callback(self, callback: WatchCallback) -> None:
        """Remove a callback and release the names it was registered with."""
        if (held := self._callbacks.pop(callback, None)) is None:
            return
        for name in held:
            count = self._watched.get(name, 0) - 1
            if count > 0:
                self._watched[name] = count
            else:
                self._watched.pop(name, None)

    def _publish(self, name: str, data: Resource | None) -> None:
        # Iterate over a copy so callbacks may add, delete or unsubscribe
        for cb in list(self._callbacks):
            if cb not in self._callbacks:
                continue
            try:
                cb(name, data)
            except Exception:
                if self._config.raise_callback_errors:
                    raise
                _LOGGER.exception("Watch callback failed for resource %s", name)

    async def watch_exists(self, name: str) -> Resource:
        """Wait for a resource to exist in the store."""
        if (resource := self._entries.get(name)) is not None:
            _LOGGER.debug("watch_exists: Resource %s already in store.", name)
            return resource

        added: asyncio.Future[Resource] = asyncio.get_running_loop().create_future()

        def callback(changed_name: str, data: Resource | None) -> None:
            if changed_name == name and data is not None and not added.done():
                added.set_result(data)

        handle = self.watch(name)(callback)
        _LOGGER.debug(
            "watch_exists: Resource %s not in store, waiting for it to be added.",
            name,
        )
        try:
            return await added
        except asyncio.CancelledError:
            _LOGGER.debug("watch_exists for %s cancelled.", name)
            raise
        finally:
            handle.unsubscribe()

    async def watch_changes(
        self, *names: str
    ) -> AsyncGenerator[tuple[str, Resource | None]]:
        """Watch for changes to the names or any of their descendants."""
        queue: asyncio.Queue[tuple[str, Resource | None]] = asyncio.Queue()

        def callback(name: str, data: Resource | None) -> None:
            queue.put_nowait((name, data))

        handle = self.watch(*names)(callback)
        try:
            while True:
                item = await queue.get()
                yield item
                queue.task_done()
        except asyncio.CancelledError:
            _LOGGER.debug("watch_changes for %s cancelled.", names)
            raise
        finally:
            _LOGGER.debug("Cleaning up watch_changes for %s", names)
            handle.unsubscribe()
