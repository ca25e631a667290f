"""
Provides the handle returned when watching names in a store.

A handle is created for a fixed list of names and may register any number
of callbacks against them. All callbacks registered through a handle are
removed together by `unsubscribe`.
"""

from collections.abc import Iterable
import logging
from types import TracebackType
from typing import TYPE_CHECKING

from resource_cache.names import SEPARATOR, ancestor_names
from resource_cache.resource import Resource

from .store import ArrayWatchCallback, WatchCallback

if TYPE_CHECKING:
    from .store import Store

_LOGGER = logging.getLogger(__name__)


class WatchHandle:
    """A composable subscription to a list of names in a store.

    Calling the handle with a callback registers it for changes to any of the
    names or their descendants:

        handle = store.watch("apps/1")
        handle(on_change)
        ...
        handle.unsubscribe()
    """

    def __init__(
        self, store: "Store", names: Iterable[str], separator: str = SEPARATOR
    ) -> None:
        """Initialize the WatchHandle.

        Args:
            store: The store that owns the watched resources.
            names: The names to watch. Duplicates are dropped, keeping the
                order of first occurrence.
            separator: The separator used for hierarchical names.
        """
        self._store = store
        # A repeated name is listed once, so the array view holds each resource once
        self._names = tuple(dict.fromkeys(names))
        self._name_set = frozenset(self._names)
        self._separator = separator
        self._callbacks: list[WatchCallback] = []

    @property
    def names(self) -> tuple[str, ...]:
        """The watched names in their original order."""
        return self._names

    @property
    def subscribed(self) -> bool:
        """Return True if any callback is registered through this handle."""
        return bool(self._callbacks)

    def matches(self, name: str) -> bool:
        """Return True if a change to the name is delivered to plain callbacks."""
        return any(
            n in self._name_set for n in ancestor_names(name, self._separator)
        )

    def __call__(self, callback: WatchCallback) -> "WatchHandle":
        """Register a callback for changes to the names or their descendants."""

        def filtered(name: str, data: Resource | None) -> None:
            if self.matches(name):
                callback(name, data)

        self._register(filtered)
        return self

    def array_watcher(self, callback: ArrayWatchCallback) -> "WatchHandle":
        """Register a callback receiving all present resources for the names.

        The callback only fires for changes to exactly one of the watched
        names, and receives the present resources in the order the names
        were given, skipping any that are absent.
        """

        def filtered(name: str, data: Resource | None) -> None:
            if name not in self._name_set:
                return
            resources = [
                resource
                for n in self._names
                if (resource := self._store.get(n)) is not None
            ]
            callback(resources, name, data)

        self._register(filtered)
        return self

    def unsubscribe(self) -> None:
        """Remove every callback registered through this handle."""
        if self._callbacks:
            _LOGGER.debug(
                "Unsubscribing %d callback(s) watching %s",
                len(self._callbacks),
                self._names,
            )
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            self._store.unregister_callback(cb)

    def _register(self, callback: WatchCallback) -> None:
        self._callbacks.append(callback)
        self._store.register_callback(callback, self._names)

    def __enter__(self) -> "WatchHandle":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        return f"WatchHandle(names={list(self._names)}, callbacks={len(self._callbacks)})"
