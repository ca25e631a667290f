"""Library for formatting resources as command output."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Generator
import json
import sys
from typing import Any, TextIO

import yaml
from tabulate import tabulate

from resource_cache.resource import RawResource, Resource

__all__ = [
    "OUTPUT_FORMATS",
    "ResourceFormatter",
    "NameFormatter",
    "TableFormatter",
    "YamlFormatter",
    "JsonFormatter",
    "resource_kind",
    "get_formatter",
]


def resource_kind(resource: Resource) -> str:
    """Return a display kind for the resource."""
    if isinstance(resource, RawResource) and resource.resource_kind:
        return resource.resource_kind
    return str(getattr(resource, "kind", type(resource).__name__))


class ResourceFormatter(ABC):
    """A formatter that renders a list of resources."""

    @abstractmethod
    def format(self, resources: list[Resource]) -> Generator[str, None, None]:
        """Format the resources as output lines."""

    def print(self, resources: list[Resource], file: TextIO | None = None) -> None:
        """Print the resources, to stdout unless a file is given."""
        out = file if file is not None else sys.stdout
        for line in self.format(resources):
            print(line, file=out)


class NameFormatter(ResourceFormatter):
    """Prints one resource name per line."""

    def format(self, resources: list[Resource]) -> Generator[str, None, None]:
        for resource in resources:
            yield resource.get_name()


class TableFormatter(ResourceFormatter):
    """Prints a column for each named accessor, NAME and KIND by default."""

    def __init__(
        self, columns: dict[str, Callable[[Resource], Any]] | None = None
    ) -> None:
        self._columns = columns or {
            "NAME": lambda r: r.get_name(),
            "KIND": resource_kind,
        }

    def format(self, resources: list[Resource]) -> Generator[str, None, None]:
        if not resources:
            return
        rows = [[get(r) for get in self._columns.values()] for r in resources]
        yield tabulate(rows, headers=list(self._columns), tablefmt="plain")


class YamlFormatter(ResourceFormatter):
    """Prints one yaml document per resource snapshot."""

    def format(self, resources: list[Resource]) -> Generator[str, None, None]:
        content = yaml.dump_all(
            [r.to_object() for r in resources], sort_keys=False, explicit_start=True
        )
        yield content.rstrip("\n")


class JsonFormatter(ResourceFormatter):
    """Prints a json list of resource snapshots."""

    def format(self, resources: list[Resource]) -> Generator[str, None, None]:
        yield json.dumps([r.to_object() for r in resources], indent=4)


_FORMATTERS: dict[str, type[ResourceFormatter]] = {
    "name": NameFormatter,
    "yaml": YamlFormatter,
    "json": JsonFormatter,
}

OUTPUT_FORMATS = list(_FORMATTERS)


def get_formatter(output: str | None) -> ResourceFormatter:
    """Return the formatter for an output format, a table when not set."""
    if output is None:
        return TableFormatter()
    return _FORMATTERS[output]()
