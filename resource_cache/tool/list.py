"""Resource-cache list action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import sys
from typing import Any, cast

from resource_cache.store import ResourceStore

from .common import load_files
from .format import OUTPUT_FORMATS, get_formatter

_LOGGER = logging.getLogger(__name__)


class ListAction:
    """Resource-cache list action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the list subcommand."""
        parser = cast(
            ArgumentParser,
            subparsers.add_parser(
                "list",
                help="List resources loaded from files",
                description="Load resource files into a store and print its contents.",
            ),
        )
        parser.add_argument(
            "files",
            nargs="+",
            help="YAML files containing resource documents",
        )
        parser.add_argument(
            "--prefix",
            type=str,
            default=None,
            help="Only list resources under this name, e.g. apps/1",
        )
        parser.add_argument(
            "--output",
            "-o",
            choices=OUTPUT_FORMATS,
            default=None,
            help="Output format of the command",
        )
        parser.set_defaults(cls=cls)
        return parser

    async def run(
        self,
        files: list[str],
        prefix: str | None,
        output: str | None,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        store = ResourceStore()
        await load_files(store, files)
        resources = store.list_resources(prefix)
        if not resources:
            print("No resources found", file=sys.stderr)
            return
        get_formatter(output).print(resources, file=sys.stdout)
