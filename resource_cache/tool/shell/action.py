"""Resource-cache shell command implementation."""

import asyncio
import logging
import sys
from argparse import _SubParsersAction as SubParsersAction, ArgumentParser
from typing import Any, cast

from resource_cache.store import ResourceStore
from resource_cache.tool.common import load_files

from .repl import ResourceShell

_LOGGER = logging.getLogger(__name__)


class ShellAction:
    """Resource-cache shell action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the shell subcommand."""
        parser = cast(
            ArgumentParser,
            subparsers.add_parser(
                "shell",
                help="Start an interactive shell",
                description="Start an interactive shell for exploring and watching a resource store.",
            ),
        )
        parser.add_argument(
            "files",
            nargs="*",
            help="YAML files containing resource documents to load on start",
        )
        parser.set_defaults(cls=cls)
        return parser

    async def run(self, files: list[str], **kwargs: Any) -> None:
        """Run the interactive shell."""
        store = ResourceStore()
        count = await load_files(store, files)
        _LOGGER.info("Loaded %d resource(s) from %d file(s)", count, len(files))

        shell = ResourceShell(store=store)
        _LOGGER.info("Interactive shell ready. Type 'help' for available commands.")
        try:
            await asyncio.get_running_loop().run_in_executor(None, shell.cmdloop)
        except KeyboardInterrupt:
            print("\nUse 'exit' or 'quit' to exit the shell", file=sys.stderr)
