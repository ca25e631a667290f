"""Resource-cache interactive shell implementation."""

import cmd
from argparse import ArgumentParser, Namespace
from dataclasses import dataclass
import logging
from pathlib import Path
import shlex
import sys
from typing import TextIO

from tabulate import tabulate

from resource_cache.exceptions import ResourceCacheException
from resource_cache.resource import Resource, parse_resources
from resource_cache.store import Store, WatchHandle
from resource_cache.tool.format import (
    OUTPUT_FORMATS,
    TableFormatter,
    get_formatter,
    resource_kind,
)


_LOGGER = logging.getLogger(__name__)


@dataclass
class ShellWatch:
    """A watch registered from the shell."""

    watch_id: int
    handle: WatchHandle
    array: bool = False


class ResourceShell(cmd.Cmd):
    """Interactive shell for a resource store."""

    intro = "Welcome to the resource-cache shell. Type 'help' for help, 'exit' to quit."
    prompt = "resource-cache> "

    def __init__(
        self,
        store: Store,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the shell with the given store and I/O streams.

        Args:
            store: The store to use for resource operations (required)
            stdout: Optional stream for stdout (default: sys.stdout)
            stderr: Optional stream for stderr (default: sys.stderr)
        """
        super().__init__(
            stdin=sys.stdin,
            stdout=stdout if stdout is not None else sys.stdout,
        )
        self.store = store
        self.stderr = stderr if stderr is not None else sys.stderr
        self.watches: dict[int, ShellWatch] = {}
        self._next_watch_id = 1

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        print(message, file=self.stderr)

    def emptyline(self) -> bool:
        """Do nothing on an empty line instead of repeating the last command."""
        return False

    def _parse_args(self, parser: ArgumentParser, arg: str) -> Namespace | None:
        try:
            return parser.parse_args(shlex.split(arg))
        except SystemExit:
            # Handle argparse exit from help or error
            return None
        except ValueError as err:
            self.print_error(f"Error: {err}")
            return None

    def do_get(self, arg: str) -> None:
        """Show a single resource.

        Examples:
            get apps/1
            get apps/1/releases/9 -o json
        """
        parser = ArgumentParser(prog="get", add_help=False)
        parser.add_argument("name", help="Resource name")
        parser.add_argument("-o", "--output", choices=["yaml", "json"], default="yaml")
        if not arg.strip():
            self.print_error("Usage: get <name> [-o yaml|json]")
            return
        if not (args := self._parse_args(parser, arg)):
            return
        if (resource := self.store.get(args.name)) is None:
            print(f"Resource {args.name} not found", file=self.stdout)
            return
        get_formatter(args.output).print([resource], file=self.stdout)

    def do_list(self, arg: str) -> None:
        """List resources, optionally only those under a name.

        Examples:
            list
            list apps/1
            list apps -o name
        """
        parser = ArgumentParser(prog="list", add_help=False)
        parser.add_argument("prefix", nargs="?", help="Name to list resources under")
        parser.add_argument("-o", "--output", choices=OUTPUT_FORMATS)
        if not (args := self._parse_args(parser, arg)):
            return
        resources = self.store.list_resources(args.prefix)
        if not resources:
            print("No resources found", file=self.stdout)
            return
        if args.output:
            get_formatter(args.output).print(resources, file=self.stdout)
            return
        TableFormatter(
            {
                "NAME": lambda r: r.get_name(),
                "KIND": resource_kind,
                "WATCHERS": lambda r: self.store.watch_count(r.get_name()),
            }
        ).print(resources, file=self.stdout)

    def do_load(self, arg: str) -> None:
        """Load resources from a YAML file into the store.

        Examples:
            load resources.yaml
        """
        if not arg.strip():
            self.print_error("Usage: load <file>")
            return
        path = Path(arg.strip())
        try:
            resources = parse_resources(path.read_text())
        except OSError as err:
            self.print_error(f"Unable to read {path}: {err}")
            return
        except ResourceCacheException as err:
            self.print_error(f"Error: {err}")
            return
        self.store.add(*resources)
        print(f"Loaded {len(resources)} resource(s) from {path}", file=self.stdout)

    def do_delete(self, arg: str) -> None:
        """Delete a resource from the store.

        Examples:
            delete apps/1/releases/9
        """
        if not (name := arg.strip()):
            self.print_error("Usage: delete <name>")
            return
        if self.store.get(name) is None:
            print(f"Resource {name} not found", file=self.stdout)
            return
        self.store.delete(name)
        print(f"Deleted {name}", file=self.stdout)

    def do_watch(self, arg: str) -> None:
        """Watch names for changes, printing each notification.

        With --array, only exact names are matched and the notification lists
        every resource currently present for the names.

        Examples:
            watch apps/1
            watch apps/1/releases/1 apps/1/releases/2 --array
        """
        parser = ArgumentParser(prog="watch", add_help=False)
        parser.add_argument("names", nargs="+", help="Names to watch")
        parser.add_argument("--array", action="store_true")
        if not arg.strip():
            self.print_error("Usage: watch <name>... [--array]")
            return
        if not (args := self._parse_args(parser, arg)):
            return

        watch_id = self._next_watch_id
        self._next_watch_id += 1
        handle = self.store.watch(*args.names)

        def on_change(name: str, data: Resource | None) -> None:
            action = "deleted" if data is None else "updated"
            print(f"[watch {watch_id}] {name} {action}", file=self.stdout)

        def on_array_change(
            resources: list[Resource], name: str, data: Resource | None
        ) -> None:
            action = "deleted" if data is None else "updated"
            names = ", ".join(r.get_name() for r in resources)
            print(
                f"[watch {watch_id}] {name} {action}: [{names}]",
                file=self.stdout,
            )

        if args.array:
            handle.array_watcher(on_array_change)
        else:
            handle(on_change)
        self.watches[watch_id] = ShellWatch(watch_id, handle, array=args.array)
        print(f"Watch {watch_id} on {', '.join(handle.names)}", file=self.stdout)

    def do_watches(self, arg: str) -> None:
        """List active watches."""
        if not self.watches:
            print("No active watches", file=self.stdout)
            return
        rows = [
            [w.watch_id, "array" if w.array else "plain", ", ".join(w.handle.names)]
            for w in self.watches.values()
        ]
        print(
            tabulate(rows, headers=["ID", "TYPE", "NAMES"], tablefmt="plain"),
            file=self.stdout,
        )

    def do_unwatch(self, arg: str) -> None:
        """Remove a watch by id.

        Examples:
            unwatch 1
        """
        try:
            watch_id = int(arg.strip())
        except ValueError:
            self.print_error("Usage: unwatch <id>")
            return
        if (watch := self.watches.pop(watch_id, None)) is None:
            self.print_error(f"Unknown watch: {watch_id}")
            return
        watch.handle.unsubscribe()
        print(f"Removed watch {watch_id}", file=self.stdout)

    def do_gc(self, arg: str) -> None:
        """Remove every resource that is not covered by an active watch."""
        removed = self.store.garbage_collect()
        if not removed:
            print("Nothing to collect", file=self.stdout)
            return
        for name in removed:
            print(f"Collected {name}", file=self.stdout)

    def do_exit(self, arg: str) -> bool:
        """Exit the shell."""
        for watch in self.watches.values():
            watch.handle.unsubscribe()
        self.watches.clear()
        print("Exiting resource-cache shell", file=self.stdout)
        return True

    def do_quit(self, arg: str) -> bool:
        """Exit the shell (alias for exit)."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str) -> bool:
        """Handle EOF (Ctrl+D) to exit the shell."""
        print("\n", file=self.stdout, end="")
        self.stdout.flush()
        return self.do_exit(arg)
