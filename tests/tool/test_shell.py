"""Tests for the resource-cache shell command."""

from io import StringIO
from unittest.mock import patch

import pytest

from resource_cache.resource import App, RawResource
from resource_cache.store import ResourceStore
from resource_cache.tool.shell import ResourceShell, ShellAction

TESTDATA = "tests/testdata/resources.yaml"


@pytest.fixture
def store() -> ResourceStore:
    """Return an in-memory store for testing."""
    return ResourceStore()


@pytest.fixture
def shell(store: ResourceStore) -> ResourceShell:
    """Return a ResourceShell instance for testing with captured output."""
    return ResourceShell(store=store, stdout=StringIO(), stderr=StringIO())


def output(shell: ResourceShell) -> list[str]:
    """Return and reset the lines written to the shell stdout."""
    stdout = shell.stdout
    assert isinstance(stdout, StringIO)
    lines = stdout.getvalue().splitlines()
    stdout.seek(0)
    stdout.truncate()
    return lines


def errors(shell: ResourceShell) -> str:
    stderr = shell.stderr
    assert isinstance(stderr, StringIO)
    return stderr.getvalue()


@pytest.mark.parametrize(
    ("command", "expected"),
    [
        ("get", "Usage: get <name>"),
        ("delete", "Usage: delete <name>"),
        ("watch", "Usage: watch <name>"),
        ("unwatch abc", "Usage: unwatch <id>"),
        ("unwatch 7", "Unknown watch: 7"),
        ("load", "Usage: load <file>"),
        ("load does-not-exist.yaml", "Unable to read does-not-exist.yaml"),
    ],
)
def test_usage_errors(shell: ResourceShell, command: str, expected: str) -> None:
    """Test commands with missing or invalid arguments."""
    shell.onecmd(command)
    assert expected in errors(shell)


def test_load_and_list(shell: ResourceShell) -> None:
    """Test loading a file and listing the resources."""
    shell.onecmd(f"load {TESTDATA}")
    assert output(shell) == [f"Loaded 4 resource(s) from {TESTDATA}"]

    shell.onecmd("list apps/1 -o name")
    assert output(shell) == [
        "apps/1",
        "apps/1/releases/9",
        "apps/1/deployments/3",
    ]

    shell.onecmd("list")
    lines = output(shell)
    assert lines[0].split() == ["NAME", "KIND", "WATCHERS"]
    assert lines[1].split() == ["apps/1", "App", "0"]
    assert lines[4].split() == ["routes/example", "Route", "0"]


def test_list_empty(shell: ResourceShell) -> None:
    shell.onecmd("list")
    assert output(shell) == ["No resources found"]


def test_get(shell: ResourceShell, store: ResourceStore) -> None:
    """Test showing a single resource."""
    store.add(App(name="apps/1", display_name="Example"))
    shell.onecmd("get apps/1")
    assert output(shell) == [
        "---",
        "name: apps/1",
        "display_name: Example",
        "labels: {}",
    ]

    shell.onecmd("get apps/2")
    assert output(shell) == ["Resource apps/2 not found"]


def test_watch_notifications(shell: ResourceShell) -> None:
    """Test watch notifications are printed as the store changes."""
    shell.onecmd("watch apps/1")
    assert output(shell) == ["Watch 1 on apps/1"]

    shell.onecmd(f"load {TESTDATA}")
    assert output(shell) == [
        "[watch 1] apps/1 updated",
        "[watch 1] apps/1/releases/9 updated",
        "[watch 1] apps/1/deployments/3 updated",
        f"Loaded 4 resource(s) from {TESTDATA}",
    ]

    # Reloading unchanged resources does not notify
    shell.onecmd(f"load {TESTDATA}")
    assert output(shell) == [f"Loaded 4 resource(s) from {TESTDATA}"]

    shell.onecmd("delete apps/1/releases/9")
    assert output(shell) == [
        "[watch 1] apps/1/releases/9 deleted",
        "Deleted apps/1/releases/9",
    ]

    shell.onecmd("delete apps/1/releases/9")
    assert output(shell) == ["Resource apps/1/releases/9 not found"]

    shell.onecmd("unwatch 1")
    assert output(shell) == ["Removed watch 1"]
    shell.onecmd("delete apps/1")
    assert output(shell) == ["Deleted apps/1"]


def test_array_watch(shell: ResourceShell, store: ResourceStore) -> None:
    """Test array watch notifications list the present resources."""
    shell.onecmd("watch y x --array")
    assert output(shell) == ["Watch 1 on y, x"]

    store.add(RawResource(name="x"), RawResource(name="y"))
    store.delete("y")
    assert output(shell) == [
        "[watch 1] x updated: [x]",
        "[watch 1] y updated: [y, x]",
        "[watch 1] y deleted: [x]",
    ]


def test_watches(shell: ResourceShell) -> None:
    """Test listing the active watches."""
    shell.onecmd("watches")
    assert output(shell) == ["No active watches"]

    shell.onecmd("watch apps")
    shell.onecmd("watch a b --array")
    output(shell)
    shell.onecmd("watches")
    lines = output(shell)
    assert lines[0].split() == ["ID", "TYPE", "NAMES"]
    assert lines[1].split() == ["1", "plain", "apps"]
    assert lines[2].split() == ["2", "array", "a,", "b"]


def test_gc(shell: ResourceShell, store: ResourceStore) -> None:
    """Test garbage collection keeps watched resources."""
    shell.onecmd("gc")
    assert output(shell) == ["Nothing to collect"]

    shell.onecmd("watch apps")
    shell.onecmd(f"load {TESTDATA}")
    output(shell)

    shell.onecmd("gc")
    assert output(shell) == ["Collected routes/example"]
    assert store.get("routes/example") is None
    assert store.get("apps/1") is not None


@pytest.mark.parametrize("command", ["exit", "quit"])
def test_exit(shell: ResourceShell, store: ResourceStore, command: str) -> None:
    """Test exiting the shell releases its watches."""
    shell.onecmd("watch apps")
    output(shell)
    assert shell.onecmd(command)
    assert output(shell) == ["Exiting resource-cache shell"]
    assert store.watch_count("apps") == 0


def test_eof(shell: ResourceShell) -> None:
    assert shell.onecmd("EOF")
    assert output(shell) == ["", "Exiting resource-cache shell"]


async def test_shell_action_loads_files() -> None:
    """Test the shell action loads files before starting the shell."""
    with patch("resource_cache.tool.shell.action.ResourceShell") as mock_shell:
        await ShellAction().run(files=[TESTDATA])
    store = mock_shell.call_args.kwargs["store"]
    assert len(store.list_resources()) == 4
    mock_shell.return_value.cmdloop.assert_called_once()
