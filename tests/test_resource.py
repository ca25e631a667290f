"""Tests for resource objects."""

from pathlib import Path

import pytest

from resource_cache.exceptions import InputException
from resource_cache.resource import (
    App,
    Deployment,
    RawResource,
    Release,
    Resource,
    parse_raw_obj,
    parse_resources,
    read_resources,
    resources_equal,
)

TESTDATA = Path("tests/testdata/resources.yaml")


async def test_read_resources() -> None:
    """Test reading resources from a YAML file."""
    resources = await read_resources(TESTDATA)
    assert [r.get_name() for r in resources] == [
        "apps/1",
        "apps/1/releases/9",
        "apps/1/deployments/3",
        "routes/example",
    ]
    app, release, deployment, route = resources
    assert app == App(
        name="apps/1",
        display_name="Example App",
        release="apps/1/releases/9",
        labels={"team": "web"},
    )
    assert isinstance(release, Release)
    assert release.env == {"PORT": "8080", "LOG_LEVEL": "debug"}
    assert release.artifacts == ["artifacts/abc"]
    assert release.app_name == "apps/1"
    assert isinstance(deployment, Deployment)
    assert deployment.processes == {"web": 2}
    assert deployment.app_name == "apps/1"
    assert route == RawResource(
        name="routes/example",
        resource_kind="Route",
        data={"domain": "example.com"},
    )


async def test_read_resources_missing_file(tmp_path: Path) -> None:
    """Test reading a file that does not exist."""
    with pytest.raises(FileNotFoundError):
        await read_resources(tmp_path / "missing.yaml")


def test_resources_satisfy_protocol() -> None:
    """Test the resource dataclasses implement the Resource protocol."""
    assert isinstance(App(name="apps/1"), Resource)
    assert isinstance(RawResource(name="x"), Resource)


def test_to_object_omits_none() -> None:
    """Test the snapshot omits unset optional fields."""
    assert App(name="apps/1").to_object() == {"name": "apps/1", "labels": {}}
    assert Deployment(name="apps/1/deployments/1", new_release="r").to_object() == {
        "name": "apps/1/deployments/1",
        "new_release": "r",
        "processes": {},
    }


def test_resources_equal() -> None:
    """Test structural equality of resources."""
    a = Release(name="apps/1/releases/1", env={"A": "1"})
    b = Release(name="apps/1/releases/1", env={"A": "1"})
    c = Release(name="apps/1/releases/1", env={"A": "2"})
    assert a is not b
    assert resources_equal(a, b)
    assert not resources_equal(a, c)


@pytest.mark.parametrize(
    "doc",
    [
        {"kind": "App"},
        {"kind": "Release", "name": ""},
        {"kind": "Route", "name": 12},
        ["not", "a", "mapping"],
    ],
)
def test_parse_raw_obj_invalid(doc: object) -> None:
    """Test parsing invalid resource documents."""
    with pytest.raises(InputException):
        parse_raw_obj(doc)  # type: ignore[arg-type]


def test_parse_resources_invalid_yaml() -> None:
    """Test parsing content that is not valid YAML."""
    with pytest.raises(InputException, match="Unable to parse resource yaml"):
        parse_resources("kind: [App\n")


def test_parse_resources_skips_empty_documents() -> None:
    """Test empty documents are ignored."""
    assert parse_resources("") == []
    assert parse_resources("---\n---\nname: x\n") == [RawResource(name="x")]
