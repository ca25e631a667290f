"""Representation of the resources held by the cache.

The store only depends on the `Resource` protocol: a resource can report its
name and produce a snapshot that is structurally comparable with `==`. The
dataclasses in this module are the resources fetched from the controller
API, and may be serialized to and loaded from YAML files.
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, ClassVar, Protocol, runtime_checkable

import aiofiles
import yaml
from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

from .exceptions import InputException
from .names import SEPARATOR

__all__ = [
    "Resource",
    "resources_equal",
    "BaseResource",
    "App",
    "Release",
    "Deployment",
    "RawResource",
    "parse_raw_obj",
    "parse_resources",
    "read_resources",
]

_LOGGER = logging.getLogger(__name__)


APP_KIND = "App"
RELEASE_KIND = "Release"
DEPLOYMENT_KIND = "Deployment"


@runtime_checkable
class Resource(Protocol):
    """A named object that can be held by the store."""

    def get_name(self) -> str:
        """Return the unique hierarchical name of the resource."""

    def to_object(self) -> Any:
        """Return a snapshot of the resource that is comparable with `==`."""


def resources_equal(a: Resource, b: Resource) -> bool:
    """Return True if both resources have structurally equal snapshots."""
    return bool(a.to_object() == b.to_object())


def _app_name(name: str) -> str:
    """Return the `apps/<id>` prefix of a resource name nested under an app."""
    return SEPARATOR.join(name.split(SEPARATOR)[:2])


def _require_name(doc: dict[str, Any]) -> str:
    if not (name := doc.get("name")):
        raise InputException(f"Invalid resource missing name: {doc}")
    if not isinstance(name, str):
        raise InputException(f"Invalid resource name is not a string: {doc}")
    return name


@dataclass
class BaseResource(DataClassDictMixin):
    """Base class for all resource objects."""

    kind: ClassVar[str]

    name: str
    """The full hierarchical name of the resource."""

    def get_name(self) -> str:
        """Return the unique hierarchical name of the resource."""
        return self.name

    def to_object(self) -> dict[str, Any]:
        """Return a dictionary snapshot of the resource."""
        return self.to_dict()

    class Config(BaseConfig):
        omit_none = True


@dataclass
class App(BaseResource):
    """An application, named `apps/<id>`."""

    kind: ClassVar[str] = APP_KIND

    display_name: str | None = None
    """Human readable name of the app."""

    release: str | None = None
    """Name of the release currently deployed for the app."""

    labels: dict[str, str] = field(default_factory=dict)
    """Labels attached to the app."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "App":
        """Parse an App from a resource document."""
        return App(
            name=_require_name(doc),
            display_name=doc.get("displayName"),
            release=doc.get("release"),
            labels=doc.get("labels") or {},
        )


@dataclass
class Release(BaseResource):
    """A release of an app, named `apps/<id>/releases/<id>`."""

    kind: ClassVar[str] = RELEASE_KIND

    artifacts: list[str] = field(default_factory=list)
    """Names of the artifacts that make up the release."""

    env: dict[str, str] = field(default_factory=dict)
    """Environment variables for the release processes."""

    labels: dict[str, str] = field(default_factory=dict)
    """Labels attached to the release."""

    processes: dict[str, Any] = field(default_factory=dict)
    """Process type definitions keyed by process name."""

    @property
    def app_name(self) -> str:
        """Name of the app that owns the release."""
        return _app_name(self.name)

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Release":
        """Parse a Release from a resource document."""
        env = doc.get("env") or {}
        return Release(
            name=_require_name(doc),
            artifacts=doc.get("artifacts") or [],
            env={str(k): str(v) for k, v in env.items()},
            labels=doc.get("labels") or {},
            processes=doc.get("processes") or {},
        )


@dataclass
class Deployment(BaseResource):
    """A deployment of a release, named `apps/<id>/deployments/<id>`."""

    kind: ClassVar[str] = DEPLOYMENT_KIND

    new_release: str | None = None
    """Name of the release being deployed."""

    old_release: str | None = None
    """Name of the release being replaced, if any."""

    processes: dict[str, int] = field(default_factory=dict)
    """Process scale for the deployment."""

    @property
    def app_name(self) -> str:
        """Name of the app that owns the deployment."""
        return _app_name(self.name)

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Deployment":
        """Parse a Deployment from a resource document."""
        return Deployment(
            name=_require_name(doc),
            new_release=doc.get("newRelease"),
            old_release=doc.get("oldRelease"),
            processes=doc.get("processes") or {},
        )


@dataclass
class RawResource(BaseResource):
    """A resource of any other kind, holding its document as-is."""

    kind: ClassVar[str] = "Raw"

    resource_kind: str | None = None
    """The kind declared by the document, if any."""

    data: dict[str, Any] = field(default_factory=dict)
    """The remaining fields of the document."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "RawResource":
        """Parse a RawResource from a resource document."""
        name = _require_name(doc)
        return RawResource(
            name=name,
            resource_kind=doc.get("kind"),
            data={k: v for k, v in doc.items() if k not in ("name", "kind")},
        )


def parse_raw_obj(obj: dict[str, Any]) -> BaseResource:
    """Parse a resource document into a BaseResource."""
    if not isinstance(obj, dict):
        raise InputException(f"Invalid resource document: {obj}")
    kind = obj.get("kind")
    if kind == APP_KIND:
        return App.parse_doc(obj)
    if kind == RELEASE_KIND:
        return Release.parse_doc(obj)
    if kind == DEPLOYMENT_KIND:
        return Deployment.parse_doc(obj)
    return RawResource.parse_doc(obj)


def parse_resources(content: str) -> list[BaseResource]:
    """Parse all resources in a multi-document YAML string."""
    try:
        docs = list(yaml.safe_load_all(content))
    except yaml.YAMLError as err:
        raise InputException(f"Unable to parse resource yaml: {err}") from err
    return [parse_raw_obj(doc) for doc in docs if doc is not None]


async def read_resources(path: Path) -> list[BaseResource]:
    """Return the resources contained in a YAML file."""
    _LOGGER.debug("Reading resources from %s", path)
    async with aiofiles.open(str(path)) as resource_file:
        content = await resource_file.read()
    return parse_resources(content)
