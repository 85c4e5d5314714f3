"""Canonical Pydantic models shared across all specroute modules.

The models fall into three groups:

**Settings** -- what one command-line invocation runs with:
    :class:`Settings`.

**Route models** -- produced by the route table builder and consumed by the
matcher:
    :class:`HTTPMethod`, :class:`PathVariable`, :class:`RouteKey`, and the
    :class:`Route` tuple.

**Boundary models** -- what the request correlation layer receives and returns:
    :class:`Request` and :class:`Response`.

Operation definitions themselves stay plain ``dict`` trees; they are whatever
the spec document declares, after resolution and inheritance.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- CLI settings ---


class Settings(BaseModel):
    """Effective settings of one ``specroute`` invocation.

    Built by :func:`~specroute.config.load_settings` and never written back.
    """

    model_config = ConfigDict(extra="forbid")

    spec: Optional[str] = Field(
        default=None, description="Path or URL of the document to load"
    )
    base_path: Optional[str] = Field(
        default=None, description="Replaces the document's basePath"
    )
    format: Literal["auto", "json", "plain", "rich"] = "auto"


# --- Routes ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods accepted by the ``match`` command.

    Only the CLI validates its method argument against this enum.  Route
    keys store the document's method key lowercased as a plain string, so
    the route table is not keyed on this type.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"


class PathVariable(BaseModel):
    """A ``{name}`` segment of a path template; matches any single segment."""

    model_config = ConfigDict(frozen=True)

    name: str

    def __str__(self) -> str:
        return "{" + self.name + "}"


class RouteKey(BaseModel):
    """Key of a :class:`~specroute.compiler.routes.RouteTable` entry.

    ``method`` is always lowercase. ``template`` holds the path segments in
    order, literal segments as strings and variable segments as
    :class:`PathVariable`. Keys are frozen and hashable so they can index the
    table directly.

    Example::

        RouteKey(method="get", template=("v1", "users", PathVariable(name="id")))
    """

    model_config = ConfigDict(frozen=True)

    method: str
    template: tuple[Union[str, PathVariable], ...] = ()

    @property
    def path(self) -> str:
        """The template rendered back into ``/segment/{var}`` form."""
        return "/" + "/".join(str(segment) for segment in self.template)

    def __str__(self) -> str:
        return f"{self.method.upper()} {self.path}"


class Route(NamedTuple):
    """One route table entry: the key and its fully denormalised operation."""

    key: RouteKey
    definition: dict[str, Any]


# --- Request boundary ---


class Request(BaseModel):
    """An incoming request as seen by :func:`~specroute.middleware.correlate`.

    Only ``method`` and ``uri`` are required. Servers may attach anything
    else as extra fields. After a successful match the request handed to the
    next handler carries the matched ``operation``, ``route_key`` and the
    captured ``path_params``.
    """

    model_config = ConfigDict(extra="allow")

    method: str
    uri: str
    headers: dict[str, str] = Field(default_factory=dict)
    operation: Optional[dict[str, Any]] = None
    route_key: Optional[RouteKey] = None
    path_params: dict[str, str] = Field(default_factory=dict)


class Response(BaseModel):
    """A response produced at the request boundary."""

    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
