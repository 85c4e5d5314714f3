"""Build the route table from a resolved Swagger document.

This module walks the ``paths`` object of a document whose references are
already inlined and whose ``allOf`` directives are flattened, and emits one
:class:`~specroute.models.Route` per path + method pair.  Every operation
definition in the table is fully denormalized: it carries the ``consumes``,
``produces``, ``security``, ``parameters`` and ``responses`` it inherits from
its path item and from the document.

Paths are joined with the document's ``basePath`` and split into templates
whose ``{name}`` segments become :class:`~specroute.models.PathVariable`
wildcards.  Table order follows document order; the matcher relies on it to
break ties.

The public entry points are :func:`create_routes`, which runs the whole
compilation pipeline on a raw document, and :func:`build_route_table`, which
expects an already resolved one.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from specroute.compiler.composition import flatten_all_of
from specroute.compiler.inheritance import (
    INHERITABLE_KEYS,
    inherit_path_spec,
    inherit_scope_defaults,
)
from specroute.compiler.resolver import REF_KEY, resolve_refs
from specroute.models import PathVariable, Route, RouteKey

logger = logging.getLogger(__name__)

_VARIABLE_SEGMENT = re.compile(r"\{(.*)\}")


class RouteTable(Mapping[RouteKey, dict[str, Any]]):
    """Read-only, ordered mapping of :class:`RouteKey` to operation definition.

    Built once by :func:`build_route_table` and never mutated afterwards, so
    any number of threads may scan it concurrently.  When two entries share
    a key the later definition replaces the earlier one but keeps its
    position.

    Example::

        table = create_routes(raw)
        for key, definition in table.items():
            print(key, definition.get("operationId"))
    """

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        entries: dict[RouteKey, dict[str, Any]] = {}
        for key, definition in routes:
            if key in entries:
                logger.warning("Duplicate route %s; the later definition wins", key)
            entries[key] = definition
        self._entries = entries
        self._routes = tuple(Route(key, definition) for key, definition in entries.items())

    def __getitem__(self, key: RouteKey) -> dict[str, Any]:
        return self._entries[key]

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def routes(self) -> tuple[Route, ...]:
        """All entries as :class:`Route` tuples, in registration order."""
        return self._routes

    def __repr__(self) -> str:
        return f"RouteTable({[str(key) for key in self._entries]!r})"


def create_routes(
    definition: Mapping[str, Any], base_path: Optional[str] = None
) -> RouteTable:
    """Compile a raw spec document into a :class:`RouteTable`.

    Runs the full pipeline: :func:`~specroute.compiler.resolver.resolve_refs`,
    :func:`~specroute.compiler.composition.flatten_all_of`, then
    :func:`build_route_table`.

    Args:
        definition: The parsed spec document.  It is not mutated.
        base_path: Optional override for the document's ``basePath``.

    Returns:
        The compiled route table.
    """
    resolved = resolve_refs(definition)
    return build_route_table(flatten_all_of(resolved.root), base_path=base_path)


def build_route_table(
    definition: Mapping[str, Any], base_path: Optional[str] = None
) -> RouteTable:
    """Build a :class:`RouteTable` from an already resolved document."""
    return RouteTable(extract_routes(definition, base_path=base_path))


def extract_routes(
    definition: Mapping[str, Any], base_path: Optional[str] = None
) -> Iterator[Route]:
    """Yield one :class:`Route` per path + operation, in document order.

    A document without a ``paths`` map, or with path items that are not
    maps, simply yields fewer routes.

    Args:
        definition: The resolved and flattened spec document.
        base_path: Overrides ``definition["basePath"]`` when given.
    """
    if base_path is None:
        base_path = definition.get("basePath")

    paths = definition.get("paths")
    if not isinstance(paths, Mapping):
        return

    for path, path_definition in paths.items():
        if not _is_entry_key(path) or not isinstance(path_definition, Mapping):
            continue

        full_path = join_base_path(path, base_path)
        path_definition = inherit_scope_defaults(path_definition, definition)

        for operation, operation_definition in path_definition.items():
            if not _is_entry_key(operation) or operation == REF_KEY:
                continue
            if not isinstance(operation_definition, Mapping):
                continue
            yield create_route(operation, operation_definition, full_path, path_definition)


def create_route(
    operation: str,
    operation_definition: Mapping[str, Any],
    path: str,
    path_definition: Mapping[str, Any],
) -> Route:
    """Turn one operation into a table entry with its inherited attributes."""
    definition = inherit_path_spec(operation_definition, path_definition)
    return Route(create_route_key(operation, path), copy.deepcopy(definition))


def create_route_key(method: str, path: str) -> RouteKey:
    """Build the :class:`RouteKey` for *method* on the (already joined) *path*."""
    return RouteKey(method=method.lower(), template=to_template(split_path(path)))


def split_path(path: str) -> tuple[str, ...]:
    """Split a ``/``-separated path into its segments.

    The empty segment before the leading slash and any trailing empty
    segments are dropped, so ``/users/`` and ``/users`` both give
    ``("users",)`` and ``/`` gives ``()``.
    """
    segments = path.split("/")
    while segments and segments[-1] == "":
        segments.pop()
    if segments and segments[0] == "":
        segments.pop(0)
    return tuple(segments)


def to_template(segments: Iterable[str]) -> tuple[Union[str, PathVariable], ...]:
    """Replace every ``{name}`` segment with a :class:`PathVariable`."""
    return tuple(variable_segment(segment) for segment in segments)


def variable_segment(segment: str) -> Union[str, PathVariable]:
    """Return a :class:`PathVariable` for ``{name}``, otherwise *segment*."""
    match = _VARIABLE_SEGMENT.fullmatch(segment)
    if match is None:
        return segment
    return PathVariable(name=match.group(1))


def join_base_path(path: str, base_path: Optional[str]) -> str:
    """Join *path* with the document's base path.

    Base paths are expected to start with ``/`` and not end with one.  An
    empty base path or ``/`` leaves *path* unchanged.
    """
    if base_path and base_path != "/":
        return f"{base_path}{path}"
    return path


def _is_entry_key(key: Any) -> bool:
    """Whether *key* names a path or an operation rather than shared data."""
    return (
        isinstance(key, str)
        and key not in INHERITABLE_KEYS
        and not key.startswith("x-")
    )
