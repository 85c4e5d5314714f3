"""Match concrete requests against a compiled route table.

A request matches a table entry when the methods are equal (compared in
lowercase), the request path has exactly as many segments as the template,
and every literal template segment equals the request segment at the same
position.  :class:`~specroute.models.PathVariable` segments match any single
segment.

The table is scanned in registration order and the first match wins.  Two
templates can match the same path (``/users/{id}`` and ``/users/me``); the
one declared first in the document is chosen.  Reordering for speed would
have to keep that tie-break.

Matching is a read-only scan: it never touches the table, so it is safe to
call from any number of threads at once.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Union

from specroute.compiler.routes import RouteTable, split_path
from specroute.models import PathVariable, Route, RouteKey

Template = Sequence[Union[str, PathVariable]]


def lookup_request(table: RouteTable, method: str, path: str) -> Optional[Route]:
    """Return the first route matching *method* and *path*, or ``None``.

    Args:
        table: The compiled route table.
        method: HTTP method in any case.
        path: The request path (no query string).

    Returns:
        The matching :class:`~specroute.models.Route`, or ``None`` when no
        entry matches.
    """
    method = method.lower()
    segments = split_path(path)
    for route in table.routes():
        if request_matches(route.key, method, segments):
            return route
    return None


def request_matches(key: RouteKey, method: str, segments: Sequence[str]) -> bool:
    """Whether a table key matches a lowercase method and split path."""
    return key.method == method and path_matches(key.template, segments)


def path_matches(template: Template, segments: Sequence[str]) -> bool:
    """Match a path template against concrete path segments."""
    if len(template) != len(segments):
        return False
    return all(
        isinstance(expected, PathVariable) or expected == actual
        for expected, actual in zip(template, segments)
    )


def extract_path_params(template: Template, segments: Sequence[str]) -> dict[str, str]:
    """Collect the values captured by the variable segments of *template*.

    Assumes *template* matches *segments* (see :func:`path_matches`).

    Example::

        extract_path_params(("users", PathVariable(name="id")), ("users", "7"))
        # {"id": "7"}
    """
    return {
        expected.name: actual
        for expected, actual in zip(template, segments)
        if isinstance(expected, PathVariable)
    }
