"""Setup and per-request correlation against a compiled route table.

Two phases:

1. :func:`setup` compiles a parsed spec document once, at startup, into an
   immutable :class:`RoutingContext`.
2. :func:`correlate` runs per request: it looks the request up in the
   context's route table and either forwards an augmented copy of the
   request to the next handler or answers ``404`` directly.

A next handler is any callable that accepts a
:class:`~specroute.models.Request`::

    def handler(request: Request) -> Response:
        return Response(body=request.operation["operationId"])

    context = setup(definition)
    response = correlate(context, handler, Request(method="get", uri="/pets"))

:class:`SpecRouter` wraps a context for servers that reload their spec while
running: the new table is built completely before it replaces the old one, so
concurrent requests always see one whole table.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

from specroute.compiler.routes import RouteTable, create_routes, split_path
from specroute.matcher import extract_path_params, lookup_request
from specroute.models import Request, Response, Route

logger = logging.getLogger(__name__)

T = TypeVar("T")

Handler = Callable[[Request], T]


@dataclass(frozen=True)
class RoutingContext:
    """Result of :func:`setup`: the source document and its route table."""

    definition: Mapping[str, Any]
    requests: RouteTable


def setup(
    definition: Mapping[str, Any], base_path: Optional[str] = None
) -> RoutingContext:
    """Compile *definition* into a :class:`RoutingContext`.

    Malformed documents do not fail here; they produce a smaller table.

    Args:
        definition: The parsed spec document.
        base_path: Optional override for the document's ``basePath``.

    Returns:
        The routing context shared by every subsequent :func:`correlate`.
    """
    info = definition.get("info")
    title = info.get("title") if isinstance(info, Mapping) else None
    logger.debug("Compiling routes for %s", title or "untitled spec")
    requests = create_routes(definition, base_path=base_path)
    logger.debug("Compiled %d route(s): %s", len(requests), [str(key) for key in requests])
    return RoutingContext(definition=definition, requests=requests)


def error_response(status: int, message: str) -> Response:
    """Build a plain-text error :class:`~specroute.models.Response`."""
    return Response(
        status=status,
        headers={"Content-Type": "text/plain; charset=utf-8"},
        body=message,
    )


def not_found_message(method: str, uri: str) -> str:
    """The body of the ``404`` answered for unmatched requests."""
    return f"{method.upper()} {uri} not found."


def correlate(
    context: RoutingContext, next_handler: Handler[T], request: Request
) -> Union[T, Response]:
    """Find the operation for *request* and pass it on to *next_handler*.

    On a match the handler receives a copy of the request whose
    ``operation``, ``route_key`` and ``path_params`` fields are filled in,
    and its return value is returned.  Otherwise a ``404`` response is
    returned without calling the handler.

    Args:
        context: The context returned by :func:`setup`.
        next_handler: Callable receiving the augmented request.
        request: The incoming request.
    """
    route = lookup_request(context.requests, request.method, request.uri)
    if route is None:
        logger.debug("No route for %s %s", request.method.upper(), request.uri)
        return error_response(404, not_found_message(request.method, request.uri))

    logger.debug("request %s -> %s", route.key, route.definition.get("operationId"))
    return next_handler(augment_request(request, route))


def augment_request(request: Request, route: Route) -> Request:
    """Return a copy of *request* carrying the matched route.

    The operation is deep-copied so a handler that edits it cannot reach
    back into the route table.
    """
    return request.model_copy(
        update={
            "operation": copy.deepcopy(route.definition),
            "route_key": route.key,
            "path_params": extract_path_params(route.key.template, split_path(request.uri)),
        }
    )


class SpecRouter:
    """Holds the current :class:`RoutingContext` and swaps it on reload.

    Reads take the context reference once per request and never lock.
    :meth:`reload` compiles the new context before replacing the reference;
    concurrent reloads are serialized.

    Args:
        definition: The parsed spec document to compile.
        base_path: Optional override for the document's ``basePath``,
            applied on every reload as well.

    Example::

        router = SpecRouter(definition)
        response = router.correlate(handler, request)
        router.reload(new_definition)
    """

    def __init__(
        self, definition: Mapping[str, Any], base_path: Optional[str] = None
    ) -> None:
        self._base_path = base_path
        self._lock = threading.Lock()
        self._context = setup(definition, base_path=base_path)

    @property
    def context(self) -> RoutingContext:
        """The context currently in use."""
        return self._context

    def reload(self, definition: Mapping[str, Any]) -> RoutingContext:
        """Compile *definition* and make it the active context."""
        with self._lock:
            context = setup(definition, base_path=self._base_path)
            self._context = context
        logger.info("Reloaded spec with %d route(s)", len(context.requests))
        return context

    def lookup(self, method: str, path: str) -> Optional[Route]:
        """Match against the active table without building a request."""
        return lookup_request(self._context.requests, method, path)

    def correlate(
        self, next_handler: Handler[T], request: Request
    ) -> Union[T, Response]:
        """:func:`correlate` against the active context."""
        return correlate(self._context, next_handler, request)
