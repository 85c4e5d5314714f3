"""ASGI middleware that routes requests through a :class:`~specroute.middleware.SpecRouter`.

Wraps any ASGI application (Starlette, FastAPI, a bare callable) so every
HTTP request is correlated with the spec before the application sees it::

    router = SpecRouter(read_document("petstore.yaml"))
    app = SpecRoutingMiddleware(inner_app, router)

On a match the middleware stores the result in ``scope["swagger"]``::

    {"request": <operation definition>, "key": <RouteKey>, "path_params": {...}}

and calls the wrapped application.  Unmatched requests are answered with the
``404`` from :func:`~specroute.middleware.correlate` and never reach the
application.  Lifespan and websocket scopes pass through untouched.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Iterable, MutableMapping
from typing import Any, Callable

from specroute.middleware import SpecRouter
from specroute.models import Request, Response

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]


class SpecRoutingMiddleware:
    """ASGI middleware attaching the matched operation to each HTTP scope.

    Args:
        app: The wrapped ASGI application.
        router: Router holding the compiled route table.
    """

    def __init__(self, app: ASGIApp, router: SpecRouter) -> None:
        self.app = app
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(
            method=scope["method"],
            uri=scope["path"],
            headers=_decode_headers(scope.get("headers", ())),
        )
        result = self.router.correlate(_forward, request)
        if isinstance(result, Response):
            await send_response(send, result)
            return

        scope = dict(scope)
        scope["swagger"] = {
            "request": result.operation,
            "key": result.route_key,
            "path_params": result.path_params,
        }
        await self.app(scope, receive, send)


def _forward(request: Request) -> Request:
    return request


async def send_response(send: Send, response: Response) -> None:
    """Write a :class:`~specroute.models.Response` to an ASGI ``send`` callable."""
    body = _encode_body(response.body)
    headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers.items()
    ]
    headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {"type": "http.response.start", "status": response.status, "headers": headers}
    )
    await send({"type": "http.response.body", "body": body})


def _encode_body(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


def _decode_headers(raw: Iterable[tuple[bytes, bytes]]) -> dict[str, str]:
    return {name.decode("latin-1"): value.decode("latin-1") for name, value in raw}
