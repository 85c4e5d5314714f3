"""Read-only views of a compiled document: ``routes``, ``match``, ``resolve``.

Each command reads the document named by its ``SPEC`` argument (or the
``spec`` setting), compiles it exactly as the middleware would, and hands
the result to the installed :class:`~specroute.output.Reporter`.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specroute.exceptions import NoRouteError, SpecrouteError, UsageError
from specroute.models import HTTPMethod, RouteKey
from specroute.output import get_reporter


def _abort(exc: SpecrouteError) -> typer.Exit:
    get_reporter().error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _load_definition(
    spec: Optional[str], base_path: Optional[str]
) -> tuple[dict[str, Any], Optional[str]]:
    """Read the document the settings point at.

    Returns:
        ``(definition, base_path)``, where ``base_path`` is the effective
        override or ``None`` to keep the document's own.
    """
    from specroute.config import load_settings
    from specroute.documents import declared_version, read_document

    reporter = get_reporter()
    try:
        settings = load_settings(spec=spec, base_path=base_path)
        if settings.spec is None:
            raise UsageError(
                "No spec given. Pass SPEC, or set SPECROUTE_SPEC or \"spec\" in specroute.json."
            )
        reporter.debug(f"Reading {settings.spec}")
        definition = read_document(settings.spec)
    except SpecrouteError as exc:
        raise _abort(exc) from None

    reporter.debug(f"Declared version: {declared_version(definition) or 'none'}")
    return definition, settings.base_path


def _route_row(key: RouteKey, definition: dict[str, Any]) -> list[str]:
    return [
        key.method.upper(),
        key.path,
        str(definition.get("operationId") or "-"),
        str(len(definition.get("parameters", []))),
    ]


def routes_command(
    spec: Optional[str] = typer.Argument(None, help="Spec file path or URL."),
    base_path: Optional[str] = typer.Option(
        None, "--base-path", help="Override the document's basePath."
    ),
) -> None:
    """List the compiled route table in match order.

    Example::

        specroute routes petstore.yaml
        specroute --json routes
    """
    from specroute.middleware import setup

    definition, effective_base_path = _load_definition(spec, base_path)
    table = setup(definition, base_path=effective_base_path).requests

    rows = [_route_row(key, operation) for key, operation in table.items()]
    get_reporter().table(
        ["Method", "Path", "Operation", "Parameters"], rows, title=f"Routes ({len(rows)})"
    )


def match_command(
    method: HTTPMethod = typer.Argument(..., case_sensitive=False, help="HTTP method."),
    path: str = typer.Argument(..., help="Request path, e.g. /v1/pets/7."),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help="Spec file path or URL."),
    base_path: Optional[str] = typer.Option(
        None, "--base-path", help="Override the document's basePath."
    ),
) -> None:
    """Show which operation a request would be routed to.

    Exits with status 4 when no operation matches.

    Example::

        specroute match get /v1/pets/7 --spec petstore.yaml
    """
    from specroute.compiler.routes import split_path
    from specroute.matcher import extract_path_params, lookup_request
    from specroute.middleware import not_found_message, setup

    definition, effective_base_path = _load_definition(spec, base_path)
    table = setup(definition, base_path=effective_base_path).requests

    route = lookup_request(table, method.value, path)
    if route is None:
        raise _abort(NoRouteError(not_found_message(method.value, path)))

    get_reporter().result({
        "route": str(route.key),
        "path_params": extract_path_params(route.key.template, split_path(path)),
        "operation": route.definition,
    })


def resolve_command(
    spec: Optional[str] = typer.Argument(None, help="Spec file path or URL."),
) -> None:
    """Print the document with references inlined and ``allOf`` flattened.

    Example::

        specroute --json resolve petstore.yaml > resolved.json
    """
    from specroute.compiler import flatten_all_of, resolve_refs

    definition, _ = _load_definition(spec, None)
    tree = resolve_refs(definition)
    get_reporter().status(f"Inlined references at {len(tree.origins)} location(s)")
    get_reporter().result(flatten_all_of(tree.root))
