"""specroute -- Compile Swagger specs into route tables and match requests against them.

This package turns a parsed Swagger document into an ordered table of
operations keyed by HTTP method and path template, with every ``$ref``
inlined, every ``allOf`` flattened, and every inheritable attribute
(``consumes``, ``produces``, ``security``, ``parameters``, ``responses``)
copied down to the operation it applies to. Incoming requests are matched
against that table so request handling can be driven by the spec alone.

Typical usage::

    from specroute import setup, correlate

    context = setup(definition)
    response = correlate(context, handler, Request(method="get", uri="/v1/pets/7"))

Modules:
    compiler: Reference resolution, ``allOf`` flattening, inheritance and
        route table construction.
    matcher: First-match-wins request lookup against a route table.
    middleware: ``setup`` / ``correlate`` glue and the reloadable router.
    asgi: ASGI middleware wrapping ``correlate``.
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    documents: Reading JSON or YAML documents for the CLI.
    config: Read-only CLI settings (arguments, environment, specroute.json).
    exceptions: CLI errors, each with its exit status.
    exit_codes: Exit statuses of the CLI.
    output: Result and diagnostic rendering for the CLI, using Rich.
"""

__version__ = "0.1.0"

from specroute.matcher import lookup_request
from specroute.middleware import RoutingContext, SpecRouter, correlate, setup

__all__ = [
    "RoutingContext",
    "SpecRouter",
    "correlate",
    "lookup_request",
    "setup",
]
