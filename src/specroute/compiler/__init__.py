"""Spec compiler -- resolve ``$ref`` pointers, flatten ``allOf``, build routes.

This sub-package turns a raw Swagger document into a
:class:`~specroute.compiler.routes.RouteTable` the matcher can scan.

Typical usage::

    from specroute.compiler import create_routes

    table = create_routes(raw)

Sub-modules:

* :mod:`~specroute.compiler.resolver` -- Fixed-point ``$ref`` resolution with
  ancestor-chain cycle protection.
* :mod:`~specroute.compiler.composition` -- ``allOf`` flattening.
* :mod:`~specroute.compiler.inheritance` -- Propagation of ``consumes``,
  ``produces``, ``security``, ``parameters`` and ``responses``.
* :mod:`~specroute.compiler.routes` -- Route table construction.
"""

from specroute.compiler.composition import flatten_all_of
from specroute.compiler.resolver import SpecTree, resolve_refs
from specroute.compiler.routes import RouteTable, build_route_table, create_routes

__all__ = [
    "RouteTable",
    "SpecTree",
    "build_route_table",
    "create_routes",
    "flatten_all_of",
    "resolve_refs",
]
