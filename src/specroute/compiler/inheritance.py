"""Propagate inheritable attributes from enclosing scopes down to operations.

Swagger lets a document declare defaults once and have every path and
operation pick them up unless it says otherwise.  This module copies those
values down without ever clobbering what the child declares itself.  Three
rules exist, one per attribute kind:

* **replace-if-absent** (``consumes``, ``produces``, ``security``) -- a child
  that lacks the key gets the parent's value; a child that has it (even an
  empty list) keeps its own.
* **element-union** (``parameters``) -- all child parameters in order, then
  every parent parameter whose identity (``name`` + ``in``) the child does
  not already declare.
* **map-merge** (``responses``) -- parent status codes under the child's,
  the child winning on collision.

Two profiles are applied by the route table builder:
:func:`inherit_scope_defaults` from the document to each path item and
:func:`inherit_path_spec` from the enriched path item to each operation.
Document-level ``parameters`` and ``responses`` are maps of reusable
definitions rather than defaults, so only the replace-if-absent attributes
travel from the document to paths.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

SCOPE_DEFAULT_KEYS = ("consumes", "produces", "security")

PARAMETER_IDENTITY = ("name", "in")

INHERITABLE_KEYS = frozenset({"parameters", "consumes", "produces", "schemes", "security"})
"""Keys that may sit next to paths or operations without being one themselves."""


def inherit(
    definition: Mapping[str, Any],
    parent: Mapping[str, Any],
    *,
    replace: Iterable[str] = (),
    union: Iterable[str] = (),
    merge: Iterable[str] = (),
) -> dict[str, Any]:
    """Return a copy of *definition* completed with values from *parent*.

    Args:
        definition: The child scope (path item or operation).
        parent: The enclosing scope.
        replace: Keys copied from the parent only when the child lacks them.
        union: List keys unioned by :data:`PARAMETER_IDENTITY`.
        merge: Map keys merged with child entries winning.

    Returns:
        A new dict; neither argument is mutated.
    """
    result = dict(definition)
    for name in replace:
        result = inherit_list(result, parent, name)
    for name in union:
        result = inherit_list_elements(result, parent, name, PARAMETER_IDENTITY)
    for name in merge:
        result = inherit_map(result, parent, name)
    return result


def inherit_list(
    definition: Mapping[str, Any], parent: Mapping[str, Any], name: str
) -> dict[str, Any]:
    """Use the parent's *name* value unless the child already defines one."""
    result = dict(definition)
    if name not in result and name in parent:
        result[name] = parent[name]
    return result


def inherit_list_elements(
    definition: Mapping[str, Any],
    parent: Mapping[str, Any],
    name: str,
    identity: Sequence[str],
) -> dict[str, Any]:
    """Union the child's and parent's *name* lists by the *identity* keys.

    The result always holds a list under *name*, empty when neither scope
    declares anything.
    """
    elements = list(_as_list(definition.get(name)))
    seen = [_identity(element, identity) for element in elements]
    for element in _as_list(parent.get(name)):
        key = _identity(element, identity)
        if key not in seen:
            elements.append(element)
            seen.append(key)

    result = dict(definition)
    result[name] = elements
    return result


def inherit_map(
    definition: Mapping[str, Any], parent: Mapping[str, Any], name: str
) -> dict[str, Any]:
    """Merge the parent's *name* map under the child's.

    The result always holds a dict under *name*.
    """
    merged: dict[str, Any] = {}
    for scope in (parent, definition):
        value = scope.get(name)
        if isinstance(value, Mapping):
            merged.update(value)

    result = dict(definition)
    result[name] = merged
    return result


def inherit_scope_defaults(
    path_definition: Mapping[str, Any], document: Mapping[str, Any]
) -> dict[str, Any]:
    """Inherit ``consumes``, ``produces`` and ``security`` from the document."""
    return inherit(path_definition, document, replace=SCOPE_DEFAULT_KEYS)


def inherit_path_spec(
    operation: Mapping[str, Any], path_definition: Mapping[str, Any]
) -> dict[str, Any]:
    """Denormalize everything an operation inherits from its path item."""
    return inherit(
        operation,
        path_definition,
        replace=SCOPE_DEFAULT_KEYS,
        union=("parameters",),
        merge=("responses",),
    )


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _identity(element: Any, identity: Sequence[str]) -> Any:
    if isinstance(element, Mapping):
        return tuple(element.get(key) for key in identity)
    return element
