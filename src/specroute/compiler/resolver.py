"""Resolve ``$ref`` JSON Reference pointers in Swagger specifications.

Swagger documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/definitions/Pet"}``) to avoid repetition.  This module replaces
every such node with a copy of the object it points to, so that later stages
see fully inlined operation definitions.

Resolution runs as repeated whole-tree passes until the tree reaches a fixed
point.  Each pass walks the tree parent-before-children while carrying the
set of reference strings already inlined along the current ancestor chain; a
reference already in that set is left in place, which is what stops
self-referencing schemas from expanding forever.

Where a subtree came from is recorded in a side-table keyed by location (the
tuple of keys and list indices leading to it from the root).  The table
travels with the tree inside :class:`SpecTree`, so resolving an already
resolved tree changes nothing.

Only **internal** references (``#/...``) are followed.  References that are
external or point at nothing are left as-is and logged at debug level; they
are not an error at this stage.

The public entry point is :func:`resolve_refs`.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

REF_KEY = "$ref"

Location = tuple[Union[str, int], ...]

Chain = tuple[str, ...]


@dataclass
class SpecTree:
    """A specification tree together with its provenance side-table.

    Attributes:
        root: The document itself (nested dicts, lists and scalars).
        origins: Maps the location of every inlined subtree to the chain of
            reference strings it was copied through, in inlining order.  A
            node reached via an alias (``A -> B -> C``) records the whole
            chain so none of its links is followed again below it.
    """

    root: Any
    origins: dict[Location, Chain] = field(default_factory=dict)


def resolve_refs(spec: Union[Mapping[str, Any], SpecTree]) -> SpecTree:
    """Resolve all internal ``$ref`` pointers in the spec.

    Creates a deep copy of the input and iterates :func:`_resolve_pass`
    until a pass no longer changes anything.  The first pass over a raw
    document already inlines everything it can, so the second one only
    confirms the fixed point.

    Args:
        spec: The parsed spec document, or a :class:`SpecTree` returned by an
            earlier call (in which case its provenance is honoured).

    Returns:
        A **new** :class:`SpecTree`.  The input is never mutated.

    Example::

        tree = resolve_refs(raw)
        schema = tree.root["paths"]["/pets"]["get"]["responses"]["200"]["schema"]
        # schema is the inlined definition instead of a $ref pointer.
    """
    if isinstance(spec, SpecTree):
        tree = SpecTree(copy.deepcopy(spec.root), dict(spec.origins))
    else:
        tree = SpecTree(copy.deepcopy(spec))

    passes = 0
    while True:
        resolved = _resolve_pass(tree)
        passes += 1
        if resolved == tree:
            logger.debug(
                "Reference resolution reached a fixed point after %d pass(es)", passes
            )
            return resolved
        tree = resolved


def _resolve_pass(tree: SpecTree) -> SpecTree:
    """Run one parent-before-children rewrite over the whole tree."""
    origins = dict(tree.origins)
    root = _visit(tree.root, (), frozenset(), tree, origins)
    return SpecTree(root, origins)


def _visit(
    node: Any,
    location: Location,
    ancestors: frozenset[str],
    source: SpecTree,
    origins: dict[Location, Chain],
) -> Any:
    """Resolve *node* and its descendants.

    A node whose replacement is itself a reference keeps being replaced
    until it is a plain value or its reference is already among the
    ancestors.  Every reference inlined at *location* is appended to its
    chain in *origins*.

    Args:
        node: The current node.
        location: Path of *node* from the root.
        ancestors: References already inlined above *node*.
        source: The tree this pass started from; reference targets are read
            from it so a pass never sees its own partial output.
        origins: Provenance table being built for the pass output.

    Returns:
        The rewritten node (new containers; scalars as-is).
    """
    chain = origins.get(location, ())
    ancestors = ancestors.union(chain)

    inlined: list[str] = []
    while isinstance(node, Mapping):
        ref = node.get(REF_KEY)
        if not isinstance(ref, str) or ref in ancestors:
            break
        target_location = _pointer_location(ref, source.root)
        if target_location is None:
            logger.debug("Leaving unresolvable reference %s at %s", ref, location)
            break
        node = copy.deepcopy(_get_in(source.root, target_location))
        _move_origins(source.origins, target_location, origins, location)
        # The copied subtree also descends from whatever its target was inlined from.
        for link in (ref, *source.origins.get(target_location, ())):
            if link not in ancestors:
                inlined.append(link)
                ancestors = ancestors | {link}

    if inlined:
        origins[location] = (*chain, *inlined)

    if isinstance(node, Mapping):
        return {
            key: _visit(value, location + (key,), ancestors, source, origins)
            for key, value in node.items()
        }

    if isinstance(node, list):
        return [
            _visit(item, location + (index,), ancestors, source, origins)
            for index, item in enumerate(node)
        ]

    return node


def _move_origins(
    source_origins: Mapping[Location, Chain],
    target: Location,
    origins: dict[Location, Chain],
    destination: Location,
) -> None:
    """Copy provenance recorded below *target* so it sits below *destination*.

    Entries that belonged to whatever was at *destination* before (the
    reference node being replaced) are dropped first.
    """
    depth = len(destination)
    for location in [loc for loc in origins if len(loc) > depth and loc[:depth] == destination]:
        del origins[location]

    depth = len(target)
    for location, chain in source_origins.items():
        if len(location) > depth and location[:depth] == target:
            origins[destination + location[depth:]] = chain


def _pointer_location(ref: str, root: Any) -> Optional[Location]:
    """Translate an internal ``$ref`` string into a location inside *root*.

    Handles RFC 6901 JSON Pointer escaping (``~1`` for ``/``, ``~0`` for
    ``~``) and list indices.

    Returns:
        The location tuple, or ``None`` when the reference is external or
        does not point at an existing node.
    """
    if ref == "#":
        return ()
    if not ref.startswith("#/"):
        return None

    location: list[Union[str, int]] = []
    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
            location.append(segment)
        elif isinstance(current, list):
            if not segment.isdigit() or int(segment) >= len(current):
                return None
            index = int(segment)
            current = current[index]
            location.append(index)
        else:
            return None

    return tuple(location)


def _get_in(root: Any, location: Location) -> Any:
    """Return the node found at *location* (which must exist)."""
    current = root
    for step in location:
        current = current[step]
    return current
