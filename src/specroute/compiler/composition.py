"""Flatten ``allOf`` schema composition into single merged maps.

Swagger lets a schema be declared as the combination of several fragments::

    {"allOf": [{"$ref": "#/definitions/Base"}, {"properties": {...}}]}

After reference resolution every fragment is an inline map, and this module
folds them together so downstream consumers only ever see plain schemas.

JSON Schema allows fragments that contradict each other; here the last
definition of a key simply wins:

* mapping + mapping -- merged recursively, later keys win;
* list + list -- concatenated (so ``required`` lists accumulate);
* anything else -- replaced by the later value.

The enclosing map's own keys are folded in last and therefore win over every
fragment.  Key order follows first appearance, fragments before own keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

ALL_OF_KEY = "allOf"


def flatten_all_of(node: Any) -> Any:
    """Return a copy of *node* with every ``allOf`` directive merged away.

    Fragments are flattened before they are merged, so nested composition
    (a fragment that itself uses ``allOf``) works at any depth.  Fragments
    that are not maps are skipped.

    Args:
        node: Any node of a specification tree.

    Returns:
        The flattened node.  Containers are new; the input is not mutated.

    Example::

        flatten_all_of({"allOf": [{"a": 1}, {"a": 2, "b": 3}], "c": 4})
        # {"a": 2, "b": 3, "c": 4}
    """
    if isinstance(node, Mapping):
        own = {
            key: flatten_all_of(value)
            for key, value in node.items()
            if key != ALL_OF_KEY
        }
        if ALL_OF_KEY not in node:
            return own
        fragments = node[ALL_OF_KEY]
        if not isinstance(fragments, list):
            own[ALL_OF_KEY] = fragments
            return own

        merged: dict[str, Any] = {}
        for fragment in fragments:
            fragment = flatten_all_of(fragment)
            if isinstance(fragment, Mapping):
                merged = merge_fragments(merged, fragment)
        return merge_fragments(merged, own)

    if isinstance(node, list):
        return [flatten_all_of(item) for item in node]

    return node


def merge_fragments(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *overlay* into a copy of *base* using the composition rules."""
    result = dict(base)
    for key, value in overlay.items():
        if key in result:
            result[key] = _combine(result[key], value)
        else:
            result[key] = value
    return result


def _combine(earlier: Any, later: Any) -> Any:
    if isinstance(earlier, Mapping) and isinstance(later, Mapping):
        return merge_fragments(earlier, later)
    if isinstance(earlier, list) and isinstance(later, list):
        return [*earlier, *later]
    return later
