"""Recursive structural resolution of props types.

The walk is depth-first. It stops at ``max_depth`` and when a type's text is
already on the path from the root (an ancestor, not a sibling), so every
resolved tree is finite.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from ..facade.base import TypeNode
from ..models.shapes import (
    ArrayOf,
    Circular,
    Leaf,
    MaxDepth,
    ObjectOf,
    ResolvedShape,
    ShapeError,
)


def resolve(
    type_node: TypeNode,
    max_depth: Optional[int],
    depth: int = 0,
    on_path: Optional[List[str]] = None,
) -> ResolvedShape:
    """Resolve ``type_node`` into a shape.

    Args:
        type_node: Type to expand.
        max_depth: Deepest level still expanded; ``None`` means unbounded.
        depth: Level of ``type_node`` below the root.
        on_path: Keys of the ancestors currently being resolved. Used as a
            stack: each call pushes its key and pops it before returning.

    Returns:
        The resolved shape. Facade failures become ``ShapeError`` for the
        failing subtree only.
    """
    if max_depth is not None and depth > max_depth:
        return MaxDepth()
    path = on_path if on_path is not None else []

    try:
        key = type_node.text
    except Exception as exc:
        return ShapeError(str(exc) or type(exc).__name__)
    if key in path:
        return Circular()

    path.append(key)
    try:
        if type_node.is_array():
            element = type_node.element_type()
            if element is None:
                return Leaf(key)
            return ArrayOf(resolve(element, max_depth, depth + 1, path))
        if type_node.is_object():
            properties: Dict[str, ResolvedShape] = {}
            for name, prop_type in type_node.properties():
                properties[name] = resolve(prop_type, max_depth, depth + 1, path)
            return ObjectOf(properties)
        return Leaf(key)
    except Exception as exc:
        return ShapeError(str(exc) or type(exc).__name__, key)
    finally:
        path.pop()
