"""Resolved props shapes.

A shape is the structural description of a props type produced by the
resolver. The plain encoding (``to_plain``) turns a shape into nested
dicts, lists and strings suitable for JSON output:

- ``Leaf``      -> its text
- ``ArrayOf``   -> ``[element]``
- ``ObjectOf``  -> ``{name: shape}``
- ``MaxDepth``  -> ``"Reached max depth"``
- ``Circular``  -> ``"Circular reference"``
- ``ShapeError`` -> ``'Error resolving type "<text>": <message>'``
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

MAX_DEPTH_MARKER = "Reached max depth"
CIRCULAR_MARKER = "Circular reference"


@dataclass(frozen=True, slots=True)
class Leaf:
    text: str


@dataclass(frozen=True, slots=True)
class ArrayOf:
    element: "ResolvedShape"


@dataclass(frozen=True, slots=True)
class ObjectOf:
    properties: Dict[str, "ResolvedShape"] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MaxDepth:
    pass


@dataclass(frozen=True, slots=True)
class Circular:
    pass


@dataclass(frozen=True, slots=True)
class ShapeError:
    message: str
    type_text: Optional[str] = None


ResolvedShape = Union[Leaf, ArrayOf, ObjectOf, MaxDepth, Circular, ShapeError]


def to_plain(shape: ResolvedShape) -> Any:
    """Encode a shape as nested dicts, lists and strings."""
    if isinstance(shape, Leaf):
        return shape.text
    if isinstance(shape, ArrayOf):
        return [to_plain(shape.element)]
    if isinstance(shape, ObjectOf):
        return {name: to_plain(value) for name, value in shape.properties.items()}
    if isinstance(shape, MaxDepth):
        return MAX_DEPTH_MARKER
    if isinstance(shape, Circular):
        return CIRCULAR_MARKER
    if isinstance(shape, ShapeError):
        return f'Error resolving type "{shape.type_text or "?"}": {shape.message}'
    raise TypeError(f"Not a resolved shape: {shape!r}")
