from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Iterator

from .colors import aci_to_argb

DEFAULT_LAYER = "0"


@dataclass(frozen=True)
class Vector2D:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> "Vector2D":
        return cls(0.0, 0.0)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    def __mul__(self, factor: float) -> "Vector2D":
        return Vector2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vector2D":
        return Vector2D(self.x / divisor, self.y / divisor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Vector2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_close(self, other: "Vector2D", abs_tol: float = 1e-9) -> bool:
        return math.isclose(self.x, other.x, abs_tol=abs_tol) and math.isclose(
            self.y, other.y, abs_tol=abs_tol
        )

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Layer:
    name: str = DEFAULT_LAYER
    color_index: int = 0

    @property
    def argb(self) -> int:
        return aci_to_argb(self.color_index)


@dataclass(frozen=True)
class Vertex:
    """Polyline vertex.

    ``bulge`` is the tangent of a quarter of the included angle of the arc
    running from this vertex to the next one; 0 is a straight segment and a
    negative value runs clockwise.
    """

    position: Vector2D = field(default_factory=Vector2D.zero)
    bulge: float = 0.0
    layer: str = DEFAULT_LAYER


@dataclass(frozen=True)
class Line:
    dxftype: ClassVar[str] = "LINE"

    p1: Vector2D = field(default_factory=Vector2D.zero)
    p2: Vector2D = field(default_factory=Vector2D.zero)
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [self.p1, self.p2]


@dataclass(frozen=True)
class Circle:
    dxftype: ClassVar[str] = "CIRCLE"

    center: Vector2D = field(default_factory=Vector2D.zero)
    radius: float = 0.0
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [self.center]


@dataclass(frozen=True)
class Arc:
    dxftype: ClassVar[str] = "ARC"

    center: Vector2D = field(default_factory=Vector2D.zero)
    radius: float = 0.0
    # degrees, counter-clockwise from the positive X axis
    start_angle: float = 0.0
    end_angle: float = 0.0
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [self.center]


@dataclass(frozen=True)
class Point:
    dxftype: ClassVar[str] = "POINT"

    position: Vector2D = field(default_factory=Vector2D.zero)
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [self.position]


@dataclass(frozen=True)
class Text:
    dxftype: ClassVar[str] = "TEXT"

    position: Vector2D = field(default_factory=Vector2D.zero)
    value: str = ""
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [self.position]


@dataclass(frozen=True)
class Polyline:
    dxftype: ClassVar[str] = "POLYLINE"

    vertexes: tuple[Vertex, ...] = ()
    closed: bool = False
    layer: str = DEFAULT_LAYER

    def to_points(self) -> list[Vector2D]:
        return [vertex.position for vertex in self.vertexes]

    @property
    def bulges(self) -> list[float]:
        return [vertex.bulge for vertex in self.vertexes]


Entity = Line | Circle | Arc | Point | Text | Polyline
