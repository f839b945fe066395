"""Polygonal approximation of circles, arcs and bulge polylines.

All functions are pure. Precision values below the documented floor are
clamped up. Degenerate input (a zero-length bulge chord, a zero radius) is
not repaired: the affected coordinates come out as ``nan``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .entity import Arc, Circle, Line, Point, Polyline, Text, Vector2D

CIRCLE_MIN_PRECISION = 3
ARC_MIN_PRECISION = 2
POLYLINE_MIN_PRECISION = 2

_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class BulgeArc:
    """Circular arc implied by a bulge segment.

    ``start_angle``/``end_angle`` are radians in ``[0, 2π)`` and the arc runs
    counter-clockwise from start to end. For a negative bulge they are swapped,
    so the start angle belongs to the second vertex.
    """

    center: Vector2D
    radius: float
    start_angle: float
    end_angle: float
    reflected: bool


def _sweep(start: float, end: float) -> float:
    if start > end:
        return end + (_TWO_PI - start)
    return end - start


def _points_on_circle(cx: float, cy: float, radius: float, angles: np.ndarray) -> list[Vector2D]:
    with np.errstate(invalid="ignore"):
        xs = cx + radius * np.cos(angles)
        ys = cy + radius * np.sin(angles)
    return [Vector2D(float(x), float(y)) for x, y in zip(xs, ys)]


def circle_vertexes(circle: Circle, precision: int = CIRCLE_MIN_PRECISION) -> list[Vector2D]:
    """Return ``precision`` points around the circle starting on the positive X axis.

    The first point is not repeated at the end.
    """
    precision = max(int(precision), CIRCLE_MIN_PRECISION)
    increment = _TWO_PI / precision
    angles = increment * np.arange(precision)
    return _points_on_circle(circle.center.x, circle.center.y, circle.radius, angles)


def arc_vertexes(arc: Arc, precision: int = ARC_MIN_PRECISION) -> list[Vector2D]:
    """Return ``precision + 1`` points from the start angle to the end angle.

    Angles are in degrees; an end angle smaller than the start angle wraps
    through 0°.
    """
    precision = max(int(precision), ARC_MIN_PRECISION)
    start = math.radians(arc.start_angle)
    end = math.radians(arc.end_angle)
    increment = _sweep(start, end) / precision
    angles = start + increment * np.arange(precision + 1)
    return _points_on_circle(arc.center.x, arc.center.y, arc.radius, angles)


def bulge_arc(p1: Vector2D, p2: Vector2D, bulge: float) -> BulgeArc:
    """Reconstruct the arc from ``p1`` to ``p2`` described by ``bulge``.

    ``bulge`` is the tangent of a quarter of the included angle.
    """
    included = abs(math.atan(bulge) * 4.0)
    reflected = False
    if included > math.pi:
        included = _TWO_PI - included
        reflected = True

    chord = np.float64(p1.distance_to(p2))
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        # same as chord * sin((π - θ) / 2) / sin(θ), without the 0/0 at θ = π
        radius = chord / (2.0 * np.sin(included / 2.0))
        offset = np.sqrt((2.0 * radius / chord) ** 2 - 1.0)

    mid_x = (p1.x + p2.x) / 2.0
    mid_y = (p1.y + p2.y) / 2.0
    half_dx = (p1.x - p2.x) / 2.0
    half_dy = (p1.y - p2.y) / 2.0

    if bulge < 0 and not reflected:
        cx = mid_x - half_dy * offset
        cy = mid_y + half_dx * offset
    elif bulge < 0 and reflected:
        cx = mid_x + half_dy * offset
        cy = mid_y - half_dx * offset
    elif not reflected:
        cx = mid_x + half_dy * offset
        cy = mid_y - half_dx * offset
    else:
        cx = mid_x - half_dy * offset
        cy = mid_y + half_dx * offset

    if bulge < 0:
        first, second = p2, p1
    else:
        first, second = p1, p2
    start = math.pi + math.atan2(cy - first.y, cx - first.x)
    end = math.pi + math.atan2(cy - second.y, cx - second.x)
    if start >= _TWO_PI:
        start -= _TWO_PI
    if end >= _TWO_PI:
        end -= _TWO_PI

    return BulgeArc(
        center=Vector2D(float(cx), float(cy)),
        radius=float(abs(radius)),
        start_angle=start,
        end_angle=end,
        reflected=reflected,
    )


def bulge_vertexes(p1: Vector2D, p2: Vector2D, bulge: float, precision: int = POLYLINE_MIN_PRECISION) -> list[Vector2D]:
    """Return ``precision + 1`` points along a bulge segment, ordered from ``p1`` to ``p2``."""
    precision = max(int(precision), POLYLINE_MIN_PRECISION)
    arc = bulge_arc(p1, p2, bulge)
    increment = _sweep(arc.start_angle, arc.end_angle) / precision
    steps = np.arange(precision + 1)
    if bulge < 0:
        steps = steps[::-1]
    angles = arc.start_angle + increment * steps
    return _points_on_circle(arc.center.x, arc.center.y, arc.radius, angles)


def polyline_vertexes(
    polyline: Polyline,
    precision: int = POLYLINE_MIN_PRECISION,
    *,
    close: bool = False,
) -> list[Vector2D]:
    """Expand a polyline into points, replacing bulge segments by arcs.

    Straight segments contribute their start vertex; curved segments
    contribute ``precision + 1`` points including both ends. The last vertex
    is emitted as is only when its bulge is 0; a bulge there has no
    following vertex, so nothing is emitted for it. With ``close=True`` a
    closed polyline also gets its closing segment (last vertex back to the
    first) expanded, which lets a bulge on the last vertex take effect. The
    result is never auto-closed.
    """
    precision = max(int(precision), POLYLINE_MIN_PRECISION)
    vertexes = polyline.vertexes
    count = len(vertexes)
    closing = close and polyline.closed and count > 1
    coords: list[Vector2D] = []
    for i, vertex in enumerate(vertexes):
        is_last = i == count - 1
        if is_last and not closing:
            if vertex.bulge == 0:
                coords.append(vertex.position)
            break
        following = vertexes[0] if is_last else vertexes[i + 1]
        if vertex.bulge == 0:
            coords.append(vertex.position)
            continue
        coords.extend(bulge_vertexes(vertex.position, following.position, vertex.bulge, precision))
    return coords


def tessellate(entity: object, precision: int | None = None, *, close: bool = False) -> list[Vector2D]:
    """Approximate any parsed entity by points; ``close`` only affects polylines."""
    if isinstance(entity, Circle):
        return circle_vertexes(entity, CIRCLE_MIN_PRECISION if precision is None else precision)
    if isinstance(entity, Arc):
        return arc_vertexes(entity, ARC_MIN_PRECISION if precision is None else precision)
    if isinstance(entity, Polyline):
        return polyline_vertexes(
            entity, POLYLINE_MIN_PRECISION if precision is None else precision, close=close
        )
    if isinstance(entity, (Line, Point, Text)):
        return entity.to_points()
    raise TypeError(f"cannot tessellate {type(entity).__name__}")
