from __future__ import annotations

import math

import pytest

from dxflite.entity import Arc, Circle, Line, Polyline, Text, Vector2D, Vertex
from dxflite.tessellate import (
    arc_vertexes,
    bulge_arc,
    bulge_vertexes,
    circle_vertexes,
    polyline_vertexes,
    tessellate,
)
from tests._dxf_helpers import point_close


def _polyline(*vertexes: tuple[float, float, float], closed: bool = False) -> Polyline:
    return Polyline(
        vertexes=tuple(Vertex(Vector2D(x, y), bulge) for x, y, bulge in vertexes),
        closed=closed,
    )


def test_circle_precision_four_hits_the_axes() -> None:
    points = circle_vertexes(Circle(Vector2D(0.0, 0.0), 1.0), 4)

    assert len(points) == 4
    for actual, expected in zip(points, [(1, 0), (0, 1), (-1, 0), (0, -1)]):
        assert point_close(actual, expected)


def test_circle_is_offset_by_center_and_not_closed() -> None:
    points = circle_vertexes(Circle(Vector2D(10.0, -5.0), 2.0), 8)

    assert len(points) == 8
    assert point_close(points[0], (12.0, -5.0))
    assert not points[-1].is_close(points[0])
    for point in points:
        assert point.distance_to(Vector2D(10.0, -5.0)) == pytest.approx(2.0)


@pytest.mark.parametrize("precision", [-5, 0, 1, 2, 3])
def test_circle_precision_is_clamped_to_three(precision: int) -> None:
    assert len(circle_vertexes(Circle(Vector2D(0.0, 0.0), 1.0), precision)) == 3


def test_arc_quarter_turn() -> None:
    points = arc_vertexes(Arc(Vector2D(0.0, 0.0), 1.0, 0.0, 90.0), 4)

    assert len(points) == 5
    assert point_close(points[0], (1.0, 0.0))
    assert point_close(points[2], (math.sqrt(0.5), math.sqrt(0.5)))
    assert point_close(points[-1], (0.0, 1.0))


def test_arc_precision_below_floor_is_clamped_to_two() -> None:
    points = arc_vertexes(Arc(Vector2D(0.0, 0.0), 1.0, 0.0, 90.0), 1)

    assert len(points) == 3
    assert point_close(points[0], (1.0, 0.0))
    assert point_close(points[-1], (0.0, 1.0))


def test_arc_wraps_through_zero_degrees() -> None:
    points = arc_vertexes(Arc(Vector2D(0.0, 0.0), 1.0, 350.0, 10.0), 2)

    angles = [math.degrees(math.atan2(p.y, p.x)) for p in points]
    assert angles == pytest.approx([-10.0, 0.0, 10.0], abs=1e-9)


def test_semicircle_bulge_reconstructs_unit_radius() -> None:
    arc = bulge_arc(Vector2D(0.0, 0.0), Vector2D(2.0, 0.0), 1.0)

    assert arc.radius == pytest.approx(1.0)
    assert point_close(arc.center, (1.0, 0.0))
    assert arc.reflected is False


@pytest.mark.parametrize(("bulge", "midpoint"), [(1.0, (1.0, -1.0)), (-1.0, (1.0, 1.0))])
def test_semicircle_bulge_direction(bulge: float, midpoint: tuple[float, float]) -> None:
    points = bulge_vertexes(Vector2D(0.0, 0.0), Vector2D(2.0, 0.0), bulge, 2)

    assert len(points) == 3
    assert point_close(points[0], (0.0, 0.0))
    assert point_close(points[1], midpoint)
    assert point_close(points[2], (2.0, 0.0))


@pytest.mark.parametrize("bulge", [0.25, 0.5, 1.5, 3.0, -0.25, -0.5, -1.5, -3.0])
def test_bulge_arc_matches_ezdxf(bulge: float) -> None:
    ezdxf_math = pytest.importorskip("ezdxf.math")
    p1 = Vector2D(1.0, 2.0)
    p2 = Vector2D(4.0, -1.0)

    arc = bulge_arc(p1, p2, bulge)
    center, _start, _end, radius = ezdxf_math.bulge_to_arc(p1.to_tuple(), p2.to_tuple(), bulge)

    assert arc.radius == pytest.approx(abs(radius))
    assert point_close(arc.center, (center.x, center.y), eps=1e-9)
    assert arc.reflected is (abs(bulge) > 1.0)


@pytest.mark.parametrize("bulge", [0.3, 1.0, 2.5, -0.3, -1.0, -2.5])
def test_bulge_points_run_from_first_to_second_vertex_on_the_circle(bulge: float) -> None:
    p1 = Vector2D(-1.0, 3.0)
    p2 = Vector2D(2.0, 1.0)
    arc = bulge_arc(p1, p2, bulge)

    points = bulge_vertexes(p1, p2, bulge, 16)

    assert len(points) == 17
    assert points[0].is_close(p1, abs_tol=1e-9)
    assert points[-1].is_close(p2, abs_tol=1e-9)
    for point in points:
        assert point.distance_to(arc.center) == pytest.approx(arc.radius)


def test_bulge_sagitta_matches_definition() -> None:
    bulge = 0.5
    p1 = Vector2D(0.0, 0.0)
    p2 = Vector2D(4.0, 0.0)

    points = bulge_vertexes(p1, p2, bulge, 2)

    # sagitta = bulge * chord / 2, on the right of travel for a positive bulge
    assert point_close(points[1], (2.0, -1.0))


def test_zero_length_chord_yields_nan_center() -> None:
    arc = bulge_arc(Vector2D(1.0, 1.0), Vector2D(1.0, 1.0), 0.5)

    assert math.isnan(arc.center.x)
    assert math.isnan(arc.center.y)
    points = bulge_vertexes(Vector2D(1.0, 1.0), Vector2D(1.0, 1.0), 0.5, 4)
    assert len(points) == 5


def test_straight_polyline_is_returned_unchanged() -> None:
    polyline = _polyline((0, 0, 0), (1, 0, 0), (1, 1, 0))

    assert polyline_vertexes(polyline) == [Vector2D(0, 0), Vector2D(1, 0), Vector2D(1, 1)]


def test_polyline_expands_curved_segment() -> None:
    polyline = _polyline((0, 0, 0), (2, 0, 1.0), (4, 0, 0))

    points = polyline_vertexes(polyline, 4)

    # one straight start vertex, five arc points, then the last vertex
    assert len(points) == 1 + 5 + 1
    assert point_close(points[1], (2.0, 0.0))
    assert point_close(points[3], (3.0, -1.0))
    assert point_close(points[5], (4.0, 0.0))
    assert points[6] == Vector2D(4.0, 0.0)


def test_polyline_precision_is_clamped_per_segment() -> None:
    polyline = _polyline((0, 0, 0.5), (2, 0, 0))

    assert len(polyline_vertexes(polyline, 0)) == 3 + 1


def test_closed_polyline_closing_segment_is_opt_in() -> None:
    polyline = _polyline((0, 0, 0), (2, 0, 0), (2, 2, 1.0), closed=True)

    default = polyline_vertexes(polyline, 2)
    closing = polyline_vertexes(polyline, 2, close=True)

    assert default == [Vector2D(0, 0), Vector2D(2, 0)]
    assert len(closing) == 2 + 3
    assert point_close(closing[2], (2.0, 2.0))
    assert point_close(closing[-1], (0.0, 0.0))


def test_open_polyline_ignores_close_option() -> None:
    polyline = _polyline((0, 0, 0), (2, 0, 0), (2, 2, 1.0))

    assert polyline_vertexes(polyline, 2, close=True) == [Vector2D(0, 0), Vector2D(2, 0)]


def test_curved_last_vertex_is_omitted() -> None:
    polyline = _polyline((0, 0, 0), (2, 0, 0.5))

    assert polyline_vertexes(polyline, 2) == [Vector2D(0, 0)]


def test_straight_last_vertex_is_kept() -> None:
    polyline = _polyline((0, 0, 0.5), (2, 0, 0))

    points = polyline_vertexes(polyline, 2)

    assert points[-1] == Vector2D(2, 0)
    assert point_close(points[-2], (2.0, 0.0))


def test_empty_polyline() -> None:
    assert polyline_vertexes(Polyline()) == []


def test_tessellate_dispatches_on_entity_type() -> None:
    assert len(tessellate(Circle(Vector2D(0, 0), 1.0))) == 3
    assert len(tessellate(Circle(Vector2D(0, 0), 1.0), 12)) == 12
    assert len(tessellate(Arc(Vector2D(0, 0), 1.0, 0.0, 180.0), 6)) == 7
    assert tessellate(Line(Vector2D(0, 0), Vector2D(1, 1))) == [Vector2D(0, 0), Vector2D(1, 1)]
    assert tessellate(Text(Vector2D(3, 4), "x")) == [Vector2D(3, 4)]
    with pytest.raises(TypeError):
        tessellate("CIRCLE")
