from __future__ import annotations

import logging
from typing import Any, Callable

from .entity import DEFAULT_LAYER, Arc, Circle, Layer, Line, Point, Polyline, Text, Vector2D, Vertex
from .pairs import CodePair, CodePairReader, parse_float, parse_int

logger = logging.getLogger(__name__)


def _as_text(pair: CodePair, _line_number: int) -> str:
    return pair.value


def _as_float(pair: CodePair, line_number: int) -> float | None:
    value = parse_float(pair.value)
    if value is None:
        logger.warning(
            "ignoring non-numeric value %r for group code %d at line %d",
            pair.value,
            pair.code,
            line_number,
        )
    return value


def _as_int(pair: CodePair, line_number: int) -> int | None:
    value = parse_int(pair.value)
    if value is None:
        logger.warning(
            "ignoring non-integer value %r for group code %d at line %d",
            pair.value,
            pair.code,
            line_number,
        )
    return value


_Codes = dict[int, tuple[str, Callable[[CodePair, int], Any]]]

_LAYER_CODES: _Codes = {2: ("name", _as_text), 62: ("color_index", _as_int)}
_LINE_CODES: _Codes = {
    8: ("layer", _as_text),
    10: ("x1", _as_float),
    20: ("y1", _as_float),
    11: ("x2", _as_float),
    21: ("y2", _as_float),
}
_CIRCLE_CODES: _Codes = {
    8: ("layer", _as_text),
    10: ("x", _as_float),
    20: ("y", _as_float),
    40: ("radius", _as_float),
}
_ARC_CODES: _Codes = {
    **_CIRCLE_CODES,
    50: ("start_angle", _as_float),
    51: ("end_angle", _as_float),
}
_POINT_CODES: _Codes = {
    8: ("layer", _as_text),
    10: ("x", _as_float),
    20: ("y", _as_float),
}
_TEXT_CODES: _Codes = {**_POINT_CODES, 1: ("value", _as_text)}
_VERTEX_CODES: _Codes = {**_POINT_CODES, 42: ("bulge", _as_float)}
_POLYLINE_CODES: _Codes = {8: ("layer", _as_text), 70: ("flags", _as_int)}


def _collect(reader: CodePairReader, codes: _Codes) -> tuple[dict[str, Any], CodePair | None]:
    """Consume pairs up to the next group 0 and keep the recognised fields."""
    fields: dict[str, Any] = {}
    while True:
        pair = reader.next_pair()
        if pair is None or pair.code == 0:
            return fields, pair
        entry = codes.get(pair.code)
        if entry is None:
            continue
        name, convert = entry
        value = convert(pair, reader.line_number)
        if value is not None:
            fields[name] = value


def _layer_name(fields: dict[str, Any]) -> str:
    return fields.get("layer") or DEFAULT_LAYER


def _vector(fields: dict[str, Any], x_key: str = "x", y_key: str = "y") -> Vector2D:
    return Vector2D(fields.get(x_key, 0.0), fields.get(y_key, 0.0))


def _is_closed(flags: int) -> bool:
    return (flags & 1) == 1


def read_section_name(reader: CodePairReader) -> tuple[str, CodePair | None]:
    """Return the name (group 2) of the section that was just opened.

    The pair that ended the scan is returned too: the group 2 pair itself, or
    a group 0 pair (with an empty name) that the caller still has to dispatch.
    """
    while True:
        pair = reader.next_pair()
        if pair is None or pair.code == 0:
            return "", pair
        if pair.code == 2:
            return pair.value, pair


def read_layer(reader: CodePairReader) -> tuple[Layer, CodePair | None]:
    fields, terminator = _collect(reader, _LAYER_CODES)
    return Layer(name=fields.get("name", DEFAULT_LAYER), color_index=fields.get("color_index", 0)), terminator


def read_line(reader: CodePairReader) -> tuple[Line, CodePair | None]:
    fields, terminator = _collect(reader, _LINE_CODES)
    line = Line(
        p1=_vector(fields, "x1", "y1"),
        p2=_vector(fields, "x2", "y2"),
        layer=_layer_name(fields),
    )
    return line, terminator


def read_circle(reader: CodePairReader) -> tuple[Circle, CodePair | None]:
    fields, terminator = _collect(reader, _CIRCLE_CODES)
    circle = Circle(center=_vector(fields), radius=fields.get("radius", 0.0), layer=_layer_name(fields))
    return circle, terminator


def read_arc(reader: CodePairReader) -> tuple[Arc, CodePair | None]:
    fields, terminator = _collect(reader, _ARC_CODES)
    arc = Arc(
        center=_vector(fields),
        radius=fields.get("radius", 0.0),
        start_angle=fields.get("start_angle", 0.0),
        end_angle=fields.get("end_angle", 0.0),
        layer=_layer_name(fields),
    )
    return arc, terminator


def read_point(reader: CodePairReader) -> tuple[Point, CodePair | None]:
    fields, terminator = _collect(reader, _POINT_CODES)
    return Point(position=_vector(fields), layer=_layer_name(fields)), terminator


def read_text(reader: CodePairReader) -> tuple[Text, CodePair | None]:
    fields, terminator = _collect(reader, _TEXT_CODES)
    text = Text(position=_vector(fields), value=fields.get("value", ""), layer=_layer_name(fields))
    return text, terminator


def read_vertex(reader: CodePairReader) -> tuple[Vertex, CodePair | None]:
    fields, terminator = _collect(reader, _VERTEX_CODES)
    vertex = Vertex(position=_vector(fields), bulge=fields.get("bulge", 0.0), layer=_layer_name(fields))
    return vertex, terminator


def read_polyline(reader: CodePairReader) -> tuple[Polyline, CodePair | None]:
    """Read a POLYLINE header followed by its VERTEX records up to SEQEND."""
    fields, pair = _collect(reader, _POLYLINE_CODES)
    vertexes: list[Vertex] = []
    while pair is not None and not (pair.code == 0 and pair.value == "SEQEND"):
        if pair.code == 0 and pair.value == "VERTEX":
            vertex, pair = read_vertex(reader)
            vertexes.append(vertex)
        else:
            pair = reader.next_pair()
    if pair is None:
        logger.debug("POLYLINE ended without SEQEND after %d vertexes", len(vertexes))
    polyline = Polyline(
        vertexes=tuple(vertexes),
        closed=_is_closed(fields.get("flags", 0)),
        layer=_layer_name(fields),
    )
    return polyline, pair


def read_lwpolyline(reader: CodePairReader) -> tuple[Polyline, CodePair | None]:
    """Read an LWPOLYLINE.

    Group 10 opens a vertex, group 20 commits it and group 42 sets the bulge
    of the vertex opened last, which may already be committed.
    """
    layer = DEFAULT_LAYER
    flags = 0
    committed: list[dict[str, float]] = []
    current: dict[str, float] = {}
    while True:
        pair = reader.next_pair()
        if pair is None or pair.code == 0:
            break
        line_number = reader.line_number
        if pair.code == 8:
            layer = pair.value or DEFAULT_LAYER
        elif pair.code == 70:
            value = _as_int(pair, line_number)
            if value is not None:
                flags = value
        elif pair.code == 10:
            current = {"x": _as_float(pair, line_number) or 0.0}
        elif pair.code == 20:
            y = _as_float(pair, line_number)
            if y is not None:
                current["y"] = y
            committed.append(current)
        elif pair.code == 42:
            bulge = _as_float(pair, line_number)
            if bulge is not None:
                current["bulge"] = bulge

    vertexes = tuple(
        Vertex(position=_vector(builder), bulge=builder.get("bulge", 0.0)) for builder in committed
    )
    return Polyline(vertexes=vertexes, closed=_is_closed(flags), layer=layer), pair
