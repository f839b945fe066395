from __future__ import annotations

import math
from pathlib import Path

from .document import Document


def _num(value: float, digits: int) -> str:
    rounded = round(value, digits)
    if not math.isfinite(rounded):
        return str(rounded)
    if digits == 0:
        return str(int(rounded))
    text = f"{rounded:.{digits}f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _xy(x: float, y: float) -> str:
    return f"{_num(x, 4)} {_num(y, 4)}"


def format_report(doc: Document) -> str:
    """Render every layer and entity of ``doc`` as plain text, one section per kind."""
    out: list[str] = ["LAYERS:"]
    for layer in doc.layers:
        out.append(f"Name: {layer.name}\t - Color: {layer.color_index}")

    out.append("")
    out.append("LINES:")
    for line in doc.lines:
        out.append(f"Layer: {line.layer}\t - P1: {_xy(line.p1.x, line.p1.y)}\t P2: {_xy(line.p2.x, line.p2.y)}")

    out.append("")
    out.append("POLYLINES:")
    for polyline in doc.polylines:
        out.append(
            f"Layer: {polyline.layer} - Vertex Count: {len(polyline.vertexes)}\t Closed: {polyline.closed}"
        )
        for index, vertex in enumerate(polyline.vertexes):
            out.append(
                f"Vertex {index}: {_xy(vertex.position.x, vertex.position.y)}\t Bulge: {_num(vertex.bulge, 5)}"
            )
        out.append("")

    out.append("")
    out.append("CIRCLES:")
    for circle in doc.circles:
        out.append(
            f"Layer: {circle.layer}\t Pos: {_xy(circle.center.x, circle.center.y)}\t Radius: {_num(circle.radius, 4)}"
        )

    out.append("")
    out.append("ARCS:")
    for arc in doc.arcs:
        out.append(
            f"Layer: {arc.layer}\t Pos: {_xy(arc.center.x, arc.center.y)}\t "
            f"Angles: {_num(arc.start_angle, 0)} {_num(arc.end_angle, 0)} Rad: {_num(arc.radius, 2)}"
        )

    out.append("")
    out.append("POINTS:")
    for point in doc.points:
        out.append(f"Layer: {point.layer}\t Pos: {_xy(point.position.x, point.position.y)}")

    out.append("")
    out.append("TEXTS:")
    for text in doc.texts:
        out.append(f"Layer: {text.layer}\t Pos: {_xy(text.position.x, text.position.y)}\t Value: {text.value}")

    return "\n".join(out) + "\n"


def default_report_path(source: str | Path) -> Path:
    source_path = Path(source)
    return source_path.with_suffix(".txt")


def write_report(doc: Document, destination: str | Path) -> Path:
    out_path = Path(destination)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(format_report(doc), encoding="utf-8")
    return out_path
