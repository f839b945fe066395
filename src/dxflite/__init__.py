from typing import Sequence

from .colors import aci_to_argb, aci_to_rgb
from .convert import ConvertResult, to_dxf
from .document import Document, parse, parse_string, read
from .entity import Arc, Circle, Entity, Layer, Line, Point, Polyline, Text, Vector2D, Vertex
from .pairs import CodePair, CodePairReader, MalformedCodeError
from .report import format_report, write_report
from .tessellate import (
    arc_vertexes,
    bulge_arc,
    circle_vertexes,
    polyline_vertexes,
    tessellate,
)

__all__ = [
    "read",
    "parse",
    "parse_string",
    "Document",
    "Entity",
    "Vector2D",
    "Layer",
    "Vertex",
    "Line",
    "Circle",
    "Arc",
    "Point",
    "Text",
    "Polyline",
    "CodePair",
    "CodePairReader",
    "MalformedCodeError",
    "tessellate",
    "circle_vertexes",
    "arc_vertexes",
    "polyline_vertexes",
    "bulge_arc",
    "aci_to_argb",
    "aci_to_rgb",
    "format_report",
    "write_report",
    "to_dxf",
    "ConvertResult",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxflite.cli import main as cli_main

    return cli_main(argv)
