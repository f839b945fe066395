from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from .colors import is_valid_aci
from .document import Document, read
from .entity import Arc, Circle, Entity, Line, Point, Polyline, Text
from .tessellate import tessellate

logger = logging.getLogger(__name__)

DEFAULT_DXF_VERSION = "R2010"
DEFAULT_TEXT_HEIGHT = 2.5


@dataclass(frozen=True)
class ConvertResult:
    source_path: str | None
    output_path: str
    total_entities: int
    written_entities: int
    skipped_entities: int
    skipped_by_type: dict[str, int]


def to_dxf(
    source: str | Path | Document,
    output_path: str,
    *,
    types: str | Iterable[str] | None = None,
    dxf_version: str = DEFAULT_DXF_VERSION,
    explode: bool = False,
    precision: int | None = None,
    strict: bool = False,
) -> ConvertResult:
    """Write a parsed drawing to a new DXF file through ezdxf.

    With ``explode=True`` circles, arcs and polylines are written as
    LWPOLYLINEs built from their tessellated points.
    """
    ezdxf = _require_ezdxf()
    doc = source if isinstance(source, Document) else read(source)

    dxf_doc = ezdxf.new(dxfversion=dxf_version)
    _add_layers(dxf_doc, doc)
    modelspace = dxf_doc.modelspace()

    total = 0
    written = 0
    skipped_by_type: dict[str, int] = {}

    for entity in doc.query(types):
        total += 1
        if _write_entity_to_modelspace(modelspace, entity, explode=explode, precision=precision):
            written += 1
            continue
        skipped_by_type[entity.dxftype] = skipped_by_type.get(entity.dxftype, 0) + 1

    skipped = total - written
    if strict and skipped > 0:
        summary = ", ".join(
            f"{dxftype}:{count}" for dxftype, count in sorted(skipped_by_type.items())
        )
        raise ValueError(f"failed to convert {skipped} entities ({summary})")

    out_path = Path(output_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    dxf_doc.saveas(str(out_path))

    return ConvertResult(
        source_path=doc.path,
        output_path=str(out_path),
        total_entities=total,
        written_entities=written,
        skipped_entities=skipped,
        skipped_by_type=dict(sorted(skipped_by_type.items())),
    )


def _require_ezdxf():
    try:
        import ezdxf
    except ImportError as exc:
        raise ImportError(
            "ezdxf is required for DXF export. "
            'Install it with `pip install "dxflite[dxf]"`.'
        ) from exc
    return ezdxf


def _add_layers(dxf_doc: Any, doc: Document) -> None:
    for layer in doc.layers:
        if layer.name in dxf_doc.layers:
            continue
        attribs: dict[str, Any] = {}
        # a negative index is the color of a layer that is switched off
        color = abs(layer.color_index)
        # ACI 0 (BYBLOCK) is not a valid layer color
        if is_valid_aci(color) and color > 0:
            attribs["color"] = color
        try:
            dxf_layer = dxf_doc.layers.add(layer.name, **attribs)
            if layer.color_index < 0:
                dxf_layer.off()
        except Exception:
            logger.warning("could not add layer %r", layer.name, exc_info=True)


def _write_entity_to_modelspace(
    modelspace: Any, entity: Entity, *, explode: bool, precision: int | None
) -> bool:
    try:
        return _write_entity_to_modelspace_unsafe(
            modelspace, entity, explode=explode, precision=precision
        )
    except Exception:
        logger.warning("could not write %s entity on layer %r", entity.dxftype, entity.layer, exc_info=True)
        return False


def _write_entity_to_modelspace_unsafe(
    modelspace: Any, entity: Entity, *, explode: bool, precision: int | None
) -> bool:
    dxfattribs = {"layer": entity.layer}

    if isinstance(entity, Line):
        modelspace.add_line(entity.p1.to_tuple(), entity.p2.to_tuple(), dxfattribs=dxfattribs)
        return True

    if isinstance(entity, Point):
        modelspace.add_point(entity.position.to_tuple(), dxfattribs=dxfattribs)
        return True

    if isinstance(entity, Text):
        dxfattribs["insert"] = entity.position.to_tuple()
        dxfattribs["height"] = DEFAULT_TEXT_HEIGHT
        modelspace.add_text(entity.value, dxfattribs=dxfattribs)
        return True

    if explode and isinstance(entity, (Circle, Arc, Polyline)):
        points = [point.to_tuple() for point in tessellate(entity, precision)]
        if not points:
            return False
        close = isinstance(entity, Circle) or (isinstance(entity, Polyline) and entity.closed)
        modelspace.add_lwpolyline(points, format="xy", close=close, dxfattribs=dxfattribs)
        return True

    if isinstance(entity, Circle):
        modelspace.add_circle(entity.center.to_tuple(), entity.radius, dxfattribs=dxfattribs)
        return True

    if isinstance(entity, Arc):
        modelspace.add_arc(
            entity.center.to_tuple(),
            entity.radius,
            entity.start_angle,
            entity.end_angle,
            dxfattribs=dxfattribs,
        )
        return True

    if isinstance(entity, Polyline):
        if not entity.vertexes:
            return False
        vertices = [
            (vertex.position.x, vertex.position.y, vertex.bulge) for vertex in entity.vertexes
        ]
        modelspace.add_lwpolyline(vertices, format="xyb", close=entity.closed, dxfattribs=dxfattribs)
        return True

    return False
