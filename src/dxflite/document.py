from __future__ import annotations

import enum
import fnmatch
import io
import logging
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, TextIO

from . import readers
from .entity import Arc, Circle, Entity, Layer, Line, Point, Polyline, Text
from .pairs import CodePair, CodePairReader

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

SUPPORTED_ENTITY_TYPES = (
    "LINE",
    "CIRCLE",
    "ARC",
    "POINT",
    "TEXT",
    "POLYLINE",
)

TYPE_ALIASES = {
    "LWPOLYLINE": "POLYLINE",
}

# document attribute holding each entity type
_ENTITY_LISTS = {
    "LINE": "lines",
    "CIRCLE": "circles",
    "ARC": "arcs",
    "POINT": "points",
    "TEXT": "texts",
    "POLYLINE": "polylines",
}

# group 0 tag -> (reader, document attribute); LAYER is only read before ENTITIES
_HEADER_READERS: dict[str, tuple[Callable, str]] = {
    "LAYER": (readers.read_layer, "layers"),
}
_ENTITY_READERS: dict[str, tuple[Callable, str]] = {
    "LINE": (readers.read_line, "lines"),
    "CIRCLE": (readers.read_circle, "circles"),
    "ARC": (readers.read_arc, "arcs"),
    "POINT": (readers.read_point, "points"),
    "TEXT": (readers.read_text, "texts"),
    "POLYLINE": (readers.read_polyline, "polylines"),
    "LWPOLYLINE": (readers.read_lwpolyline, "polylines"),
}


class _Section(enum.Enum):
    SCANNING_HEADER = enum.auto()
    IN_ENTITIES = enum.auto()


@dataclass(frozen=True)
class Document:
    """Layers and entities of one parsed drawing; never modified after parsing."""

    layers: tuple[Layer, ...] = ()
    lines: tuple[Line, ...] = ()
    circles: tuple[Circle, ...] = ()
    arcs: tuple[Arc, ...] = ()
    points: tuple[Point, ...] = ()
    texts: tuple[Text, ...] = ()
    polylines: tuple[Polyline, ...] = ()
    path: str | None = None

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        for dxftype in _normalize_types(types):
            yield from getattr(self, _ENTITY_LISTS[dxftype])

    def counts(self) -> dict[str, int]:
        return {dxftype: len(getattr(self, attr)) for dxftype, attr in _ENTITY_LISTS.items()}

    def entity_count(self) -> int:
        return sum(self.counts().values())

    def layer(self, name: str) -> Layer | None:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def tessellate(self, entity: Entity, precision: int | None = None, *, close: bool = False):
        from .tessellate import tessellate

        return tessellate(entity, precision, close=close)

    def export_dxf(self, output_path: str, **kwargs):
        from .convert import to_dxf

        return to_dxf(self, output_path, **kwargs)


def read(path: str | Path, *, encoding: str = DEFAULT_ENCODING, errors: str = "replace") -> Document:
    file_path = Path(path)
    with file_path.open("r", encoding=encoding, errors=errors, newline="") as stream:
        return parse(stream, path=str(file_path))


def parse_string(text: str) -> Document:
    return parse(io.StringIO(text, newline=""))


def parse(source: TextIO | Iterable[str] | CodePairReader, *, path: str | None = None) -> Document:
    """Parse an ASCII DXF line source into a Document.

    Raises ``MalformedCodeError`` when a group code line is not an integer;
    everything else that is not understood is skipped.
    """
    reader = source if isinstance(source, CodePairReader) else CodePairReader(source)
    collected: dict[str, list] = {attr: [] for attr in ("layers", *_ENTITY_LISTS.values())}
    skipped: Counter[str] = Counter()
    state = _Section.SCANNING_HEADER

    pair: CodePair | None = reader.next_pair()
    while pair is not None and pair.value != "EOF":
        if pair.code != 0:
            pair = reader.next_pair()
            continue

        if state is _Section.SCANNING_HEADER:
            if pair.value == "SECTION":
                name, pair = readers.read_section_name(reader)
                if name == "ENTITIES":
                    state = _Section.IN_ENTITIES
                    logger.debug("entering ENTITIES at line %d", reader.line_number)
                continue
            table = _HEADER_READERS
        else:
            table = _ENTITY_READERS

        target = table.get(pair.value)
        if target is None:
            skipped[pair.value] += 1
            pair = reader.next_pair()
            continue
        read_object, attr = target
        record, pair = read_object(reader)
        collected[attr].append(record)

    if skipped:
        logger.debug("skipped group 0 tags: %s", dict(skipped))
    doc = Document(path=path, **{attr: tuple(items) for attr, items in collected.items()})
    logger.debug("parsed %s: layers=%d %s", path or "<stream>", len(doc.layers), doc.counts())
    return doc


def _normalize_types(types: str | Iterable[str] | None) -> list[str]:
    default_types = list(SUPPORTED_ENTITY_TYPES)
    if types is None:
        return default_types
    if isinstance(types, str):
        tokens = re.split(r"[,\s]+", types.strip())
    else:
        tokens = list(types)

    normalized = [token.strip().upper() for token in tokens if token and token.strip()]
    normalized = [TYPE_ALIASES.get(token, token) for token in normalized]
    if not normalized:
        return default_types

    if any(token in {"*", "ALL"} for token in normalized):
        return default_types

    selected: list[str] = []
    seen = set()

    for token in normalized:
        if any(ch in token for ch in "*?[]"):
            matches = [name for name in SUPPORTED_ENTITY_TYPES if fnmatch.fnmatchcase(name, token)]
            for name in matches:
                if name not in seen:
                    seen.add(name)
                    selected.append(name)
            continue

        if token in SUPPORTED_ENTITY_TYPES and token not in seen:
            seen.add(token)
            selected.append(token)

    return selected
