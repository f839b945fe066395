from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from dxflite.entity import Vector2D

Group = tuple[int, object]


def dxf_text(groups: Iterable[Group], *, eof: bool = True) -> str:
    lines: list[str] = []
    for code, value in groups:
        lines.append(f"{code:>3}")
        lines.append(str(value))
    if eof:
        lines.extend(["  0", "EOF"])
    return "\n".join(lines) + "\n"


def section(name: str, *groups: Group) -> list[Group]:
    return [(0, "SECTION"), (2, name), *groups, (0, "ENDSEC")]


def layer_table(*layers: tuple[str, int]) -> list[Group]:
    groups: list[Group] = [(0, "TABLE"), (2, "LAYER"), (70, len(layers))]
    for name, color in layers:
        groups.extend([(0, "LAYER"), (2, name), (70, 0), (62, color), (6, "CONTINUOUS")])
    groups.append((0, "ENDTAB"))
    return section("TABLES", *groups)


def entities(*groups: Group) -> list[Group]:
    return section("ENTITIES", *groups)


def drawing(*parts: list[Group]) -> str:
    groups: list[Group] = []
    for part in parts:
        groups.extend(part)
    return dxf_text(groups)


def iter_dxf_entities(path: Path) -> Iterator[dict[str, object]]:
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    section_name: str | None = None
    expect_section_name = False
    current_entity: dict[str, object] | None = None

    for i in range(0, len(lines) - 1, 2):
        code = lines[i].strip()
        value = lines[i + 1].strip()

        if code == "0":
            if current_entity is not None and section_name == "ENTITIES":
                yield current_entity
                current_entity = None

            if value == "SECTION":
                expect_section_name = True
                continue

            if value == "ENDSEC":
                section_name = None
                continue

            if section_name == "ENTITIES":
                current_entity = {"type": value, "groups": []}
            continue

        if expect_section_name and code == "2":
            section_name = value
            expect_section_name = False
            continue

        if section_name == "ENTITIES" and current_entity is not None:
            groups = current_entity["groups"]
            assert isinstance(groups, list)
            groups.append((code, value))

    if current_entity is not None and section_name == "ENTITIES":
        yield current_entity


def dxf_entities_of_type(path: Path, entity_type: str) -> list[dict[str, object]]:
    return [entity for entity in iter_dxf_entities(path) if entity["type"] == entity_type]


def group_value(entity: dict[str, object], code: str, default: str | None = None) -> str | None:
    groups = entity["groups"]
    assert isinstance(groups, list)
    for group_code, raw_value in groups:
        if group_code == code:
            return raw_value
    return default


def group_float(entity: dict[str, object], code: str, default: float = 0.0) -> float:
    value = group_value(entity, code)
    return default if value is None else float(value)


def point_close(actual: Vector2D, expected: tuple[float, float], eps: float = 1e-9) -> bool:
    return abs(actual.x - expected[0]) < eps and abs(actual.y - expected[1]) < eps
