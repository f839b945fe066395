from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .convert import DEFAULT_DXF_VERSION, to_dxf
from .document import SUPPORTED_ENTITY_TYPES, read
from .pairs import MalformedCodeError
from .report import default_report_path, write_report
from .tessellate import tessellate


def _package_version() -> str:
    try:
        return version("dxflite")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dxflite", description="Inspect, report and convert ASCII DXF files.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser diagnostics (skipped tags, entity counts).",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser("inspect", help="Show entity counts and layers.")
    inspect_parser.add_argument("path", help="Path to DXF file.")

    report_parser = subparsers.add_parser("report", help="Write a text report of every entity.")
    report_parser.add_argument("path", help="Path to DXF file.")
    report_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Report path (default: input path with a .txt suffix).",
    )

    tessellate_parser = subparsers.add_parser(
        "tessellate",
        help="Show how many points each entity expands to.",
    )
    tessellate_parser.add_argument("path", help="Path to DXF file.")
    tessellate_parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Segments per circle/arc/bulge (clamped to each curve's minimum).",
    )
    tessellate_parser.add_argument(
        "--types",
        default=None,
        help='Entity filter passed to query(), e.g. "CIRCLE ARC POLYLINE".',
    )
    tessellate_parser.add_argument(
        "--close",
        action="store_true",
        help="Expand the closing segment of closed polylines.",
    )

    convert_parser = subparsers.add_parser(
        "convert",
        help="Rewrite the parsed entities as DXF using ezdxf as the writing backend.",
    )
    convert_parser.add_argument("input_path", help="Path to DXF file.")
    convert_parser.add_argument("output_path", help="Path to output DXF file.")
    convert_parser.add_argument(
        "--types",
        default=None,
        help='Entity filter passed to query(), e.g. "LINE ARC POLYLINE".',
    )
    convert_parser.add_argument(
        "--dxf-version",
        default=DEFAULT_DXF_VERSION,
        help="DXF version for ezdxf.new(), e.g. R12/R2000/R2010.",
    )
    convert_parser.add_argument(
        "--explode",
        action="store_true",
        help="Write circles, arcs and polylines as tessellated LWPOLYLINEs.",
    )
    convert_parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Tessellation precision used with --explode.",
    )
    convert_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any entity cannot be converted.",
    )
    return parser


def _load(path: str):
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return None
    try:
        return read(file_path)
    except (MalformedCodeError, OSError) as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
    return None


def _run_inspect(path: str) -> int:
    doc = _load(path)
    if doc is None:
        return 2

    counts = doc.counts()
    print(f"file: {path}")
    print(f"total_entities: {doc.entity_count()}")
    for dxftype in SUPPORTED_ENTITY_TYPES:
        count = counts.get(dxftype, 0)
        if count > 0:
            print(f"{dxftype}: {count}")
    print(f"layers: {len(doc.layers)}")
    for layer in doc.layers:
        print(f"layer[{layer.name}]: color={layer.color_index}")
    return 0


def _run_report(path: str, *, output: str | None = None) -> int:
    doc = _load(path)
    if doc is None:
        return 2

    destination = Path(output) if output else default_report_path(path)
    try:
        out_path = write_report(doc, destination)
    except OSError as exc:
        print(f"error: failed to write report: {exc}", file=sys.stderr)
        return 2
    print(f"report: {out_path}")
    return 0


def _run_tessellate(
    path: str,
    *,
    precision: int | None = None,
    types: str | None = None,
    close: bool = False,
) -> int:
    doc = _load(path)
    if doc is None:
        return 2

    total = 0
    for index, entity in enumerate(doc.query(types)):
        points = tessellate(entity, precision, close=close)
        total += len(points)
        print(f"{entity.dxftype}[{index}] layer={entity.layer} points={len(points)}")
    print(f"total_points: {total}")
    return 0


def _run_convert(
    input_path: str,
    output_path: str,
    *,
    types: str | None = None,
    dxf_version: str = DEFAULT_DXF_VERSION,
    explode: bool = False,
    precision: int | None = None,
    strict: bool = False,
) -> int:
    doc = _load(input_path)
    if doc is None:
        return 2

    try:
        result = to_dxf(
            doc,
            output_path,
            types=types,
            dxf_version=dxf_version,
            explode=explode,
            precision=precision,
            strict=strict,
        )
    except Exception as exc:
        print(f"error: failed to convert DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {result.source_path}")
    print(f"output: {result.output_path}")
    print(f"total_entities: {result.total_entities}")
    print(f"written_entities: {result.written_entities}")
    print(f"skipped_entities: {result.skipped_entities}")
    for dxftype, count in result.skipped_by_type.items():
        print(f"skipped[{dxftype}]: {count}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "inspect":
        return _run_inspect(args.path)
    if args.command == "report":
        return _run_report(args.path, output=args.output)
    if args.command == "tessellate":
        return _run_tessellate(
            args.path,
            precision=args.precision,
            types=args.types,
            close=bool(args.close),
        )
    if args.command == "convert":
        return _run_convert(
            args.input_path,
            args.output_path,
            types=args.types,
            dxf_version=args.dxf_version,
            explode=bool(args.explode),
            precision=args.precision,
            strict=bool(args.strict),
        )

    parser.print_help()
    return 0
