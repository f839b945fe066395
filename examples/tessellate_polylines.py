import sys

import dxflite


def main() -> None:
    path = sys.argv[1] if len(sys.argv) > 1 else "examples/data/plan.dxf"
    doc = dxflite.read(path)

    for polyline in doc.polylines:
        points = doc.tessellate(polyline, 16, close=True)
        print(f"layer={polyline.layer} vertexes={len(polyline.vertexes)} points={len(points)}")
        if points:
            first, last = points[0], points[-1]
            print(f"  first=({first.x:.3f}, {first.y:.3f}) last=({last.x:.3f}, {last.y:.3f})")


if __name__ == "__main__":
    main()
