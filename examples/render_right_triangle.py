"""Example pipeline: load a wire-format scene and render it to SVG."""

from geoscene import parse_scene, render_svg_string, resolve_scene

TEXT = """
{
  "xmin": -1, "xmax": 5, "ymin": -1, "ymax": 4,
  "objects": [
    {"type": "point", "id": "A", "coords": [0, 0], "label": "$A$"},
    {"type": "point", "id": "B", "coords": [4, 0], "label": "$B$"},
    {"type": "point", "id": "C", "coords": [0, 3], "label": "$C$"},
    {"type": "polygon", "id": "ABC", "parents": ["A", "B", "C"]},
    {"type": "angle", "id": "alpha", "parents": ["C", "B", "A"], "label": "$\\\\alpha$"},
    {"type": "segment", "id": "hyp", "parents": ["B", "C"], "label": "5"}
  ]
}
"""


def main() -> None:
    scene = parse_scene(TEXT)
    resolution = resolve_scene(scene)
    print("Resolved:", len(resolution.entries), "of", len(scene))
    for obj, geom in resolution.entries:
        print(f"{obj.id}: {type(geom).__name__}")
    print(render_svg_string(scene, "EXAM", resolution=resolution))


if __name__ == "__main__":
    main()
