from __future__ import annotations

import math
import xml.etree.ElementTree as ET

import pytest

from geoscene.config import RenderConfig
from geoscene.geometry import ResolvedAngle
from geoscene.scene import GeometryObject, Scene, Viewport
from geoscene.svg_renderer import (
    angle_sector_path,
    arrowhead_points,
    grid_step,
    render_svg_string,
    save_svg,
)
from geoscene.viewport import CoordinateMapper

SVG_NS = "{http://www.w3.org/2000/svg}"


def _scene(*objects) -> Scene:
    return Scene(Viewport(-5.0, 5.0, -5.0, 5.0), tuple(objects))


def _render(scene: Scene, mode: str = "SOLVER", **kwargs) -> ET.Element:
    return ET.fromstring(render_svg_string(scene, mode, **kwargs))


def _by_id(root: ET.Element, ident: str):
    for element in root.iter():
        if element.get("id") == ident:
            return element
    return None


def _triangle_scene(*extra) -> Scene:
    return _scene(
        GeometryObject("point", "A", (0.0, 0.0), label="$A$"),
        GeometryObject("point", "B", (4.0, 0.0)),
        GeometryObject("point", "C", (0.0, 3.0)),
        *extra,
    )


def test_root_is_sized_with_contain_fit() -> None:
    root = _render(_triangle_scene(), width=640, height=320)

    assert root.tag == f"{SVG_NS}svg"
    assert root.get("width") == "640"
    assert root.get("height") == "320"
    assert root.get("viewBox") == "-6 -6 12 12"
    assert root.get("preserveAspectRatio") == "xMidYMid meet"
    assert _by_id(root, "background") is not None


def test_point_disc_uses_theme_and_flipped_coordinates() -> None:
    root = _render(_triangle_scene(), mode="EXAM")

    disc = _by_id(root, "C")
    assert disc.tag == f"{SVG_NS}circle"
    assert disc.get("cx") == "0"
    assert disc.get("cy") == "-3"
    assert disc.get("fill") == "#c084fc"


def test_point_label_is_sanitized_and_offset_up_right() -> None:
    root = _render(_triangle_scene())

    label = _by_id(root, "A-label")
    assert label is not None
    assert label.text == "A"
    assert float(label.get("x")) > 0.0
    assert float(label.get("y")) < 0.0
    assert _by_id(root, "B-label") is None


def test_segment_from_parents_is_a_line_between_mapped_endpoints() -> None:
    root = _render(_triangle_scene(GeometryObject("segment", "AB", parents=("A", "B"))))

    line = _by_id(root, "AB")
    assert line.tag == f"{SVG_NS}line"
    assert (line.get("x1"), line.get("y1"), line.get("x2"), line.get("y2")) == ("0", "0", "4", "0")


def test_polygon_closed_path_follows_parent_order() -> None:
    root = _render(_triangle_scene(GeometryObject("polygon", "T", parents=("A", "B", "C"))))

    path = _by_id(root, "T")
    assert path.get("d") == "M 0 0 L 4 0 L 0 -3 Z"
    assert path.get("fill-opacity") is not None


def test_circle_radius_is_math_space_radius() -> None:
    root = _render(_triangle_scene(GeometryObject("circle", "c", parents=("A", "B"))))

    circle = _by_id(root, "c")
    assert circle.get("r") == "4"
    assert circle.get("fill") == "none"


def test_dangling_objects_are_omitted() -> None:
    root = _render(
        _triangle_scene(
            GeometryObject("line", "l", parents=("A", "Z")),
            GeometryObject("segment", "s", parents=("A", "C")),
        )
    )

    assert _by_id(root, "l") is None
    assert _by_id(root, "s") is not None


def test_grid_appears_only_with_a_vector() -> None:
    plain = _scene(
        GeometryObject("point", "O", (0.0, 0.0)),
        GeometryObject("circle", "c", parents=("O",), radius=2.0),
    )
    with_vector = Scene(plain.viewport, plain.objects + (GeometryObject("vector", "v", (2.0, 1.0)),))

    assert _by_id(_render(plain), "grid") is None
    grid = _by_id(_render(with_vector), "grid")
    assert grid is not None
    assert len([el for el in grid if el.get("class") == "axis"]) == 2


def test_vector_has_arrowhead_at_tip() -> None:
    root = _render(_scene(GeometryObject("vector", "v", (4.0, 0.0), label="\\vec{v}")))

    group = _by_id(root, "v")
    assert group.tag == f"{SVG_NS}g"
    heads = [el for el in group if el.get("class") == "arrowhead"]
    assert len(heads) == 1
    assert heads[0].get("d").startswith("M 4 0 ")
    assert _by_id(root, "v-label").text == "v"


def test_arrowhead_points_orientation() -> None:
    head = arrowhead_points((0.0, 0.0), (4.0, 0.0), 1.0)
    assert head == [(4.0, 0.0), (3.0, 0.5), (3.0, -0.5)]
    assert arrowhead_points((1.0, 1.0), (1.0, 1.0), 1.0) is None


def test_angle_sector_minor_versus_oriented() -> None:
    mapper = CoordinateMapper(Viewport(-5.0, 5.0, -5.0, 5.0))
    clockwise = ResolvedAngle(
        ray1=(0.0, 1.0),
        vertex=(0.0, 0.0),
        ray2=(1.0, 0.0),
        start_bearing=math.pi / 2,
        end_bearing=0.0,
    )

    minor = angle_sector_path(mapper, clockwise, 0.6, "minor")
    oriented = angle_sector_path(mapper, clockwise, 0.6, "oriented")

    assert minor == "M 0 0 L 0 -0.6 A 0.6 0.6 0 0 1 0.6 0 Z"
    assert oriented == "M 0 0 L 0 -0.6 A 0.6 0.6 0 1 0 0.6 0 Z"


def test_angle_is_rendered_with_fixed_radius() -> None:
    scene = _triangle_scene(
        GeometryObject("angle", "ang", parents=("B", "A", "C"), label="\\theta"),
    )
    root = _render(scene, config=RenderConfig(angle_radius=1.0))

    sector = _by_id(root, "ang")
    assert sector.get("d") == "M 0 0 L 1 0 A 1 1 0 0 0 0 -1 Z"
    assert _by_id(root, "ang-label").text == "θ"


def _arc_centre(d: str):
    """Centre of a sector's circular arc, recovered from its endpoints and flags."""

    tokens = d.split()
    x1, y1 = float(tokens[4]), float(tokens[5])
    r = float(tokens[7])
    large_arc, sweep = tokens[10], tokens[11]
    x2, y2 = float(tokens[12]), float(tokens[13])

    hx, hy = (x1 - x2) / 2.0, (y1 - y2) / 2.0
    half_chord_sq = hx * hx + hy * hy
    coef = math.sqrt(max(0.0, (r * r - half_chord_sq) / half_chord_sq))
    if large_arc == sweep:
        coef = -coef
    return (coef * hy + (x1 + x2) / 2.0, -coef * hx + (y1 + y2) / 2.0)


@pytest.mark.parametrize("policy", ["minor", "oriented"])
@pytest.mark.parametrize("rays", [("R", "S"), ("S", "R")])
def test_sector_arc_is_centred_on_vertex(policy, rays) -> None:
    scene = _scene(
        GeometryObject("point", "V", (1.0, 2.0)),
        GeometryObject("point", "R", (3.0, 2.0)),
        GeometryObject("point", "S", (0.0, 4.0)),
        GeometryObject("angle", "ang", parents=(rays[0], "V", rays[1])),
    )
    root = _render(scene, config=RenderConfig(angle_radius=1.0, angle_arc=policy))

    cx, cy = _arc_centre(_by_id(root, "ang").get("d"))

    assert math.isclose(cx, 1.0, abs_tol=1e-3)
    assert math.isclose(cy, -2.0, abs_tol=1e-3)


def test_small_viewport_keeps_distinct_coordinates() -> None:
    scene = Scene(
        Viewport(0.0, 0.001, 0.0, 0.001),
        (
            GeometryObject("point", "A", (0.00021, 0.00047)),
            GeometryObject("point", "B", (0.00024, 0.00047)),
        ),
    )
    root = _render(scene)

    a, b = _by_id(root, "A"), _by_id(root, "B")
    assert root.get("viewBox") == "-0.0001 -0.0011 0.0012 0.0012"
    assert float(a.get("r")) > 0.0
    assert float(a.get("cx")) == pytest.approx(0.00021)
    assert float(b.get("cx")) == pytest.approx(0.00024)
    assert float(a.get("cy")) == pytest.approx(-0.00047)


def test_all_unresolvable_scene_renders_empty() -> None:
    root = _render(_scene(GeometryObject("segment", "s", parents=("X", "Y"))))

    objects = _by_id(root, "objects")
    assert objects is not None
    assert len(list(objects)) == 0
    assert _by_id(root, "grid") is None


def test_rendering_is_deterministic() -> None:
    scene = _triangle_scene(
        GeometryObject("polygon", "T", parents=("A", "B", "C")),
        GeometryObject("vector", "v", (1.0, 1.0, 2.0, 3.0)),
    )

    assert render_svg_string(scene, "CONCEPT") == render_svg_string(scene, "CONCEPT")


def test_grid_step_is_nice() -> None:
    assert math.isclose(grid_step(12.0, 10), 2.0)
    assert math.isclose(grid_step(100.0, 10), 10.0)
    assert math.isclose(grid_step(0.3, 10), 0.05)
    assert grid_step(0.0, 10) == 0.0


def test_save_svg_writes_file(tmp_path) -> None:
    out = save_svg(_triangle_scene(), tmp_path / "figs" / "tri.svg", mode="DRILL")

    text = out.read_text(encoding="utf-8")
    assert text.startswith("<svg")
    assert "#facc15" in text
