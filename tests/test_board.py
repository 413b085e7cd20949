import json

from geoscene.board import board_elements, board_options, board_payload, format_board_commands
from geoscene.config import RenderConfig
from geoscene.scene import GeometryObject, Scene, Viewport


def _scene(*objects):
    return Scene(Viewport(-5.0, 5.0, -5.0, 5.0), tuple(objects))


def _points():
    return (
        GeometryObject("point", "A", (0.0, 0.0), label="$A$"),
        GeometryObject("point", "B", (4.0, 0.0)),
        GeometryObject("point", "C", (0.0, 3.0)),
    )


def test_board_options_use_padded_bounding_box():
    options = board_options(_scene())

    assert options["boundingbox"] == [-6.0, 6.0, 6.0, -6.0]
    assert options["keepaspectratio"] is True
    assert "axis" not in options


def test_elements_carry_resolved_coordinates_only():
    scene = _scene(
        *_points(),
        GeometryObject("segment", "AB", parents=("A", "B")),
        GeometryObject("circle", "c", parents=("A", "B")),
        GeometryObject("polygon", "T", parents=("A", "B", "C")),
        GeometryObject("vector", "v", (1.0, 2.0)),
        GeometryObject("line", "bad", parents=("A", "Q")),
    )

    elements = board_elements(scene, "CONCEPT")

    assert [el.type for el in elements] == ["point", "point", "point", "segment", "circle", "polygon", "arrow"]
    assert elements[0].parents == [0.0, 0.0]
    assert elements[0].attributes["name"] == "A"
    assert elements[1].attributes["withLabel"] is False
    assert elements[3].parents == [[0.0, 0.0], [4.0, 0.0]]
    assert elements[4].parents == [[0.0, 0.0], 4.0]
    assert elements[5].attributes["fillColor"] == "#4ade80"
    assert elements[6].parents == [[0.0, 0.0], [1.0, 2.0]]


def test_minor_policy_orders_angle_rays_counter_clockwise():
    scene = _scene(*_points(), GeometryObject("angle", "ang", parents=("C", "A", "B")))

    minor = board_elements(scene)[-1]
    oriented = board_elements(scene, config=RenderConfig(angle_arc="oriented"))[-1]

    assert minor.type == "angle"
    assert minor.parents == [[4.0, 0.0], [0.0, 0.0], [0.0, 3.0]]
    assert oriented.parents == [[0.0, 3.0], [0.0, 0.0], [4.0, 0.0]]
    assert minor.attributes["radius"] == RenderConfig().angle_radius


def test_format_board_commands():
    scene = _scene(*_points()[:2], GeometryObject("segment", "AB", parents=("A", "B")))

    commands = format_board_commands(board_elements(scene))

    assert commands == "point:[0.0,0.0];point:[4.0,0.0];segment:[[0.0,0.0],[4.0,0.0]]"
    for command in commands.split(";"):
        kind, data = command.split(":")
        assert kind
        json.loads(data)


def test_board_payload_is_json_serialisable():
    payload = board_payload(_scene(*_points()), "DRILL")

    text = json.dumps(payload)
    assert json.loads(text)["elements"][0]["attributes"]["strokeColor"] == "#facc15"
