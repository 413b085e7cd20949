"""Example pipeline: build interactive board commands for a vector scene."""

import json

from geoscene import board_elements, board_options, format_board_commands, load_scene

SCENE = {
    "xmin": -5,
    "xmax": 5,
    "ymin": -5,
    "ymax": 5,
    "objects": [
        {"type": "vector", "id": "u", "coords": [3, 1], "label": "$\\vec{u}$"},
        {"type": "vector", "id": "v", "coords": [3, 1, 2, 4], "label": "$\\vec{v}$"},
        {"type": "point", "id": "O", "coords": [0, 0], "label": "O"},
        {"type": "point", "id": "P", "coords": [2, 4]},
        {"type": "vector", "id": "w", "parents": ["O", "P"], "label": "$\\vec{w}$"},
    ],
}


def main() -> None:
    scene = load_scene(SCENE)
    print("Options:", json.dumps(board_options(scene)))
    elements = board_elements(scene, "CONCEPT")
    print("Commands:", format_board_commands(elements))


if __name__ == "__main__":
    main()
