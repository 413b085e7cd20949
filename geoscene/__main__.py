import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from geoscene import (
    RenderConfig,
    SceneFormatError,
    board_elements,
    board_payload,
    format_board_commands,
    parse_scene,
    render_svg_string,
    resolve_scene,
)
from geoscene.config import ANGLE_ARC_POLICIES, get_render_config
from geoscene.theme import MODE_COLORS

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render geometry scenes")
    parser.add_argument("path", help="Path to the scene JSON file")
    parser.add_argument(
        "--mode",
        default="SOLVER",
        type=str.upper,
        choices=list(MODE_COLORS),
        help="Visual mode selecting the color theme (default: SOLVER)",
    )
    parser.add_argument(
        "--backend",
        choices=["svg", "board"],
        default="svg",
        help="svg drawing or interactive board payload (default: svg)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "commands"],
        default="json",
        help="Board output as a JSON payload or as type:JSON commands (default: json)",
    )
    parser.add_argument("--width", type=int, default=480, help="Pixel width (default: 480)")
    parser.add_argument("--height", type=int, default=350, help="Pixel height (default: 350)")
    parser.add_argument(
        "--angle-arc",
        choices=list(ANGLE_ARC_POLICIES),
        help="Arc policy for angle sectors (default: minor)",
    )
    parser.add_argument(
        "--warn-unresolved",
        action="store_true",
        help="Log a warning for every object dropped during resolution",
    )
    parser.add_argument(
        "--output",
        help="Write the result to the given path instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    config: RenderConfig = get_render_config()
    if args.angle_arc:
        config.angle_arc = args.angle_arc
    if args.warn_unresolved:
        config.warn_unresolved = True

    text = Path(args.path).read_text(encoding="utf-8")
    logger.info("Loading scene from %s", args.path)
    try:
        scene = parse_scene(text)
    except SceneFormatError as exc:
        logger.error("Invalid scene %s: %s", args.path, exc)
        raise SystemExit(1)

    resolution = resolve_scene(scene, config=config)
    logger.info(
        "Resolved %d of %d object(s)",
        len(resolution.entries),
        len(scene.objects),
    )
    if resolution.unresolved and not config.warn_unresolved:
        logger.info(
            "Dropped %d unresolvable object(s): %s",
            len(resolution.unresolved),
            ", ".join(item.id for item in resolution.unresolved),
        )

    if args.backend == "board" and args.format == "commands":
        elements = board_elements(scene, args.mode, config=config, resolution=resolution)
        output = format_board_commands(elements)
    elif args.backend == "board":
        payload = board_payload(scene, args.mode, config=config, resolution=resolution)
        output = json.dumps(payload, indent=2)
    else:
        output = render_svg_string(
            scene,
            args.mode,
            width=args.width,
            height=args.height,
            config=config,
            resolution=resolution,
        )

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing %s output to %s", args.backend, output_path)
        output_path.write_text(output, encoding="utf-8")
    else:
        print(output)


if __name__ == "__main__":
    main(sys.argv[1:])
