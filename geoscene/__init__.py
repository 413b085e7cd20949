from .scene import GeometryObject, Scene, Viewport, OBJECT_KINDS
from .loader import load_scene, parse_scene, dump_scene, SceneFormatError
from .labels import sanitize_label
from .theme import Theme, select_theme, needs_grid
from .viewport import CoordinateMapper, ViewBox
from .geometry import (
    ResolvedAngle,
    ResolvedCircle,
    ResolvedGeometry,
    ResolvedPoint,
    ResolvedPolygon,
    ResolvedSegment,
    ResolvedVector,
)
from .resolver import resolve_scene, SceneResolution, UnresolvedObject
from .svg_renderer import render_svg, render_svg_string, save_svg
from .board import BoardElement, board_elements, board_options, board_payload, format_board_commands
from .config import RenderConfig, get_render_config, set_render_config

__all__ = [
    'GeometryObject',
    'Scene',
    'Viewport',
    'OBJECT_KINDS',
    'load_scene',
    'parse_scene',
    'dump_scene',
    'SceneFormatError',
    'sanitize_label',
    'Theme',
    'select_theme',
    'needs_grid',
    'CoordinateMapper',
    'ViewBox',
    'ResolvedAngle',
    'ResolvedCircle',
    'ResolvedGeometry',
    'ResolvedPoint',
    'ResolvedPolygon',
    'ResolvedSegment',
    'ResolvedVector',
    'resolve_scene',
    'SceneResolution',
    'UnresolvedObject',
    'render_svg',
    'render_svg_string',
    'save_svg',
    'BoardElement',
    'board_elements',
    'board_options',
    'board_payload',
    'format_board_commands',
    'RenderConfig',
    'get_render_config',
    'set_render_config',
]
