"""Turns a guide configuration into stroke commands on a draw surface.

Every coordinate is produced by :mod:`guidecam_overlay.framing_math` from a
single ``(surface size, content aspect ratio)`` snapshot, so the guides sit
on the same relative spot of the content that ends up in the captured photo.
Rendering keeps no state between calls.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from guidecam_overlay.debug_config import DebugConfig
from guidecam_overlay.draw_surface import DrawCommand, DrawSurface, StrokeLineCommand, StrokeRectCommand
from guidecam_overlay.framing_math import (
    CameraBounds,
    InvalidDimension,
    Point,
    Rect,
    Size,
    compute_content_bounds,
    normalized_rect_to_pixel,
    normalized_size_to_pixel,
    normalized_to_pixel,
    rule_of_thirds_lines,
)
from guidecam_overlay.guide_config import GuideConfiguration, OverlayColor

_LOGGER = logging.getLogger("GuideCam.Overlay")

TraceFn = Callable[[str, Mapping[str, Any]], None]

# (horizontal, vertical) arm direction per corner, measured from the corner.
BRACKET_DIRECTIONS: Tuple[Tuple[str, float, float], ...] = (
    ("top_left", 1.0, 1.0),
    ("top_right", -1.0, 1.0),
    ("bottom_left", 1.0, -1.0),
    ("bottom_right", -1.0, -1.0),
)

_DEBUG_OUTLINE_COLOR = OverlayColor(255, 0, 255, 0.8)


def _corner(rect: Rect, name: str) -> Point:
    x = rect.left if name.endswith("left") else rect.right
    y = rect.top if name.startswith("top") else rect.bottom
    return Point(x, y)


def _grid_commands(bounds: CameraBounds, config: GuideConfiguration) -> List[DrawCommand]:
    color = config.grid_color()
    width = config.grid_stroke_width()
    verticals, horizontals = rule_of_thirds_lines()
    commands: List[DrawCommand] = []
    for normalized_x in verticals:
        commands.append(
            StrokeLineCommand(
                normalized_to_pixel(normalized_x, 0.0, bounds),
                normalized_to_pixel(normalized_x, 1.0, bounds),
                color,
                width,
            )
        )
    for normalized_y in horizontals:
        commands.append(
            StrokeLineCommand(
                normalized_to_pixel(0.0, normalized_y, bounds),
                normalized_to_pixel(1.0, normalized_y, bounds),
                color,
                width,
            )
        )
    return commands


def bracket_length_px(bounds: CameraBounds, fraction: float) -> float:
    """Arm length in pixels; the shorter axis wins so both arms match."""
    size = normalized_size_to_pixel(fraction, fraction, bounds)
    return min(size.width, size.height)


def _bracket_commands(pixel_rect: Rect, bounds: CameraBounds, config: GuideConfiguration) -> List[DrawCommand]:
    length = bracket_length_px(bounds, config.bracket_length_fraction)
    color = config.overlay_color
    width = config.bracket_stroke_width()
    commands: List[DrawCommand] = []
    for name, dir_x, dir_y in BRACKET_DIRECTIONS:
        corner = _corner(pixel_rect, name)
        commands.append(StrokeLineCommand(corner, Point(corner.x + length * dir_x, corner.y), color, width))
        commands.append(StrokeLineCommand(corner, Point(corner.x, corner.y + length * dir_y), color, width))
    return commands


def build_guide_commands(
    bounds: CameraBounds,
    config: GuideConfiguration,
    *,
    debug: Optional[DebugConfig] = None,
) -> Tuple[DrawCommand, ...]:
    """Return the ordered draw commands for every enabled guide."""
    commands: List[DrawCommand] = []
    if debug is not None and debug.content_bounds_outline:
        commands.append(StrokeRectCommand(bounds.rect, _DEBUG_OUTLINE_COLOR, 1.0))

    pixel_rect: Optional[Rect] = None
    if config.show_center_rect:
        pixel_rect = normalized_rect_to_pixel(config.center_rect_normalized, bounds)
        commands.append(StrokeRectCommand(pixel_rect, config.overlay_color, config.stroke_width))

    if config.show_grid:
        commands.extend(_grid_commands(bounds, config))

    if pixel_rect is not None:
        commands.extend(_bracket_commands(pixel_rect, bounds, config))
    return tuple(commands)


def render(
    surface_size: Size,
    content_aspect_ratio: float,
    config: GuideConfiguration,
    draw_surface: DrawSurface,
    *,
    debug: Optional[DebugConfig] = None,
    trace: Optional[TraceFn] = None,
) -> Optional[CameraBounds]:
    """Draw all enabled guides; returns the bounds used, or None for a skipped frame.

    A surface that has not been measured yet (zero size) is an expected state:
    the frame is skipped without raising. Callers must serialize renders per
    surface; nothing here guards a surface against interleaved passes.
    """
    try:
        bounds = compute_content_bounds(surface_size.width, surface_size.height, content_aspect_ratio)
    except InvalidDimension as exc:
        _LOGGER.debug("Skipping overlay frame: %s", exc)
        return None

    commands = build_guide_commands(bounds, config, debug=debug)
    if trace:
        trace(
            "render:bounds",
            {
                "surface": (surface_size.width, surface_size.height),
                "aspect_ratio": content_aspect_ratio,
                "offset": (bounds.offset.x, bounds.offset.y),
                "size": (bounds.size.width, bounds.size.height),
                "command_count": len(commands),
            },
        )
    for command in commands:
        command.apply(draw_surface)
    return bounds
