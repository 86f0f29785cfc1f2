"""Framing guides for a camera preview that line up with the captured photo."""

from guidecam_overlay.draw_surface import DrawSurface, RecordingDrawSurface
from guidecam_overlay.framing_math import (
    CameraBounds,
    InvalidDimension,
    Point,
    Rect,
    Size,
    centered_rect,
    compute_content_bounds,
    normalized_rect_to_pixel,
    normalized_size_to_pixel,
    normalized_to_pixel,
    pixel_to_normalized,
    rule_of_thirds_lines,
)
from guidecam_overlay.guide_config import GuideConfiguration, OverlayColor
from guidecam_overlay.overlay_renderer import build_guide_commands, render

__all__ = [
    "CameraBounds",
    "DrawSurface",
    "GuideConfiguration",
    "InvalidDimension",
    "OverlayColor",
    "Point",
    "RecordingDrawSurface",
    "Rect",
    "Size",
    "build_guide_commands",
    "centered_rect",
    "compute_content_bounds",
    "normalized_rect_to_pixel",
    "normalized_size_to_pixel",
    "normalized_to_pixel",
    "pixel_to_normalized",
    "render",
    "rule_of_thirds_lines",
]

__version__ = "0.1.0"
