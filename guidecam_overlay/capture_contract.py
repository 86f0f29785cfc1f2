"""Alignment contract between the overlay and the capture device.

The overlay only lines up with the saved photo when the capture device binds
its preview and still output with the same aspect ratio and framing that the
overlay uses to compute its bounds. The device side owns that guarantee; these
helpers let it state the binding once and check captured frames against it.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from guidecam_overlay.framing_math import (
    PORTRAIT_4_3,
    Rect,
    aspect_ratio,
    compute_content_bounds,
    normalized_rect_to_pixel,
)

_LOGGER = logging.getLogger("GuideCam.Capture")


@dataclass(frozen=True)
class CaptureBinding:
    """Aspect ratio (width / height) and rotation the capture session was bound with.

    Only an upright binding (``rotation == 0``) is supported.
    """

    content_aspect_ratio: float = PORTRAIT_4_3
    rotation: int = 0

    def __post_init__(self) -> None:
        # Validates the ratio through the same path the renderer uses.
        aspect_ratio(self.content_aspect_ratio, 1.0)
        if self.rotation != 0:
            raise ValueError(f"Only upright capture bindings are supported, got rotation={self.rotation}")

    def matches(self, capture_width: float, capture_height: float, *, rel_tol: float = 1e-3) -> bool:
        """Return True when a captured frame has the bound aspect ratio."""
        actual = aspect_ratio(capture_width, capture_height)
        if math.isclose(actual, self.content_aspect_ratio, rel_tol=rel_tol):
            return True
        _LOGGER.warning(
            "Captured frame %sx%s has aspect %.4f but the overlay was bound at %.4f; guides will not align",
            capture_width,
            capture_height,
            actual,
            self.content_aspect_ratio,
        )
        return False

    def guide_rect_in_capture(self, rect: Rect, capture_width: float, capture_height: float) -> Rect:
        """Map a normalized guide into the captured photo's pixel space."""
        bounds = compute_content_bounds(capture_width, capture_height, self.content_aspect_ratio)
        return normalized_rect_to_pixel(rect, bounds)
