"""Coordinate helpers mapping normalized guide geometry onto the preview surface.

Two coordinate spaces are in play:

* normalized: each axis spans 0..1 across the *visible content* (the camera
  frame), origin at its top-left corner.
* pixel: display-surface pixels, origin at the surface's top-left corner.

The content keeps a fixed aspect ratio and is fitted inside the surface
(letterboxed or pillarboxed as needed), so a normalized point lands on the
same relative spot of the captured frame whatever the surface size.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

PORTRAIT_4_3 = 3.0 / 4.0

_THIRDS: Tuple[float, float] = (1.0 / 3.0, 2.0 / 3.0)


class InvalidDimension(ValueError):
    """Raised when a surface dimension or aspect ratio is not strictly positive."""


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; the coordinate space is tracked by the caller."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_origin_size(cls, origin: Point, size: Size) -> "Rect":
        return cls(origin.x, origin.y, origin.x + size.width, origin.y + size.height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def top_left(self) -> Point:
        return Point(self.left, self.top)

    @property
    def bottom_right(self) -> Point:
        return Point(self.right, self.bottom)

    @property
    def center(self) -> Point:
        return Point((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def ordered(self) -> "Rect":
        return Rect(
            min(self.left, self.right),
            min(self.top, self.bottom),
            max(self.left, self.right),
            max(self.top, self.bottom),
        )


@dataclass(frozen=True)
class CameraBounds:
    """Pixel-space region of the surface actually covered by the content."""

    offset: Point
    size: Size

    @property
    def rect(self) -> Rect:
        return Rect.from_origin_size(self.offset, self.size)

    def contains(self, point: Point) -> bool:
        rect = self.rect
        return rect.left <= point.x <= rect.right and rect.top <= point.y <= rect.bottom


def _require_positive(name: str, value: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDimension(f"{name} must be a positive number, got {value!r}") from exc
    if not math.isfinite(numeric) or numeric <= 0.0:
        raise InvalidDimension(f"{name} must be a positive finite number, got {value!r}")
    return numeric


def aspect_ratio(width: float, height: float) -> float:
    """Return ``width / height`` for a ``W:H`` pair, e.g. ``aspect_ratio(3, 4)``."""
    return _require_positive("width", width) / _require_positive("height", height)


def parse_aspect_ratio(text: str) -> float:
    """Parse ``"3:4"`` or ``"0.75"`` into a width / height ratio."""
    token = text.strip()
    if ":" in token:
        width, _, height = token.partition(":")
        try:
            return aspect_ratio(float(width), float(height))
        except ValueError as exc:
            raise InvalidDimension(f"Invalid aspect ratio {text!r}") from exc
    return _require_positive("aspect ratio", token)


def compute_content_bounds(
    surface_width: float,
    surface_height: float,
    content_aspect_ratio: float,
) -> CameraBounds:
    """Return where content of ``content_aspect_ratio`` is drawn inside the surface.

    A surface relatively wider than the content pillarboxes it (full height,
    centred horizontally). Otherwise, including an exact aspect match, the
    content spans the full width and is centred vertically.
    """

    surface_w = _require_positive("surface_width", surface_width)
    surface_h = _require_positive("surface_height", surface_height)
    ratio = _require_positive("content_aspect_ratio", content_aspect_ratio)

    # min/max only absorb float rounding near an exact aspect match.
    if surface_w / surface_h > ratio:
        content_h = surface_h
        content_w = min(surface_w, surface_h * ratio)
        offset_x = max(0.0, (surface_w - content_w) / 2.0)
        offset_y = 0.0
    else:
        content_w = surface_w
        content_h = min(surface_h, surface_w / ratio)
        offset_x = 0.0
        offset_y = max(0.0, (surface_h - content_h) / 2.0)

    return CameraBounds(offset=Point(offset_x, offset_y), size=Size(content_w, content_h))


def normalized_to_pixel(nx: float, ny: float, bounds: CameraBounds) -> Point:
    # No clamping: margins slightly outside 0..1 are valid guide positions.
    return Point(
        bounds.offset.x + nx * bounds.size.width,
        bounds.offset.y + ny * bounds.size.height,
    )


def pixel_to_normalized(px: float, py: float, bounds: CameraBounds) -> Point:
    """Inverse of :func:`normalized_to_pixel` for the same ``bounds``.

    ``bounds`` must come from :func:`compute_content_bounds`; a hand-built
    zero-size :class:`CameraBounds` raises ``ZeroDivisionError``.
    """
    return Point(
        (px - bounds.offset.x) / bounds.size.width,
        (py - bounds.offset.y) / bounds.size.height,
    )


def normalized_rect_to_pixel(rect: Rect, bounds: CameraBounds) -> Rect:
    top_left = normalized_to_pixel(rect.left, rect.top, bounds)
    bottom_right = normalized_to_pixel(rect.right, rect.bottom, bounds)
    return Rect(top_left.x, top_left.y, bottom_right.x, bottom_right.y)


def normalized_size_to_pixel(width: float, height: float, bounds: CameraBounds) -> Size:
    return Size(width * bounds.size.width, height * bounds.size.height)


def centered_rect(width_fraction: float, height_fraction: float) -> Rect:
    """Return a normalized rectangle of the given fractions centred on the content.

    Fractions above 1 produce an intentionally oversized guide; they are not
    rejected.
    """
    left = (1.0 - width_fraction) / 2.0
    top = (1.0 - height_fraction) / 2.0
    return Rect(left, top, left + width_fraction, top + height_fraction)


def rule_of_thirds_lines() -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Return ``(vertical x positions, horizontal y positions)`` in normalized space."""
    return _THIRDS, _THIRDS
