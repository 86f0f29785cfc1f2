"""Declarative guide configuration and its JSON settings loader."""
from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from guidecam_overlay.framing_math import Rect, centered_rect

_LOGGER = logging.getLogger("GuideCam.Config")

DEFAULT_CENTER_WIDTH = 0.8
DEFAULT_CENTER_HEIGHT = 0.6


def _clamp_alpha(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _clamp_channel(value: int) -> int:
    return max(0, min(255, int(value)))


@dataclass(frozen=True)
class OverlayColor:
    """RGB channels (0-255) plus an opacity in the 0.0-1.0 range."""

    red: int = 255
    green: int = 255
    blue: int = 255
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp_channel(self.red))
        object.__setattr__(self, "green", _clamp_channel(self.green))
        object.__setattr__(self, "blue", _clamp_channel(self.blue))
        object.__setattr__(self, "alpha", _clamp_alpha(self.alpha))

    @classmethod
    def from_hex(cls, value: str, *, alpha: Optional[float] = None) -> "OverlayColor":
        """Parse ``#RRGGBB`` or ``#RRGGBBAA``; an explicit ``alpha`` wins over the suffix."""
        token = value.strip().lstrip("#")
        if len(token) not in (6, 8):
            raise ValueError(f"Expected #RRGGBB or #RRGGBBAA, got {value!r}")
        red = int(token[0:2], 16)
        green = int(token[2:4], 16)
        blue = int(token[4:6], 16)
        parsed_alpha = int(token[6:8], 16) / 255.0 if len(token) == 8 else 1.0
        return cls(red, green, blue, parsed_alpha if alpha is None else alpha)

    def with_alpha(self, alpha: float) -> "OverlayColor":
        return dataclasses.replace(self, alpha=alpha)

    def rgba8(self) -> tuple[int, int, int, int]:
        return self.red, self.green, self.blue, int(round(self.alpha * 255))

    def name(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


@dataclass(frozen=True)
class GuideConfiguration:
    """What the overlay draws and how; never mutated by the renderer."""

    show_grid: bool = True
    show_center_rect: bool = True
    center_rect_normalized: Rect = field(
        default_factory=lambda: centered_rect(DEFAULT_CENTER_WIDTH, DEFAULT_CENTER_HEIGHT)
    )
    overlay_color: OverlayColor = field(default_factory=lambda: OverlayColor(255, 255, 255, 0.7))
    stroke_width: float = 2.0
    bracket_length_fraction: float = 0.05
    grid_alpha: float = 0.4
    grid_width_factor: float = 0.5
    bracket_width_factor: float = 1.5

    def grid_color(self) -> OverlayColor:
        # Never let the grid outweigh the primary guide.
        return self.overlay_color.with_alpha(min(self.grid_alpha, self.overlay_color.alpha))

    def grid_stroke_width(self) -> float:
        return self.stroke_width * self.grid_width_factor

    def bracket_stroke_width(self) -> float:
        return self.stroke_width * self.bracket_width_factor

    def replace(self, **changes: Any) -> "GuideConfiguration":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GuideConfiguration":
        """Build a configuration from a JSON-like mapping, defaulting bad values per key."""
        defaults = cls()

        def _float(value: Any, fallback: float) -> float:
            if value is None:
                return fallback
            try:
                return float(value)
            except (TypeError, ValueError):
                return fallback

        def _bool(value: Any, fallback: bool) -> bool:
            if value is None:
                return fallback
            return bool(value)

        def _color(value: Any, alpha: Any, fallback: OverlayColor) -> OverlayColor:
            resolved_alpha = _float(alpha, fallback.alpha)
            if isinstance(value, str):
                try:
                    parsed = OverlayColor.from_hex(value)
                except ValueError:
                    _LOGGER.debug("Ignoring invalid overlay_color %r", value)
                else:
                    if alpha is None and len(value.strip().lstrip("#")) == 8:
                        return parsed
                    return parsed.with_alpha(resolved_alpha)
            return fallback.with_alpha(resolved_alpha)

        def _rect(value: Any, fallback: Rect) -> Rect:
            if not isinstance(value, Mapping):
                return fallback
            if all(key in value for key in ("left", "top", "right", "bottom")):
                return Rect(
                    _float(value.get("left"), fallback.left),
                    _float(value.get("top"), fallback.top),
                    _float(value.get("right"), fallback.right),
                    _float(value.get("bottom"), fallback.bottom),
                )
            return centered_rect(
                _float(value.get("width"), fallback.width),
                _float(value.get("height"), fallback.height),
            )

        return cls(
            show_grid=_bool(payload.get("show_grid"), defaults.show_grid),
            show_center_rect=_bool(payload.get("show_center_rect"), defaults.show_center_rect),
            center_rect_normalized=_rect(payload.get("center_rect"), defaults.center_rect_normalized),
            overlay_color=_color(payload.get("overlay_color"), payload.get("overlay_alpha"), defaults.overlay_color),
            stroke_width=_float(payload.get("stroke_width"), defaults.stroke_width),
            bracket_length_fraction=_float(payload.get("bracket_length_fraction"), defaults.bracket_length_fraction),
            grid_alpha=_float(payload.get("grid_alpha"), defaults.grid_alpha),
            grid_width_factor=_float(payload.get("grid_width_factor"), defaults.grid_width_factor),
            bracket_width_factor=_float(payload.get("bracket_width_factor"), defaults.bracket_width_factor),
        )

    def to_payload(self) -> Dict[str, Any]:
        rect = self.center_rect_normalized
        return {
            "show_grid": self.show_grid,
            "show_center_rect": self.show_center_rect,
            "center_rect": {"left": rect.left, "top": rect.top, "right": rect.right, "bottom": rect.bottom},
            "overlay_color": self.overlay_color.name(),
            "overlay_alpha": self.overlay_color.alpha,
            "stroke_width": self.stroke_width,
            "bracket_length_fraction": self.bracket_length_fraction,
            "grid_alpha": self.grid_alpha,
            "grid_width_factor": self.grid_width_factor,
            "bracket_width_factor": self.bracket_width_factor,
        }


def load_guide_settings(settings_path: Path) -> GuideConfiguration:
    """Read guide_settings.json if it exists, falling back to defaults."""
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return GuideConfiguration()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        _LOGGER.warning("Ignoring malformed guide settings at %s", settings_path)
        return GuideConfiguration()
    if not isinstance(data, dict):
        return GuideConfiguration()
    return GuideConfiguration.from_payload(data)
