"""Drawing-surface adapter and the draw commands the overlay renderer emits."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from guidecam_overlay.framing_math import Point, Rect
from guidecam_overlay.guide_config import OverlayColor


class DrawSurface:
    """Minimal stroke-only 2D target; implement against any graphics backend."""

    def stroke_rectangle(self, rect: Rect, color: OverlayColor, width: float) -> None: ...
    def stroke_line(self, start: Point, end: Point, color: OverlayColor, width: float) -> None: ...


@dataclass(frozen=True)
class StrokeRectCommand:
    rect: Rect
    color: OverlayColor
    width: float

    def apply(self, surface: DrawSurface) -> None:
        surface.stroke_rectangle(self.rect, self.color, self.width)


@dataclass(frozen=True)
class StrokeLineCommand:
    start: Point
    end: Point
    color: OverlayColor
    width: float

    def apply(self, surface: DrawSurface) -> None:
        surface.stroke_line(self.start, self.end, self.color, self.width)


DrawCommand = Union[StrokeRectCommand, StrokeLineCommand]


class RecordingDrawSurface(DrawSurface):
    """Keeps every command issued to it, in order."""

    def __init__(self) -> None:
        self.commands: List[DrawCommand] = []

    def stroke_rectangle(self, rect: Rect, color: OverlayColor, width: float) -> None:
        self.commands.append(StrokeRectCommand(rect, color, width))

    def stroke_line(self, start: Point, end: Point, color: OverlayColor, width: float) -> None:
        self.commands.append(StrokeLineCommand(start, end, color, width))

    def lines(self) -> List[StrokeLineCommand]:
        return [command for command in self.commands if isinstance(command, StrokeLineCommand)]

    def rectangles(self) -> List[StrokeRectCommand]:
        return [command for command in self.commands if isinstance(command, StrokeRectCommand)]

    def clear(self) -> None:
        self.commands.clear()
