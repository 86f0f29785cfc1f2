from __future__ import annotations

from typing import Any, List, Mapping, Tuple

import pytest

from guidecam_overlay.debug_config import DebugConfig
from guidecam_overlay.draw_surface import DrawSurface, RecordingDrawSurface, StrokeLineCommand, StrokeRectCommand
from guidecam_overlay.framing_math import PORTRAIT_4_3, Point, Rect, Size, centered_rect, compute_content_bounds
from guidecam_overlay.guide_config import GuideConfiguration, OverlayColor
from guidecam_overlay.overlay_renderer import bracket_length_px, build_guide_commands, render


class FakeSurface(DrawSurface):
    def __init__(self) -> None:
        self.operations: List[Tuple[str, Tuple]] = []

    def stroke_rectangle(self, rect: Rect, color: OverlayColor, width: float) -> None:
        self.operations.append(("rect", (rect.left, rect.top, rect.right, rect.bottom, width)))

    def stroke_line(self, start: Point, end: Point, color: OverlayColor, width: float) -> None:
        self.operations.append(("line", (start.x, start.y, end.x, end.y, width)))


class ExplodingSurface(DrawSurface):
    def stroke_rectangle(self, rect: Rect, color: OverlayColor, width: float) -> None:
        raise RuntimeError("backend failure")


WIDE = Size(2000.0, 1000.0)


def _signs(command: StrokeLineCommand) -> Tuple[int, int]:
    def sign(value: float) -> int:
        return (value > 0) - (value < 0)

    return sign(command.end.x - command.start.x), sign(command.end.y - command.start.y)


def test_render_issues_rect_grid_then_brackets():
    surface = FakeSurface()
    bounds = render(WIDE, PORTRAIT_4_3, GuideConfiguration(), surface)

    assert bounds is not None
    kinds = [op for op, _ in surface.operations]
    assert kinds == ["rect"] + ["line"] * 4 + ["line"] * 8

    left, top, right, bottom, width = surface.operations[0][1]
    assert (left, top, right, bottom) == pytest.approx((700.0, 200.0, 1300.0, 800.0))
    assert width == 2.0


def test_grid_lines_span_content_not_surface():
    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, GuideConfiguration(show_center_rect=False), surface)

    lines = surface.lines()
    assert len(lines) == 4
    verticals, horizontals = lines[:2], lines[2:]
    for line, expected_x in zip(verticals, (875.0, 1125.0)):
        assert line.start.x == pytest.approx(expected_x)
        assert line.end.x == pytest.approx(expected_x)
        assert (line.start.y, line.end.y) == pytest.approx((0.0, 1000.0))
    for line, expected_y in zip(horizontals, (1000.0 / 3.0, 2000.0 / 3.0)):
        assert (line.start.x, line.end.x) == pytest.approx((625.0, 1375.0))
        assert line.start.y == pytest.approx(expected_y)
        assert line.end.y == pytest.approx(expected_y)


def test_grid_is_visually_subordinate():
    config = GuideConfiguration()
    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, config, surface)

    grid = surface.lines()[:4]
    brackets = surface.lines()[4:]
    rect = surface.rectangles()[0]
    assert all(line.color.alpha == pytest.approx(0.4) for line in grid)
    assert all(line.width == pytest.approx(1.0) for line in grid)
    assert all(line.color.alpha < rect.color.alpha for line in grid)
    assert all(line.width < rect.width for line in grid)
    assert all(line.width == pytest.approx(3.0) for line in brackets)
    assert all(line.width > rect.width for line in brackets)


def test_grid_alpha_never_exceeds_overlay_alpha():
    config = GuideConfiguration(overlay_color=OverlayColor(255, 255, 255, 0.25))
    assert config.grid_color().alpha == pytest.approx(0.25)


def test_presentation_factors_are_configurable():
    config = GuideConfiguration(stroke_width=4.0, grid_alpha=0.1, grid_width_factor=0.25, bracket_width_factor=2.0)
    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, config, surface)
    grid = surface.lines()[:4]
    brackets = surface.lines()[4:]
    assert all(line.width == pytest.approx(1.0) and line.color.alpha == pytest.approx(0.1) for line in grid)
    assert all(line.width == pytest.approx(8.0) for line in brackets)


def test_brackets_extend_inward_from_each_corner():
    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, GuideConfiguration(show_grid=False), surface)

    rect = surface.rectangles()[0].rect
    brackets = surface.lines()
    assert len(brackets) == 8
    expected = [
        (Point(rect.left, rect.top), (1, 0), (0, 1)),
        (Point(rect.right, rect.top), (-1, 0), (0, 1)),
        (Point(rect.left, rect.bottom), (1, 0), (0, -1)),
        (Point(rect.right, rect.bottom), (-1, 0), (0, -1)),
    ]
    for index, (corner, horizontal, vertical) in enumerate(expected):
        arm_h, arm_v = brackets[2 * index], brackets[2 * index + 1]
        assert arm_h.start == corner
        assert arm_v.start == corner
        assert _signs(arm_h) == horizontal
        assert _signs(arm_v) == vertical


def test_bracket_arms_are_square():
    bounds = compute_content_bounds(WIDE.width, WIDE.height, PORTRAIT_4_3)
    # 5% of 750 wide vs 5% of 1000 high: the shorter axis wins.
    assert bracket_length_px(bounds, 0.05) == pytest.approx(37.5)

    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, GuideConfiguration(show_grid=False), surface)
    for line in surface.lines():
        length = abs(line.end.x - line.start.x) + abs(line.end.y - line.start.y)
        assert length == pytest.approx(37.5)


@pytest.mark.parametrize(
    ("show_grid", "show_center_rect", "rects", "lines"),
    [
        (True, True, 1, 12),
        (True, False, 0, 4),
        (False, True, 1, 8),
        (False, False, 0, 0),
    ],
)
def test_visibility_flags(show_grid, show_center_rect, rects, lines):
    surface = RecordingDrawSurface()
    config = GuideConfiguration(show_grid=show_grid, show_center_rect=show_center_rect)
    render(WIDE, PORTRAIT_4_3, config, surface)
    assert len(surface.rectangles()) == rects
    assert len(surface.lines()) == lines


@pytest.mark.parametrize("size", [Size(0.0, 500.0), Size(500.0, 0.0), Size(0.0, 0.0)])
def test_unmeasured_surface_skips_frame(size):
    surface = RecordingDrawSurface()
    assert render(size, PORTRAIT_4_3, GuideConfiguration(), surface) is None
    assert surface.commands == []


def test_invalid_aspect_ratio_skips_frame():
    surface = RecordingDrawSurface()
    assert render(WIDE, 0.0, GuideConfiguration(), surface) is None
    assert surface.commands == []


def test_surface_errors_propagate():
    with pytest.raises(RuntimeError):
        render(WIDE, PORTRAIT_4_3, GuideConfiguration(), ExplodingSurface())


def test_render_is_deterministic():
    first = RecordingDrawSurface()
    second = RecordingDrawSurface()
    config = GuideConfiguration()
    render(Size(1080.0, 2400.0), PORTRAIT_4_3, config, first)
    render(Size(1080.0, 2400.0), PORTRAIT_4_3, config, second)
    assert first.commands == second.commands


@pytest.mark.parametrize("size", [Size(1000.0, 3000.0), Size(3000.0, 1000.0), Size(750.0, 1000.0)])
def test_center_rect_sits_on_same_relative_spot(size):
    config = GuideConfiguration(center_rect_normalized=centered_rect(0.5, 0.4))
    surface = RecordingDrawSurface()
    bounds = render(size, PORTRAIT_4_3, config, surface)
    assert bounds is not None
    rect = surface.rectangles()[0].rect
    relative = (
        (rect.left - bounds.offset.x) / bounds.size.width,
        (rect.top - bounds.offset.y) / bounds.size.height,
        (rect.right - bounds.offset.x) / bounds.size.width,
        (rect.bottom - bounds.offset.y) / bounds.size.height,
    )
    assert relative == pytest.approx((0.25, 0.3, 0.75, 0.7))


def test_off_canvas_guides_still_render():
    config = GuideConfiguration(center_rect_normalized=Rect(-0.5, -0.5, 1.5, 1.5), bracket_length_fraction=2.0)
    surface = RecordingDrawSurface()
    bounds = render(WIDE, PORTRAIT_4_3, config, surface)
    assert bounds is not None
    rect = surface.rectangles()[0].rect
    # Pillarboxed: x spills past the content but stays on the surface; y leaves the surface.
    assert rect.left < bounds.offset.x
    assert rect.right > bounds.offset.x + bounds.size.width
    assert rect.top < 0.0
    assert rect.bottom > WIDE.height
    assert len(surface.lines()) == 12


def test_off_canvas_guides_leave_letterboxed_surface():
    config = GuideConfiguration(center_rect_normalized=Rect(-0.5, -0.5, 1.5, 1.5), show_grid=False)
    surface = RecordingDrawSurface()
    tall = Size(1000.0, 3000.0)
    bounds = render(tall, PORTRAIT_4_3, config, surface)
    assert bounds is not None
    rect = surface.rectangles()[0].rect
    assert (rect.left, rect.right) == pytest.approx((-500.0, 1500.0))
    assert rect.top < bounds.offset.y
    assert rect.bottom > bounds.offset.y + bounds.size.height
    assert len(surface.lines()) == 8


def test_debug_outline_is_drawn_first():
    bounds = compute_content_bounds(WIDE.width, WIDE.height, PORTRAIT_4_3)
    commands = build_guide_commands(bounds, GuideConfiguration(), debug=DebugConfig(content_bounds_outline=True))
    assert isinstance(commands[0], StrokeRectCommand)
    assert commands[0].rect == bounds.rect
    assert len(commands) == 14

    plain = build_guide_commands(bounds, GuideConfiguration(), debug=DebugConfig())
    assert len(plain) == 13


def test_trace_receives_bounds():
    events: List[Tuple[str, Mapping[str, Any]]] = []
    render(WIDE, PORTRAIT_4_3, GuideConfiguration(), RecordingDrawSurface(), trace=lambda s, d: events.append((s, d)))
    assert len(events) == 1
    stage, details = events[0]
    assert stage == "render:bounds"
    assert details["offset"] == (625.0, 0.0)
    assert details["size"] == (750.0, 1000.0)
    assert details["command_count"] == 13


def test_serial_renders_on_one_surface_stay_contiguous():
    surface = RecordingDrawSurface()
    render(WIDE, PORTRAIT_4_3, GuideConfiguration(), surface)
    render(Size(1000.0, 3000.0), PORTRAIT_4_3, GuideConfiguration(), surface)
    first, second = surface.commands[:13], surface.commands[13:]
    assert len(second) == 13
    assert isinstance(first[0], StrokeRectCommand) and isinstance(second[0], StrokeRectCommand)
    head = first[0].rect
    assert (head.left, head.top, head.right, head.bottom) == pytest.approx((700.0, 200.0, 1300.0, 800.0))
    assert second[0].rect != first[0].rect
