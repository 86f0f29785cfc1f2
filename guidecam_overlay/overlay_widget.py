"""Transparent Qt widget that paints the framing guides over a preview."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QWidget

from guidecam_overlay.debug_config import DebugConfig
from guidecam_overlay.framing_math import PORTRAIT_4_3, CameraBounds, Size
from guidecam_overlay.guide_config import GuideConfiguration
from guidecam_overlay.overlay_renderer import TraceFn, render
from guidecam_overlay.qt_surface import QtDrawSurface


class FramingOverlayWidget(QWidget):
    """Repaints the guides whenever its size or configuration changes.

    Qt already schedules a paint after every resize; configuration changes go
    through the setters below, which request one explicitly.
    """

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        config: Optional[GuideConfiguration] = None,
        content_aspect_ratio: float = PORTRAIT_4_3,
        debug: Optional[DebugConfig] = None,
        trace: Optional[TraceFn] = None,
    ) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self._config = config or GuideConfiguration()
        self._content_aspect_ratio = float(content_aspect_ratio)
        self._debug = debug
        self._trace = trace
        self._last_bounds: Optional[CameraBounds] = None

    @property
    def configuration(self) -> GuideConfiguration:
        return self._config

    @property
    def content_aspect_ratio(self) -> float:
        return self._content_aspect_ratio

    @property
    def last_bounds(self) -> Optional[CameraBounds]:
        return self._last_bounds

    def set_configuration(self, config: GuideConfiguration) -> None:
        if config == self._config:
            return
        self._config = config
        self.update()

    def set_content_aspect_ratio(self, ratio: float) -> None:
        ratio = float(ratio)
        if ratio == self._content_aspect_ratio:
            return
        self._content_aspect_ratio = ratio
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        try:
            self._last_bounds = render(
                Size(float(self.width()), float(self.height())),
                self._content_aspect_ratio,
                self._config,
                QtDrawSurface(painter),
                debug=self._debug,
                trace=self._trace,
            )
        finally:
            painter.end()
