"""Preview harness: shows a still frame letterboxed like a camera preview with the guides on top."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QPainter, QPixmap
from PyQt6.QtWidgets import QApplication, QWidget

from guidecam_overlay.debug_config import DEV_MODE_ENV_VAR, DebugConfig, is_dev_mode, load_debug_config
from guidecam_overlay.framing_math import (
    PORTRAIT_4_3,
    InvalidDimension,
    aspect_ratio,
    compute_content_bounds,
    parse_aspect_ratio,
)
from guidecam_overlay.guide_config import GuideConfiguration, load_guide_settings
from guidecam_overlay.logging_utils import configure_logging
from guidecam_overlay.overlay_widget import FramingOverlayWidget

_ROOT_LOGGER = logging.getLogger("GuideCam")
_LOGGER = logging.getLogger("GuideCam.Launcher")

DEFAULT_WINDOW_WIDTH = 540
DEFAULT_WINDOW_HEIGHT = 960


class PreviewWindow(QWidget):
    """Black surface with the frame fitted inside it and the overlay stacked above."""

    def __init__(
        self,
        pixmap: Optional[QPixmap],
        config: GuideConfiguration,
        content_aspect_ratio: float,
        debug: DebugConfig,
    ) -> None:
        super().__init__()
        self.setWindowTitle("GuideCam preview")
        self._pixmap = pixmap
        self._content_aspect_ratio = content_aspect_ratio
        trace = _trace_to_log if debug.trace_enabled else None
        self.overlay = FramingOverlayWidget(
            self,
            config=config,
            content_aspect_ratio=content_aspect_ratio,
            debug=debug,
            trace=trace,
        )

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        self.overlay.setGeometry(self.rect())
        super().resizeEvent(event)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), Qt.GlobalColor.black)
            if self._pixmap is None:
                return
            try:
                bounds = compute_content_bounds(self.width(), self.height(), self._content_aspect_ratio)
            except InvalidDimension:
                return
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            target = QRectF(bounds.offset.x, bounds.offset.y, bounds.size.width, bounds.size.height)
            painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))
        finally:
            painter.end()


def _trace_to_log(stage: str, details: Mapping[str, Any]) -> None:
    _LOGGER.debug("trace %s: %s", stage, dict(details))


def _aspect_argument(value: str) -> float:
    try:
        return parse_aspect_ratio(value)
    except InvalidDimension as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GuideCam framing overlay preview")
    parser.add_argument("--settings", type=Path, default=Path("guide_settings.json"), help="Guide settings JSON")
    parser.add_argument("--debug-config", type=Path, default=Path("debug.json"), help="Dev-mode debug JSON")
    parser.add_argument("--aspect", type=_aspect_argument, help="Content aspect ratio as W:H or a decimal")
    parser.add_argument("--image", type=Path, help="Still frame shown in place of the camera feed")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    debug_config = load_debug_config(args.debug_config.expanduser())
    _ROOT_LOGGER.propagate = False
    configure_logging(
        _ROOT_LOGGER,
        retention=debug_config.overlay_logs_to_keep or 5,
        debug_enabled=is_dev_mode(),
    )
    if not is_dev_mode():
        _LOGGER.debug("debug.json ignored (release mode). Export %s=1 to enable it.", DEV_MODE_ENV_VAR)
    config = load_guide_settings(args.settings.expanduser())
    _LOGGER.info("Starting preview (pid=%s)", os.getpid())
    _LOGGER.debug("Loaded guide settings from %s: %s", args.settings, config.to_payload())

    app = QApplication(sys.argv[:1])
    pixmap: Optional[QPixmap] = None
    if args.image is not None:
        candidate = QPixmap(str(args.image.expanduser()))
        if candidate.isNull():
            _LOGGER.warning("Could not load preview image %s; showing a blank frame", args.image)
        else:
            pixmap = candidate

    if args.aspect is not None:
        ratio = args.aspect
    elif pixmap is not None:
        ratio = aspect_ratio(pixmap.width(), pixmap.height())
    else:
        ratio = PORTRAIT_4_3
    _LOGGER.info("Content aspect ratio %.4f", ratio)

    window = PreviewWindow(pixmap, config, ratio, debug_config)
    window.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
    window.show()

    exit_code = app.exec()
    _LOGGER.info("Preview exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
