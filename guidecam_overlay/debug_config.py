"""Debug configuration loader for overlay tracing."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

DEV_MODE_ENV_VAR = "GUIDECAM_DEV_MODE"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20


def is_dev_mode() -> bool:
    value = os.getenv(DEV_MODE_ENV_VAR)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DebugConfig:
    trace_enabled: bool = False
    content_bounds_outline: bool = False
    overlay_logs_to_keep: Optional[int] = None


def _coerce_log_retention(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return None
    if numeric <= 0:
        return LOG_RETENTION_MIN
    if numeric > LOG_RETENTION_MAX:
        return LOG_RETENTION_MAX
    return numeric


def load_debug_config(path: Path, *, enabled: Optional[bool] = None) -> DebugConfig:
    """Read debug.json; ignored entirely outside dev mode."""

    if enabled is None:
        enabled = is_dev_mode()
    if not enabled:
        return DebugConfig()
    try:
        raw_text = path.read_text(encoding="utf-8")
        data = json.loads(raw_text)
    except (FileNotFoundError, OSError, json.JSONDecodeError):
        data = {}
    if not isinstance(data, dict):
        data = {}

    tracing_section = data.get("tracing")
    if isinstance(tracing_section, dict):
        trace_enabled = bool(tracing_section.get("enabled", False))
    else:
        trace_enabled = bool(data.get("trace_enabled", False))

    return DebugConfig(
        trace_enabled=trace_enabled,
        content_bounds_outline=bool(data.get("content_bounds_outline", False)),
        overlay_logs_to_keep=_coerce_log_retention(data.get("overlay_logs_to_keep")),
    )
