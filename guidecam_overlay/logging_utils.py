from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_DIR_ENV_VAR = "GUIDECAM_LOG_DIR"
LOG_FILE_NAME = "guidecam-overlay.log"
_MAX_LOG_BYTES = 512 * 1024
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_logs_dir(log_dir_name: str = "GuideCam") -> Path:
    """
    Resolve the directory to store overlay logs.

    Strategy:
    - Use GUIDECAM_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / "guidecam" / "logs")
    candidates.append(cache_home / "guidecam" / "logs")
    candidates.append(Path.cwd() / "logs")

    for base in candidates:
        try:
            target = base / log_dir_name
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def build_log_handler(
    log_dir: Path,
    *,
    retention: int = 5,
    max_bytes: int = _MAX_LOG_BYTES,
) -> RotatingFileHandler:
    """Open ``guidecam-overlay.log`` under ``log_dir``, keeping ``retention`` files in total."""
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=max_bytes,
        backupCount=max(1, retention) - 1,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    return handler


def configure_logging(
    logger: logging.Logger,
    *,
    retention: int = 5,
    debug_enabled: bool = False,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Attach a rotating file handler to ``logger``; returns the log path or None.

    When the file cannot be opened the logger falls back to stderr.
    """
    logger.setLevel(logging.DEBUG if debug_enabled else logging.INFO)
    target_dir = log_dir if log_dir is not None else resolve_logs_dir()
    try:
        handler = build_log_handler(target_dir, retention=retention)
    except OSError as exc:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        logger.addHandler(stream_handler)
        logger.warning("Failed to initialise file logging in %s: %s", target_dir, exc)
        return None
    logger.addHandler(handler)
    log_path = target_dir / LOG_FILE_NAME
    logger.debug("Logging initialised: path=%s retention=%d", log_path, handler.backupCount + 1)
    return log_path
