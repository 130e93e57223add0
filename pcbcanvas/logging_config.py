"""
Centralized logging configuration for pcbcanvas.

This module configures:
- Rotating file logging for render runs
- Optional stderr logging for command line use
- Routing of Qt's own warnings (QPainter, QImage) into the log
- Unhandled exception logging
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QtMsgType, qInstallMessageHandler


LOG_FILE_NAME = "pcbcanvas.log"

# Render runs are short; 5 files * 5 MB each is plenty of history.
LOG_MAX_BYTES = 5_000_000
LOG_BACKUP_COUNT = 4

DEFAULT_LOG_DIR = Path.home() / ".pcbcanvas" / "logs"
FALLBACK_LOG_DIR = Path("/tmp") / "pcbcanvas" / "logs"

FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d | %(levelname)-8s | "
    "%(process)d | %(name)s:%(lineno)d | %(message)s"
)
STDERR_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

_initialized = False
_log_file_path: Optional[Path] = None
_installed_handlers: list[logging.Handler] = []
_original_excepthook = sys.excepthook


def _resolve_level(level: str | int | None) -> int:
    """Resolve a user-provided log level to a logging constant."""
    if isinstance(level, int):
        return level

    level_name = str(level or "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _log_unhandled_exception(exc_type, exc_value, exc_traceback) -> None:
    """Log uncaught exceptions before handing them to the default hook."""
    if issubclass(exc_type, KeyboardInterrupt):
        _original_excepthook(exc_type, exc_value, exc_traceback)
        return

    logging.getLogger("pcbcanvas.crash").critical(
        "Unhandled exception",
        exc_info=(exc_type, exc_value, exc_traceback),
    )
    _original_excepthook(exc_type, exc_value, exc_traceback)


def _qt_message_handler(msg_type, context, message) -> None:
    """Forward Qt diagnostics to the 'pcbcanvas.qt' logger."""
    logging.getLogger("pcbcanvas.qt").log(
        _QT_LEVELS.get(msg_type, logging.WARNING),
        "%s",
        message,
    )


def _resolve_log_dir(log_dir: str | Path | None) -> Path:
    preferred_dir = Path(
        os.environ.get("PCBCANVAS_LOG_DIR", str(log_dir or DEFAULT_LOG_DIR))
    ).expanduser()
    try:
        preferred_dir.mkdir(parents=True, exist_ok=True)
        return preferred_dir
    except OSError as exc:
        fallback_dir = Path(
            os.environ.get("PCBCANVAS_FALLBACK_LOG_DIR", str(FALLBACK_LOG_DIR))
        ).expanduser()
        fallback_dir.mkdir(parents=True, exist_ok=True)
        print(
            f"pcbcanvas logging directory '{preferred_dir}' unavailable ({exc}); "
            f"falling back to '{fallback_dir}'.",
            file=sys.stderr,
        )
        return fallback_dir


def setup_logging(
    log_level: str | int | None = None,
    log_dir: str | Path | None = None,
    enable_stderr: bool | None = None,
) -> Path:
    """
    Configure process-wide logging.

    The rotating file handler stores logs in:
    - ``$PCBCANVAS_LOG_DIR`` if set, otherwise
    - ``log_dir`` if given, otherwise
    - ``~/.pcbcanvas/logs``

    ``$PCBCANVAS_LOG_LEVEL`` overrides ``log_level`` for the stderr
    handler; the file always receives DEBUG records. Calling this more
    than once returns the existing log file path and changes nothing.
    """
    global _initialized
    global _log_file_path

    if _initialized and _log_file_path is not None:
        return _log_file_path

    level = _resolve_level(os.environ.get("PCBCANVAS_LOG_LEVEL", log_level))
    _log_file_path = _resolve_log_dir(log_dir) / LOG_FILE_NAME

    if enable_stderr is None:
        enable_stderr = os.environ.get("PCBCANVAS_LOG_TO_STDERR", "1") != "0"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    file_handler = RotatingFileHandler(
        _log_file_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(file_handler)
    _installed_handlers.append(file_handler)

    if enable_stderr:
        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(level)
        stderr_handler.setFormatter(logging.Formatter(fmt=STDERR_FORMAT))
        root_logger.addHandler(stderr_handler)
        _installed_handlers.append(stderr_handler)

    logging.captureWarnings(True)
    sys.excepthook = _log_unhandled_exception
    qInstallMessageHandler(_qt_message_handler)

    _initialized = True

    logging.getLogger(__name__).info(
        "Logging initialized at '%s' (level=%s, rotation=%d bytes, backups=%d)",
        _log_file_path,
        logging.getLevelName(level),
        LOG_MAX_BYTES,
        LOG_BACKUP_COUNT,
    )

    return _log_file_path


def get_log_file_path() -> Optional[Path]:
    """Return current log file path, if logging was initialized."""
    return _log_file_path


def reset_logging() -> None:
    """Undo setup_logging: close its handlers and restore default hooks."""
    global _initialized
    global _log_file_path

    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    logging.captureWarnings(False)
    sys.excepthook = _original_excepthook
    qInstallMessageHandler(None)

    _initialized = False
    _log_file_path = None
