from __future__ import annotations

import logging
from logging import Formatter, Handler, StreamHandler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .paths import resolve_log_file

_configured = False
_file_handler: Optional[logging.Handler] = None

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


def _resolve_level(level: Union[str, int, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        named = getattr(logging, level.upper(), None)
        if isinstance(named, int):
            return named
        try:
            return int(level)
        except ValueError:
            return logging.INFO
    return logging.INFO


def setup_app_logging(
    level: Union[str, int] = "INFO", log_file: str | Path | None = None
) -> None:
    """Configure global application logging once.

    The stream handler is installed on first call; later calls only adjust
    levels and, when *log_file* is given, attach a rotating file handler.
    """
    global _configured, _file_handler
    resolved = _resolve_level(level)
    root = logging.getLogger()
    if not _configured:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        stream_handler = StreamHandler()
        stream_handler.setFormatter(Formatter(LOG_FORMAT))
        root.addHandler(stream_handler)
        _configured = True
    path = resolve_log_file(log_file)
    if path is not None and _file_handler is None:
        _file_handler = _build_rotating_handler(path)
        root.addHandler(_file_handler)
    root.setLevel(resolved)
    for handler in root.handlers:
        handler.setLevel(resolved)


def detach_file_handler() -> None:
    """Remove and close the rotating file handler, if one is attached."""
    global _file_handler
    if _file_handler is None:
        return
    logging.getLogger().removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def _build_rotating_handler(path: Path) -> Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        mode="a",
        encoding="utf-8",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setFormatter(Formatter(LOG_FORMAT))
    return handler
