"""Root logger setup for the CLI.

Records go to a stream handler and to ``settings.logs_dir / LOG_FILE_NAME``.
Structured output writes one JSON object per line; fields passed through
``extra=`` (the engine logs ``cities``, ``pop_size`` and friends this way)
become top-level keys.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO, Any, Mapping

from .constants import LOG_FILE_NAME
from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "configure_logging"]

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Serialise records as JSON, merging a fixed run context."""

    def __init__(self, *, default_context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self.default_context = dict(default_context or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.default_context,
        }
        for key, value in vars(record).items():
            if key not in _RECORD_FIELDS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _open_log_file(settings: Settings) -> logging.Handler | None:
    target = settings.logs_dir / LOG_FILE_NAME
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(target, encoding="utf-8")
    except OSError:
        return None


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
) -> None:
    """Replace the root handlers with a stream handler and the run log file.

    ``structured=None`` defers to ``settings.structured_logging``. ``context``
    is only attached to JSON records.
    """

    settings = settings or get_settings()
    if structured is None:
        structured = settings.structured_logging
    formatter = (
        JSONFormatter(default_context=context)
        if structured
        else logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)

    file_handler = _open_log_file(settings)
    handlers = [logging.StreamHandler(stream)]
    if file_handler is not None:
        handlers.append(file_handler)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if file_handler is None:
        root.warning("Could not open %s; logging to the stream only", settings.logs_dir / LOG_FILE_NAME)
