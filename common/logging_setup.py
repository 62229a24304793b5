from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import IO, Optional


class JsonFormatter(logging.Formatter):
    """One JSON object per line: {"t": ms, "lvl", "name", "msg"[, "extra", "exc_info"]}."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload["extra"] = extra
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: Optional[str] = None, force: bool = False, stream: Optional[IO[str]] = None) -> None:
    """
    Configure the root logger with JSON lines on `stream` (default stdout).
    Level: `level`, else $LOG_LEVEL, else INFO. Unknown names fall back to INFO.

    Idempotent unless `force`; the CLIs force so their flags win over the
    implicit setup done by `get_logger` at import time.
    """
    root = logging.getLogger()
    if getattr(root, "_gastrak_configured", False) and not force:
        return

    lvl = logging.getLevelName((level or os.environ.get("LOG_LEVEL") or "INFO").upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._gastrak_configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensures root is configured."""
    setup_logging()
    return logging.getLogger(name)
