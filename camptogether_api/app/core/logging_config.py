"""
Logging configuration for the application.

Cloud Run forwards stdout to Cloud Logging, which understands one JSON
object per line.  ``JsonFormatter`` renders each record as
``{"severity", "message", "timestamp", "logger", ...}`` and merges any
context passed through ``extra=`` (operation, user and resource ids) into
the same object.  Set ``LOG_FORMAT=text`` for a human readable console
format during local development.  Logging is set up exactly once.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON for Cloud Logging."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, fmt: str = "json") -> None:
    """Configure root logger.

    If no handlers are attached to the root logger, attach a console
    handler and optionally a file handler.  The root logger's level is set
    based on the provided ``level``.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file handler is
        added.
    fmt : str
        ``"json"`` for structured lines, ``"text"`` for the plain format.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (tests, repeated create_app calls, uvicorn).
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    if fmt.lower() == "text":
        formatter: logging.Formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = JsonFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # google-cloud libraries are chatty at DEBUG
    logging.getLogger("google").setLevel(max(numeric_level, logging.INFO))
