"""
Logging setup for the Aurora Decision Engine.

``configure_logging(config)`` is called once by the CLI (or by whatever
service embeds the engine) before any engine work. Library modules only ever
do ``logger = logging.getLogger(__name__)``; they never install handlers.

Console output goes to stderr so ``aurora-engine decide --json`` keeps stdout
clean for the decision document.

With ``json_format = true`` each record becomes one JSON line. Structured
fields passed via ``extra=`` (the pipeline attaches ``state``, ``best_ads``,
``limiting_factor`` and ``window_count``) appear as top-level keys::

    {"time": "2025-01-10T18:00:02Z", "level": "INFO",
     "logger": "aurora_engine.engine.pipeline", "message": "Decision: ...",
     "state": "excellent", "best_ads": 82, ...}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aurora_engine.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JsonLinesFormatter(logging.Formatter):
    """Render a record as a single JSON object.

    Keys: ``time``, ``level``, ``logger``, ``message``, plus ``exception``
    when a traceback is attached and any ``extra=`` fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict = {
            "time":    stamp.strftime(TIME_FORMAT),
            "level":   record.levelname,
            "logger":  record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optionally file) handlers on the root logger.

    Replaces any handlers already installed, so calling it again with a
    different config takes effect.
    """
    level = logging.getLevelName(config.level)

    if config.json_format:
        formatter: logging.Formatter = JsonLinesFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=TIME_FORMAT)
        formatter.converter = time.gmtime

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

