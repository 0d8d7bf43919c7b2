"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the
root handler and format once per process.
"""

from __future__ import annotations

import json
import logging
from logging.config import dictConfig

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for hosted log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "stack": self.formatException(record.exc_info),
            }
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO", fmt: str = "plain") -> None:
    level = (level or "INFO").upper()
    if level not in logging.getLevelNamesMapping():
        level = "INFO"

    formatter: dict[str, object]
    if fmt == "json":
        formatter = {"()": JsonFormatter}
    else:
        formatter = {"format": _PLAIN_FORMAT}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                # uvicorn installs its own handlers; let them propagate instead.
                "uvicorn": {"level": level, "handlers": [], "propagate": True},
                "uvicorn.access": {"level": level, "handlers": [], "propagate": True},
            },
        }
    )
