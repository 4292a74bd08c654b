"""Logging configuration.

Managed platforms (``K_SERVICE`` or ``CLOUD_RUN_JOB`` set) get one JSON object
per line so severities map correctly; local runs get plain text.
"""

from __future__ import annotations

import json
import logging
import os

from geoevents.config import get_settings


class JsonLogFormatter(logging.Formatter):
    """Render records as JSON with a ``severity`` field."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger from ``LOG_LEVEL`` (or ``level``)."""

    log_level = (level or get_settings().log_level or "INFO").upper()
    is_managed = bool(os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = logging.StreamHandler()
    if is_managed:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)


__all__ = ["JsonLogFormatter", "setup_logging"]
