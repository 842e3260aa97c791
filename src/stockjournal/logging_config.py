from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping, Optional

from stockjournal.repositories import http_gateway
from stockjournal.services import submission_service

MAX_BYTES = 2_000_000
BACKUP_COUNT = 5

# logger name -> dedicated file, on top of app.log/errors.log
CHANNEL_FILES: dict[str, str] = {
    submission_service.LOGGER_NAME: "submissions.log",
    http_gateway.LOGGER_NAME: "gateway.log",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Debounced product searches run on timer threads, so every record names
    its thread.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _rotating(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(level)
    return handler


def setup_logging(
    logs_dir: Path,
    level: int = logging.INFO,
    channels: Optional[Mapping[str, str]] = None,
) -> None:
    """Attach rotating JSON files once; later calls only adjust the root level."""
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    for filename, threshold in (("app.log", logging.INFO), ("errors.log", logging.ERROR)):
        root.addHandler(_rotating(logs_dir / filename, threshold))

    for name, filename in (CHANNEL_FILES if channels is None else channels).items():
        logger = logging.getLogger(name)
        logger.addHandler(_rotating(logs_dir / filename, logging.INFO))
        logger.setLevel(min(level, logging.INFO))
