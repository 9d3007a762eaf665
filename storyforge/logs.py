"""Logging helpers for StoryForge."""

from __future__ import annotations

import json
import logging
import sys

_LOGGING_INITIALIZED = False

_RESERVED = {
    "args",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            try:
                json.dumps(value)
                data[key] = value
            except (TypeError, ValueError):
                data[key] = str(value)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def init_logging(level: str = "INFO", format: str = "plain", force: bool = False) -> None:
    """Configure the root logger once; later calls are no-ops unless ``force`` is set."""
    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED and not force:
        return

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(log_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    root.addHandler(handler)

    for noisy in ("uvicorn.access", "httpx", "filelock"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    get_logger("storyforge.start").info("logging initialized | level=%s format=%s", level.upper(), format)
    _LOGGING_INITIALIZED = True


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "storyforge")
