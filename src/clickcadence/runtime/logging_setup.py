from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Any

from ..config import LoggingSettings

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; ``extra={"event": {...}}`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if isinstance(event, dict):
            payload.update(event)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def _handlers(cfg: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if cfg.file_enabled:
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(cfg.log_path, maxBytes=cfg.max_bytes, backupCount=cfg.backup_count, encoding="utf-8")
        )
    return handlers


def setup_logging(cfg: LoggingSettings, logger_name: str = "clickcadence") -> logging.Logger:
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.getLevelNamesMapping().get(cfg.level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    formatter = JsonLineFormatter() if cfg.jsonl else logging.Formatter(PLAIN_FORMAT)
    for handler in _handlers(cfg):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
