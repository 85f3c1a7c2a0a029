"""Logging setup for wrapgrid hosts: console text or JSON, optional JSONL file."""

from __future__ import annotations

import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import orjson

from wrapgrid.api.logging import LoggingConfig
from wrapgrid.runtime.config import GalleryConfig, resolve_log_level_name

_QUEUE_LISTENER: QueueListener | None = None

_STANDARD_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON-lines formatter that keeps `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_FIELDS
        }
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(config: LoggingConfig) -> None:
    """Install wrapgrid's root handlers, replacing whatever was there.

    With a `file_path`, records go through a `QueueHandler` so the tick thread
    never blocks on file IO; the listener fans out to console and file.
    """
    global _QUEUE_LISTENER

    shutdown_logging()
    handlers = _build_handlers(config)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, config.level_name.upper(), logging.INFO))

    if len(handlers) == 1:
        root.addHandler(handlers[0])
        return

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    queue_handler = QueueHandler(log_queue)
    queue_handler.set_name("wrapgrid.queue")
    root.addHandler(queue_handler)
    _QUEUE_LISTENER = QueueListener(log_queue, *handlers, respect_handler_level=True)
    _QUEUE_LISTENER.start()


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.set_name("wrapgrid.console")
    console.setFormatter(_resolve_formatter(config.console_format))
    if not config.file_path:
        return [console]
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    jsonl = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    jsonl.set_name("wrapgrid.file")
    jsonl.setFormatter(_resolve_formatter(config.file_format))
    return [console, jsonl]


def setup_logging(config: GalleryConfig | None = None) -> None:
    """Configure minimal logging if no handlers are present.

    The level comes from `config.log_level` when a config is given, otherwise
    from `WRAPGRID_LOG_LEVEL`/`LOG_LEVEL`.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    configure_logging(
        LoggingConfig(
            level_name=config.log_level if config is not None else resolve_log_level_name(),
            console_format="text",
            file_path=None,
            file_format="json",
        )
    )


def shutdown_logging() -> None:
    """Stop the background file listener if one is running."""
    global _QUEUE_LISTENER
    if _QUEUE_LISTENER is None:
        return
    _QUEUE_LISTENER.stop()
    _QUEUE_LISTENER = None


def _resolve_formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
