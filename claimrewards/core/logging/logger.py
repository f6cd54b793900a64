"""
Claim Player Rewards Logging Subsystem

Purpose
-------
Provide the single logging setup for the process:

- Structured JSON logs for aggregation and analysis.
- LogContext-based propagation of command context via ContextVars.
- Correlation IDs for tracing one claim through store, ledger and reply.
- Queue-based delivery (QueueHandler + QueueListener) so file I/O never
  runs on the Discord event loop.
- Hybrid output:
  - Console handler (JSON in production, colored human text in dev).
  - Daily rotating JSON file handler as a local backup.

Responsibilities
----------------
- Initialize and tear down the global logging stack.
- Enrich log records with player_id, guild_id, command, correlation_id,
  request_id, component and operation.
- Provide helper APIs: get_logger(), LogContext, get_log_context().

Notes
-----
setup_logging() is called by the entry point rather than at import time, so
importing library modules (and running the test suite) does not start the
listener thread or create log files.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import (
    QueueHandler,
    QueueListener,
    TimedRotatingFileHandler,
)
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from claimrewards.core.config.config import Config


_request_context: ContextVar[Dict[str, Any]] = ContextVar(
    "request_context",
    default={},
)

CONTEXT_FIELDS: Tuple[str, ...] = (
    "player_id",
    "guild_id",
    "command",
    "correlation_id",
    "request_id",
    "component",
    "operation",
)

QUIET_LOGGERS: Tuple[str, ...] = ("discord", "asyncio")


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Logging settings, read from Config at setup time."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "claimrewards_daily.json.log"
    DAILY_BACKUP_COUNT: int = 1

    QUEUE_MAX_SIZE: int = 10_000

    @property
    def is_production(self) -> bool:
        return str(Config.ENVIRONMENT).lower() == "production"

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()

    @property
    def log_level(self) -> int:
        level_name = Config.LOG_LEVEL if isinstance(Config.LOG_LEVEL, str) else "INFO"
        return getattr(logging, level_name.upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return self.is_production
        return bool(Config.LOG_JSON)

    @property
    def use_colors(self) -> bool:
        return not self.use_json and bool(Config.LOG_COLORS) and sys.stdout.isatty()


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the current LogContext onto each record; unset fields become N/A."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _request_context.get({})

        for name in ("player_id", "guild_id", "command", "operation"):
            setattr(record, name, context.get(name, "N/A"))

        correlation_id = context.get("correlation_id") or context.get("request_id") or "N/A"
        record.correlation_id = correlation_id
        record.request_id = context.get("request_id", correlation_id)
        record.component = context.get("component") or record.name.split(".", 1)[0]
        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        prefix = self.COLORS.get(original)
        if prefix:
            record.levelname = f"{prefix}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """One JSON object per line: core fields, context fields, then `extra`."""

    RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value not in (None, "N/A"):
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in self.RESERVED and key not in CONTEXT_FIELDS and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ClaimsQueueHandler(QueueHandler):
    """Drops records instead of blocking the event loop when the queue is full."""

    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            sys.stderr.write("Logging queue full; dropping log record.\n")


# ============================================================================
# Global Setup
# ============================================================================

_queue_listener: Optional[QueueListener] = None


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOGGER_CONFIG.log_level)

    if LOGGER_CONFIG.use_json:
        formatter: logging.Formatter = JSONFormatter()
    elif LOGGER_CONFIG.use_colors:
        formatter = ColoredFormatter(LOGGER_CONFIG.CONSOLE_FORMAT, LOGGER_CONFIG.DATE_FORMAT)
    else:
        formatter = logging.Formatter(LOGGER_CONFIG.CONSOLE_FORMAT, LOGGER_CONFIG.DATE_FORMAT)
    handler.setFormatter(formatter)
    return handler


def _build_daily_file_handler() -> logging.Handler:
    LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)

    handler = TimedRotatingFileHandler(
        filename=str(LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME),
        when="midnight",
        backupCount=LOGGER_CONFIG.DAILY_BACKUP_COUNT,
        encoding="utf-8",
        utc=True,
    )
    handler.setLevel(LOGGER_CONFIG.log_level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """Install the queue pipeline on the root logger. Safe to call twice."""
    global _queue_listener

    if _queue_listener is not None:
        return

    root = logging.getLogger()
    root.setLevel(LOGGER_CONFIG.log_level)
    root.handlers.clear()

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(LOGGER_CONFIG.QUEUE_MAX_SIZE)
    _queue_listener = QueueListener(
        log_queue,
        _build_console_handler(),
        _build_daily_file_handler(),
        respect_handler_level=True,
    )
    _queue_listener.start()

    # Context is captured on the producing thread, before the record is queued
    queue_handler = ClaimsQueueHandler(log_queue)
    queue_handler.setLevel(LOGGER_CONFIG.log_level)
    queue_handler.addFilter(ContextFilter())
    root.addHandler(queue_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "logs_dir": str(LOGGER_CONFIG.logs_dir),
        },
    )


def shutdown_logging() -> None:
    """Drain the queue and close every handler."""
    global _queue_listener

    if _queue_listener is None:
        return

    logging.getLogger(__name__).info("Shutting down logging subsystem.")

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, ClaimsQueueHandler):
            root.removeHandler(handler)
            handler.close()

    listener, _queue_listener = _queue_listener, None
    listener.stop()
    for handler in listener.handlers:
        handler.flush()
        handler.close()


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Bind command context to every log record emitted inside the block.

    Blocks nest: fields left unset are inherited from the enclosing context,
    so a service call inside a command keeps the command's guild_id and
    correlation_id. A correlation id is generated only at the outermost
    block that does not supply one.

    Usage:
        with LogContext(player_id=ctx.author.id, command="claim"):
            outcome = handle_claim(...)
    """

    def __init__(
        self,
        player_id: Optional[Any] = None,
        guild_id: Optional[int] = None,
        command: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        request_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        fields: Dict[str, Any] = {
            "player_id": str(player_id) if player_id is not None else None,
            "guild_id": str(guild_id) if guild_id is not None else None,
            "command": command,
            "component": component,
            "operation": operation,
            "correlation_id": correlation_id,
            "request_id": request_id,
            **extra,
        }
        self._fields = {key: value for key, value in fields.items() if value is not None}
        self.context: Dict[str, Any] = {}
        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def _build(self) -> Dict[str, Any]:
        context = {**_request_context.get({}), **self._fields}

        if not context.get("correlation_id"):
            context["correlation_id"] = (
                context.get("request_id") or self._generate_correlation_id()
            )
        if "correlation_id" in self._fields and "request_id" not in self._fields:
            context["request_id"] = context["correlation_id"]
        context.setdefault("request_id", context["correlation_id"])
        return context

    def __enter__(self) -> "LogContext":
        self.context = self._build()
        self._token = _request_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def get_log_context() -> Dict[str, Any]:
    return dict(_request_context.get({}))
