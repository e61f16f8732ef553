"""Structured logging for the advisor service.

Events are rendered as JSON lines in production and as colored console
output in development. The request id set by the HTTP middleware is bound
through ``structlog.contextvars`` so every event emitted while answering a
request carries it.
"""

import logging
import sys
from typing import Any
from uuid import uuid4

import structlog
from structlog.types import Processor

CORRELATION_KEY = "correlation_id"

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a request id to the current context, generating one when omitted."""
    correlation_id = correlation_id or str(uuid4())
    structlog.contextvars.bind_contextvars(**{CORRELATION_KEY: correlation_id})
    return correlation_id


def get_correlation_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(CORRELATION_KEY)


def clear_correlation_id() -> None:
    structlog.contextvars.unbind_contextvars(CORRELATION_KEY)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON lines when True, console rendering otherwise
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.rich_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module-level structured logger."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


class LoggerAdapter:
    """Logger that stamps a fixed identity on every event.

    Each agent and provider owns one, so events can be filtered by
    ``agent_id`` or ``provider`` without repeating them at call sites.
    """

    def __init__(self, name: str | None = None, **identity: Any):
        self._logger = get_logger(name)
        self._identity = identity

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._identity)

    def bind(self, **extra: Any) -> "LoggerAdapter":
        """Return a new adapter whose identity also includes ``extra``."""
        adapter = LoggerAdapter.__new__(LoggerAdapter)
        adapter._logger = self._logger
        adapter._identity = {**self._identity, **extra}
        return adapter

    def _emit(self, method: str, event: str, fields: dict[str, Any]) -> None:
        getattr(self._logger, method)(event, **{**self._identity, **fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def exception(self, event: str, **fields: Any) -> None:
        """Log at error level with the active exception attached."""
        self._emit("exception", event, fields)


def get_agent_logger(agent_id: str, agent_name: str | None = None) -> LoggerAdapter:
    identity: dict[str, Any] = {"agent_id": agent_id}
    if agent_name:
        identity["agent_name"] = agent_name
    return LoggerAdapter("agent", **identity)


def get_provider_logger(provider: str) -> LoggerAdapter:
    return LoggerAdapter("llm", provider=provider)


def get_api_logger() -> LoggerAdapter:
    return LoggerAdapter("api")
