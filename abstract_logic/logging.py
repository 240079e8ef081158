"""abstract-logic — Structured logging configuration.

Uses structlog for structured, levelled logging with consistent key names.
Log entries emitted while an action runs carry:
    - timestamp (ISO-8601)
    - level
    - logger (Python logger name)
    - logic / action (bound via context variables for the running action)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, WrappedLogger

# Context variables — automatically injected into log records when set.
_ctx_logic: ContextVar[str | None] = ContextVar("logic", default=None)
_ctx_action: ContextVar[str | None] = ContextVar("action", default=None)


@contextmanager
def action_log_context(logic: str, action: str) -> Iterator[None]:
    """Bind the running logic/action for the duration of the block.

    Previous values are restored on exit so nested action calls log under
    their own names and hand the outer names back afterwards.
    """
    logic_token = _ctx_logic.set(logic)
    action_token = _ctx_action.set(action)
    try:
        yield
    finally:
        _ctx_action.reset(action_token)
        _ctx_logic.reset(logic_token)


def current_action() -> tuple[str | None, str | None]:
    """Return the (logic, action) pair currently bound, if any."""
    return _ctx_logic.get(), _ctx_action.get()


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


def _inject_context_vars(
    _logger: WrappedLogger, _method: str, event_dict: EventDict
) -> EventDict:
    """Add ContextVar values to every log record."""
    if (logic := _ctx_logic.get()) is not None:
        event_dict.setdefault("logic", logic)
    if (action := _ctx_action.get()) is not None:
        event_dict.setdefault("action", action)
    return event_dict


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure_logging(
    level: str = "info",
    format: str = "console",
    log_file: str | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Call once at application startup, before any log statements.

    Args:
        level:    One of debug, info, warning, error, critical.
        format:   ``"console"`` for human-readable output, ``"json"`` for
                  machine-readable structured logs.
        log_file: Optional path to write logs to in addition to stderr.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _inject_context_vars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = []

    # stderr keeps stdout free for CLI results.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(level.upper())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger for *name*.

    Usage::

        log = get_logger(__name__)
        log.info("logic_loaded", name="Orders", logic_class="OrderLogic")
    """
    return structlog.get_logger(name)
