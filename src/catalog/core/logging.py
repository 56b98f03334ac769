"""Logging configuration using structlog.

Service code logs through get_logger(); driver and client libraries go through
the standard library and are rendered by the same processor chain.
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Libraries that log every round trip at DEBUG/INFO
NOISY_LOGGERS: dict[str, int] = {
    "pymongo": logging.WARNING,
    "motor": logging.WARNING,
    "redis": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def resolve_level(debug: bool, level: str | None = None) -> int:
    """Explicit level name wins; otherwise DEBUG in debug mode and INFO elsewhere."""
    if level:
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
        raise ValueError(f"Unknown log level: {level}")
    return logging.DEBUG if debug else logging.INFO


def setup_logging(
    debug: bool = False, level: str | None = None, json_logs: bool | None = None
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        debug: Default to DEBUG level and colored console output.
        level: Level name overriding the debug default, e.g. "WARNING".
        json_logs: Force JSON (True) or console (False) rendering. None follows debug.
    """
    log_level = resolve_level(debug, level)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    render_json = (not debug) if json_logs is None else json_logs
    if render_json:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(noisy_level, log_level))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind the correlation id to subsequent log calls in this request."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_actor_context(actor_id: int | None) -> None:
    """Bind the acting user's sequence id to subsequent log calls."""
    if actor_id is not None:
        bind_contextvars(actor_id=actor_id)


def clear_request_context() -> None:
    clear_contextvars()
