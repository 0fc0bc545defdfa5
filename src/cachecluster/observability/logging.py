"""structlog setup shared by the library and the CLI."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bind_contextvars, merge_contextvars, unbind_contextvars

if TYPE_CHECKING:
    from cachecluster_core.config.settings import Settings

# Client libraries that log every command at DEBUG
_CHATTY_LOGGERS = ("redis", "sqlalchemy.engine", "aiosqlite")

_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _render_time_values(
    _logger: Any,  # noqa: ANN401
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Render datetimes as ISO strings and timedeltas as seconds."""
    for key, value in event_dict.items():
        if isinstance(value, datetime):
            event_dict[key] = value.isoformat()
        elif isinstance(value, timedelta):
            event_dict[key] = value.total_seconds()
    return event_dict


def _pre_chain() -> list[structlog.types.Processor]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _render_time_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(settings: Settings) -> None:
    """Route structlog and stdlib logging through one root handler.

    ``settings.log_format`` picks the JSON or console renderer and
    ``settings.log_level`` the root level. Client library loggers never go
    below WARNING.
    """
    pre_chain = _pre_chain()
    renderer: structlog.types.Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )

    level = _resolve_level(settings.log_level)
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_cluster_context(cluster_id: str, **extra: str) -> None:
    """Attach cluster_id (and any extra fields) to subsequent log entries."""
    bind_contextvars(cluster_id=cluster_id, **extra)


def clear_cluster_context(*extra: str) -> None:
    """Detach cluster_id and the named extra fields."""
    unbind_contextvars("cluster_id", *extra)


def _resolve_level(level_name: str) -> int:
    """Map a level name to its logging constant; unknown names mean INFO."""
    return _LEVELS.get(level_name.upper(), logging.INFO)
