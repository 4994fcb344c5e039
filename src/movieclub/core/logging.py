"""Structured logging.

Every record goes through structlog and comes out of the stdlib root logger,
so uvicorn, SQLAlchemy and httpx output share one stream. Request-scoped
fields (request id, authenticated user) live in contextvars and are merged
into each event.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, Processor, WrappedLogger

from src.movieclub.core.config import Settings, get_settings

NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")


def _service_fields(app_name: str, app_env: str) -> Processor:
    def add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("env", app_env)
        return event_dict

    return add_service


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger from settings.

    Debug mode renders colored console lines at DEBUG level; otherwise one
    JSON object per line at settings.log_level.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else logging.getLevelNamesMapping().get(
        settings.log_level.upper(), logging.INFO
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # ConsoleRenderer formats tracebacks itself
    renderers: list[Processor] = (
        [structlog.dev.ConsoleRenderer(colors=True)]
        if settings.debug
        else [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_fields(settings.app_name, settings.app_env),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *renderers,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Attach the correlation id to every log line of the current request."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: UUID, username: str | None = None, role: str | None = None) -> None:
    """Attach the authenticated user to the current request's log lines.

    The username is personal data and is only logged when
    LOG_USER_IDENTIFIERS is enabled.
    """
    fields: dict[str, str] = {"user_id": str(user_id)}
    if role:
        fields["user_role"] = role
    if username and get_settings().log_user_identifiers:
        fields["username"] = username
    bind_contextvars(**fields)


def clear_request_context() -> None:
    clear_contextvars()
