"""
Structured logging for the intake bot, built on structlog.

Console output in development, JSON lines everywhere else. Chat text that
ends up in log fields is clipped so transcripts never land in the logs whole.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from intake_bot.core.config import settings

# Event fields that may carry user or oracle text
CLIPPED_FIELDS = ("text", "changes", "reply", "answer")
MAX_LOGGED_TEXT = 200


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp every entry with the app, its environment and the bot persona."""
    event_dict["app"] = settings.app_name
    event_dict["env"] = settings.app_env
    event_dict.setdefault("bot", settings.bot_name)
    return event_dict


def clip_user_text(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Shorten free-text fields to MAX_LOGGED_TEXT characters."""
    for field in CLIPPED_FIELDS:
        value = event_dict.get(field)
        if isinstance(value, str) and len(value) > MAX_LOGGED_TEXT:
            event_dict[field] = f"{value[:MAX_LOGGED_TEXT]}… (+{len(value) - MAX_LOGGED_TEXT} chars)"
    return event_dict


def setup_logging() -> None:
    """Route stdlib and structlog output through one stdout handler."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        clip_user_text,
    ]

    renderer: Processor
    if settings.is_development:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # httpx logs every oracle and ticket request at INFO
    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.info("Proposal generated", conversation_key="19:abc:29:1", priority="P2")
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Bind key/value pairs to every log entry emitted inside the block.

    Example:
        with LogContext(conversation_key="19:abc:29:1"):
            logger.info("Turn handled")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())
