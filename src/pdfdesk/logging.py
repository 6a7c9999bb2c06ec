"""Structlog configuration for package-wide logging.

Log calls pass their fields as ``extra={...}``; the fields are lifted into the
event itself so JSON lines stay flat. The running CLI command is bound once
and attached to every line.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

from pdfdesk.settings import Settings, get_settings

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor

_LOGGING_CONFIGURED = False


def _rename_event_key(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Store the log message under "message" instead of "event"."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _lift_extra(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Merge an ``extra`` mapping into the event dictionary.

    Keys already present on the event win over the ones in ``extra``.

    Args:
        logger: The logger instance (unused).
        method_name: The logging method name (unused).
        event_dict: The original event dictionary.

    Returns:
        The event dictionary with the ``extra`` fields at top level.
    """
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _build_renderer(settings: Settings) -> Processor:
    if settings.log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    *,
    settings: Settings | None = None,
    command: str | None = None,
    force: bool = False,
) -> None:
    """Configure structlog and stdlib logging once for the package.

    Args:
        settings: Settings providing level, file and format; loaded when omitted.
        command: CLI command bound to every following log line. Bound even
            when logging was already configured.
        force: Reconfigure even when logging is already set up.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if command:
        structlog.contextvars.bind_contextvars(command=command)
    if _LOGGING_CONFIGURED and not force:
        return

    config = settings or get_settings()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(level=log_level, format="%(message)s", handlers=handlers, force=force)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _lift_extra,
            _rename_event_key,
            structlog.processors.format_exc_info,
            _build_renderer(config),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str = "pdfdesk") -> structlog.BoundLogger:
    """Return package logger, configuring logging lazily."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
