"""structlog on top of stdlib logging, shared by the CLI and uvicorn.

Native structlog events and foreign records (uvicorn, httpx) go through the
same ProcessorFormatter, so both render as console lines or JSON objects.
"""

from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

import structlog

from godseye.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# uvicorn's own loggers; they do not propagate, so each gets a handler.
_UVICORN_LOGGERS: dict[str, str] = {
    "uvicorn": "default",
    "uvicorn.access": "access",
}

# httpx logs every request URL at INFO, api_key query param included.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates the message as "color_message".
    event_dict.pop("color_message", None)
    return event_dict


def _add_record_created_timestamp_utc(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp foreign LogRecords with the time they were created."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _formatter(config: AppConfig) -> dict[str, Any]:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": [
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            _add_record_created_timestamp_utc,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
        ],
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    }


def _stream_handler(stream: str) -> dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "structlog",
        "stream": f"ext://sys.{stream}",
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """
    dictConfig for ``logging.config.dictConfig`` and ``uvicorn.run(log_config=...)``.

    Diagnostics go to stderr; only the uvicorn access log goes to stdout.
    """
    level = config.log_level
    loggers: dict[str, Any] = {
        name: {"handlers": [handler], "level": level, "propagate": False}
        for name, handler in _UVICORN_LOGGERS.items()
    }
    loggers["uvicorn.error"] = {"level": level}
    for name in _QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"structlog": _formatter(config)},
        "handlers": {
            "default": _stream_handler("stderr"),
            "access": _stream_handler("stdout"),
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging; returns the dictConfig used."""
    structlog.configure(
        processors=[
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)
    log.info(
        "logging_configured", log_format=config.log_format, log_level=config.log_level
    )
    return cfg
