"""Logging configuration for the Helm RBAC resolver service."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from helmrbac.core.config import Settings

JSON_LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding level, logger and resolution context."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Resolution context, when the caller passed it through extra
        for attr in ("user_id", "request_id", "cluster_id", "installed_app_id"):
            if hasattr(record, attr):
                log_record[attr] = getattr(record, attr)


def create_formatter(settings: Settings) -> logging.Formatter:
    """Build the console formatter; JSON records carry the app identity."""
    if not settings.log_json:
        return logging.Formatter(settings.log_format)
    return CustomJsonFormatter(
        JSON_LOG_FORMAT,
        static_fields={
            "app_name": settings.app_name,
            "app_version": settings.app_version,
            "environment": settings.environment.value,
        },
    )


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from ``settings``."""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.value)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level.value)
    console_handler.setFormatter(create_formatter(settings))
    root_logger.addHandler(console_handler)

    # Third-party noise
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("redis").setLevel(logging.WARNING)

    get_logger(__name__).info(
        "Logging configured",
        extra={"log_level": settings.log_level.value, "log_json": settings.log_json},
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: str, event: str, **kwargs) -> None:
    """Log a structured event."""
    extra = {"event": event, **kwargs}

    message = f"{event}: {json.dumps(kwargs, default=str)}" if kwargs else event

    if level not in ("debug", "info", "warning", "error", "critical"):
        raise ValueError(f"Unknown log level: {level}")
    getattr(logger, level)(message, extra=extra)
