from __future__ import annotations

import logging
import time
from logging.config import dictConfig

from settings import get_settings

_configured = False


class PublishContextFormatter(logging.Formatter):
    """Appends observation and scheduling context passed via ``extra``."""

    converter = time.gmtime

    context_keys = (
        "resource_uri",
        "phenomenon_time",
        "result",
        "status_code",
        "error_kind",
        "period_seconds",
        "tick",
    )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in self.context_keys
            if getattr(record, key, None) is not None
        ]
        if not pairs:
            return message
        # Traceback text stays below the first line.
        head, sep, tail = message.partition("\n")
        return f"{head} | {' '.join(pairs)}{sep}{tail}"


def configure_logging(level: str | int | None = None) -> None:
    """Route every logger through one stderr handler with publish context."""
    global _configured
    if _configured:
        return

    log_level = level if level is not None else get_settings().log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "publish_context": {
                    "()": "logging_config.PublishContextFormatter",
                    "fmt": "%(asctime)sZ %(levelname)-7s [%(threadName)s] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "publish_context",
                }
            },
            "root": {"handlers": ["stderr"], "level": log_level},
        }
    )

    _configured = True
