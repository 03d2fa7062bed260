"""Logging setup for contactflow.

Records are rendered as JSON and carry the id of the form whose submit task
produced them (``unknown`` outside a submit).
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from logging.config import dictConfig

from pythonjsonlogger import jsonlogger

current_form_id: ContextVar[str | None] = ContextVar("current_form_id", default=None)


class FormIdFilter(logging.Filter):
    """Attach the current form id to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.form_id = current_form_id.get() or "unknown"
        return True


def configure_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"with_form_id": {"()": FormIdFilter}},
            "formatters": {
                "json": {
                    "()": jsonlogger.JsonFormatter,
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(form_id)s",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "filters": ["with_form_id"],
                }
            },
            "loggers": {
                "contactflow": {
                    "handlers": ["default"],
                    "level": level.upper(),
                    "propagate": False,
                },
            },
        }
    )


__all__ = [
    "FormIdFilter",
    "configure_logging",
    "current_form_id",
]
