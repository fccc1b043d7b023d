"""Structured JSON logging for production observability"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from billing_engine.config import settings

# Set per request by RequestIDMiddleware
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name
        request_id = request_id_var.get()
        if request_id and not log_record.get("request_id"):
            log_record["request_id"] = request_id


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_invoice_calculated(
    request_id: str,
    currency: Optional[str],
    line_count: int,
    total_minor: int,
    duration_ms: float,
) -> None:
    """Log structured invoice calculation outcome"""
    logging.info(
        "Invoice calculated",
        extra={
            "request_id": request_id,
            "step": "invoice_calculated",
            "currency": currency,
            "line_count": line_count,
            "total_minor": total_minor,
            "duration_ms": duration_ms,
        },
    )


def log_schedule_generated(
    request_id: str,
    kind: str,
    entry_count: int,
    total_minor: int,
    duration_ms: float,
    replayed: bool = False,
) -> None:
    """Log structured schedule generation outcome"""
    logging.info(
        "Schedule generated",
        extra={
            "request_id": request_id,
            "step": "schedule_generated",
            "schedule_kind": kind,  # payment | recurring
            "entry_count": entry_count,
            "total_minor": total_minor,
            "duration_ms": duration_ms,
            "replayed": replayed,
        },
    )
