"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from wisebond_engine.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name or settings.service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: Optional[str] = None, service_name: Optional[str] = None) -> None:
    """Configure structured JSON logging; unset arguments come from settings"""
    logger = logging.getLogger()
    logger.setLevel((level or settings.log_level).upper())

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_calculation(calculation_type: str, duration_ms: float, **fields: Any) -> None:
    """Log structured calculation outcome for analysis"""
    logging.getLogger("wisebond_engine.results").info(
        "Calculation completed",
        extra={
            "step": "calculation_complete",
            "calculation_type": calculation_type,
            "duration_ms": duration_ms,
            **fields,
        },
    )


def log_calculation_failure(calculation_type: str, error: Exception) -> None:
    """Log a rejected calculation before the error propagates to the caller"""
    logging.getLogger("wisebond_engine.results").warning(
        "Calculation rejected: %s",
        error,
        extra={
            "step": "calculation_failed",
            "calculation_type": calculation_type,
            "error_type": type(error).__name__,
        },
    )
