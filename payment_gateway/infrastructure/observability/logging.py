"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "payment-gateway"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


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


def log_payment(
    request_id: str,
    tran_id: Any,
    state: str,
    error_code: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured payment outcome for analysis"""
    logging.info(
        "Payment completed",
        extra={
            "request_id": request_id,
            "tran_id": tran_id,
            "step": "payment_complete",
            "outcome": "success" if error_code is None else "failed",
            "error_code": error_code,
            "state": state,
            "duration_ms": duration_ms,
        },
    )
