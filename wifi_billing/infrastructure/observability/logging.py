"""Structured JSON logging for production observability"""

import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from wifi_billing.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_payment_toggle(customer_id: uuid.UUID, month: int, year: int, action: str) -> None:
    """Log structured toggle outcome for the payment audit trail"""
    logging.getLogger("wifi_billing.payments").info(
        "Payment toggled",
        extra={
            "customer_id": str(customer_id),
            "step": "payment_toggle",
            "action": action,
            "month": month,
            "year": year,
        },
    )
