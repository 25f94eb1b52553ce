"""Structured JSON logging for ledger operations"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from pos_ledger.config import settings

LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Stamps every record with a UTC timestamp, its level and the service it came from"""

    def __init__(self, *args: Any, service_name: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name or settings.service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: Optional[str] = None, service_name: Optional[str] = None) -> logging.Handler:
    """Route the root logger to stdout as JSON lines; defaults come from settings"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter(LOG_FORMAT, service_name=service_name))
    logger.addHandler(handler)
    return handler


def log_sale(sale_id: str, payment_method: str, grand_total: Decimal, line_count: int) -> None:
    """Log a completed sale"""
    logging.info(
        "Sale processed",
        extra={
            "step": "sale_processed",
            "sale_id": sale_id,
            "payment_method": payment_method,
            "grand_total": str(grand_total),
            "currency": settings.currency,
            "line_count": line_count,
        },
    )


def log_installment(credit_bill_id: str, bill_id: str, amount: Decimal, due_amount: Decimal) -> None:
    """Log an installment applied against a credit bill"""
    logging.info(
        "Installment applied",
        extra={
            "step": "installment_applied",
            "credit_bill_id": credit_bill_id,
            "bill_id": bill_id,
            "amount": str(amount),
            "due_amount": str(due_amount),
            "currency": settings.currency,
        },
    )


def log_cheque_status(cheque_id: str, previous: str, current: str) -> None:
    logging.info(
        "Cheque status updated",
        extra={
            "step": "cheque_status",
            "cheque_id": cheque_id,
            "previous_status": previous,
            "status": current,
        },
    )


def log_deletion(entity: str, entity_id: str) -> None:
    logging.info("Record deleted", extra={"step": "record_deleted", "entity": entity, "entity_id": entity_id})


def log_rejection(operation: str, reason: str, message: str) -> None:
    """Log an operation refused by validation or a ledger rule"""
    logging.warning(
        f"{operation} rejected: {message}",
        extra={"step": "rejected", "operation": operation, "reason": reason},
    )


def log_persistence_failure(path: str, attempts: int, error: Exception) -> None:
    logging.error(
        f"Failed to save ledger document: {error}",
        extra={"step": "persist_failed", "path": path, "attempts": attempts},
    )
