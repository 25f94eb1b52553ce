"""Shared rejection handling for ledger operations"""

from contextlib import contextmanager
from typing import Iterator

from pos_ledger.domain.exceptions import BusinessRuleViolation, ValidationError
from pos_ledger.infrastructure.observability.logging import log_rejection
from pos_ledger.infrastructure.observability.metrics import record_rejection


@contextmanager
def rejections(operation: str) -> Iterator[None]:
    """Log and count validation or rule failures raised inside the block, then re-raise"""
    try:
        yield
    except (ValidationError, BusinessRuleViolation) as e:
        record_rejection(operation, e.reason)
        log_rejection(operation, e.reason, str(e))
        raise
