"""Identifier generation for ledger records"""

import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def new_document_number(prefix: str) -> str:
    """Human-facing document number, e.g. BILL-3f2a..., GRN-..., Q-..."""
    return f"{prefix}-{uuid.uuid4().hex.upper()}"
