"""Cheque rules - required details and status transitions"""

from typing import Dict, FrozenSet, Optional

from pos_ledger.domain.exceptions import BusinessRuleViolation, ValidationError
from pos_ledger.domain.models import ChequeDetails, ChequeStatus

# Only consulted in strict mode. Claimed and Released are terminal, a bounced
# cheque may be re-presented.
STRICT_TRANSITIONS: Dict[ChequeStatus, FrozenSet[ChequeStatus]] = {
    ChequeStatus.PENDING: frozenset({ChequeStatus.CLAIMED, ChequeStatus.RELEASED, ChequeStatus.BOUNCED}),
    ChequeStatus.BOUNCED: frozenset({ChequeStatus.PENDING}),
    ChequeStatus.CLAIMED: frozenset(),
    ChequeStatus.RELEASED: frozenset(),
}


def require_cheque_details(details: Optional[ChequeDetails]) -> ChequeDetails:
    """Cheque payments need a number, a bank and a due date"""
    if details is None:
        raise ValidationError("Cheque details are required for cheque payments")

    missing = [
        name
        for name, value in (
            ("cheque number", (details.number or "").strip()),
            ("bank", (details.bank or "").strip()),
            ("due date", details.due_date),
        )
        if not value
    ]
    if missing:
        raise ValidationError(f"Missing cheque details: {', '.join(missing)}")

    return ChequeDetails(number=details.number.strip(), bank=details.bank.strip(), due_date=details.due_date)


def parse_status(value: str) -> ChequeStatus:
    try:
        return ChequeStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown cheque status: {value!r}")


def check_transition(current: ChequeStatus, new: ChequeStatus, strict: bool = False) -> None:
    """
    Validate a status change.

    Permissive mode accepts any state to any state. Strict mode follows
    STRICT_TRANSITIONS; setting the current status again is always allowed.
    """
    if not strict or current == new:
        return
    if new not in STRICT_TRANSITIONS[current]:
        raise BusinessRuleViolation(f"Cheque cannot move from {current.value} to {new.value}")
