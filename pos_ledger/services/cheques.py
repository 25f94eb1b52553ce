"""Cheque tracking - status updates over recorded cheques"""

from datetime import date
from typing import List, Optional

from pos_ledger.config import settings
from pos_ledger.domain.cheques import check_transition, parse_status
from pos_ledger.domain.models import ChequeStatus
from pos_ledger.infrastructure.observability.logging import log_cheque_status, log_deletion
from pos_ledger.infrastructure.observability.metrics import cheque_status_counter
from pos_ledger.infrastructure.storage.models import Cheque
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.guards import rejections


class ChequeTracker:
    """
    Status bookkeeping for cheques received as payment.

    A status change never touches the sale, payment or credit bill the cheque
    came from; a bounced cheque is reconciled by hand.
    """

    def __init__(self, store: EntityStore, strict: Optional[bool] = None):
        self.store = store
        self.strict = settings.strict_cheque_transitions if strict is None else strict

    def set_status(self, cheque_id: str, new_status: ChequeStatus) -> Cheque:
        with rejections("set_cheque_status"):
            status = parse_status(new_status)
            cheque = self.store.cheques.get(cheque_id)
            previous = cheque.status
            check_transition(previous, status, strict=self.strict)

            with self.store.transaction():
                cheque = self.store.cheques.get(cheque_id)
                cheque.status = status

        cheque_status_counter.labels(status=status.value).inc()
        log_cheque_status(cheque_id, previous.value, status.value)
        return cheque

    def delete_cheque(self, cheque_id: str) -> Cheque:
        with rejections("delete_cheque"):
            self.store.cheques.get(cheque_id)
        with self.store.transaction():
            cheque = self.store.cheques.remove(cheque_id)
        log_deletion("Cheque", cheque_id)
        return cheque

    def due_between(self, start: date, end: date) -> List[Cheque]:
        """Cheques whose due date falls in the inclusive window"""
        return self.store.cheques.between(start, end, key=lambda cheque: cheque.due_date)

    def with_status(self, status: ChequeStatus) -> List[Cheque]:
        status = parse_status(status)
        return [cheque for cheque in self.store.cheques.all() if cheque.status == status]
