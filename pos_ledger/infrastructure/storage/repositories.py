"""Data access layer for the collections inside the ledger document"""

from datetime import date
from typing import TYPE_CHECKING, Callable, Generic, List, Optional, TypeVar

from pos_ledger.domain.exceptions import EntityNotFoundError
from pos_ledger.infrastructure.storage.models import (
    CreditBill,
    InventoryItem,
    Record,
)
from pos_ledger.utils.date_utils import in_window

if TYPE_CHECKING:
    from pos_ledger.infrastructure.storage.store import EntityStore

R = TypeVar("R", bound=Record)


class Repository(Generic[R]):
    """Repository for one named collection of the document"""

    def __init__(self, store: "EntityStore", collection: str, entity: str):
        self.store = store
        self.collection = collection
        self.entity = entity

    @property
    def rows(self) -> List[R]:
        # Resolved on every access: a rolled-back transaction swaps the document
        return getattr(self.store.document, self.collection)

    def all(self) -> List[R]:
        return list(self.rows)

    def find(self, record_id: str) -> Optional[R]:
        return next((row for row in self.rows if row.id == record_id), None)

    def get(self, record_id: str) -> R:
        """Fetch a record by id or raise EntityNotFoundError"""
        row = self.find(record_id)
        if row is None:
            raise EntityNotFoundError(self.entity, record_id)
        return row

    def add(self, record: R) -> R:
        self.rows.append(record)
        return record

    def remove(self, record_id: str) -> R:
        """Drop a record by id; nothing that references it is touched"""
        row = self.get(record_id)
        self.rows.remove(row)
        return row

    def between(self, start: date, end: date, key: Callable[[R], Optional[date]] = lambda row: row.date) -> List[R]:
        """Records whose date falls inside the inclusive [start, end] window"""
        return [row for row in self.rows if in_window(key(row), start, end)]

    def __len__(self) -> int:
        return len(self.rows)


class InventoryRepository(Repository[InventoryItem]):
    """Repository for inventory items"""

    def find_by_code(self, code: str) -> Optional[InventoryItem]:
        return next((item for item in self.rows if item.code == code), None)

    def code_taken(self, code: str, exclude_id: Optional[str] = None) -> bool:
        return any(item.code == code and item.id != exclude_id for item in self.rows)

    def search(self, keyword: str) -> List[InventoryItem]:
        """Case-insensitive match on item name or code"""
        needle = keyword.strip().lower()
        if not needle:
            return []
        return [item for item in self.rows if needle in item.name.lower() or needle in item.code.lower()]


class CreditBillRepository(Repository[CreditBill]):
    """Repository for credit bills"""

    def for_customer(self, customer_id: str) -> List[CreditBill]:
        return [bill for bill in self.rows if bill.customer_id == customer_id]

    def has_outstanding(self, customer_id: str) -> bool:
        return any(bill.due_amount > 0 for bill in self.for_customer(customer_id))

    def for_sale(self, bill_id: str) -> Optional[CreditBill]:
        return next((bill for bill in self.rows if bill.bill_id == bill_id), None)
