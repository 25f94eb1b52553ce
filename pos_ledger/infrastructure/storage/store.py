"""Single-document storage with atomic swap-on-save"""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from pydantic import ValidationError as PydanticValidationError

from pos_ledger.config import settings
from pos_ledger.domain.exceptions import PersistenceFailure
from pos_ledger.infrastructure.observability.logging import log_persistence_failure
from pos_ledger.infrastructure.observability.metrics import (
    document_save_histogram,
    persistence_failure_counter,
)
from pos_ledger.infrastructure.storage.models import (
    Cheque,
    Customer,
    DistributionChannel,
    Payment,
    PosDocument,
    Quotation,
    Sale,
    StockReceipt,
)
from pos_ledger.infrastructure.storage.repositories import (
    CreditBillRepository,
    InventoryRepository,
    Repository,
)


class EntityStore:
    """
    Owns the ledger document and every collection inside it.

    All mutation goes through transaction(): the document is snapshotted on
    entry, restored if the block raises, and written to disk when it completes.
    """

    def __init__(self, path: Optional[Path] = None, max_retries: Optional[int] = None):
        self.path = Path(path) if path is not None else settings.data_file
        self.max_retries = max_retries if max_retries is not None else settings.persist_max_retries
        self.document = PosDocument()
        self.dirty = False
        self._depth = 0

        self.inventory = InventoryRepository(self, "inventory", "InventoryItem")
        self.customers: Repository[Customer] = Repository(self, "customers", "Customer")
        self.channels: Repository[DistributionChannel] = Repository(self, "distribution_channels", "DistributionChannel")
        self.sales: Repository[Sale] = Repository(self, "sales", "Sale")
        self.receipts: Repository[StockReceipt] = Repository(self, "grns", "StockReceipt")
        self.quotations: Repository[Quotation] = Repository(self, "quotations", "Quotation")
        self.payments: Repository[Payment] = Repository(self, "payments", "Payment")
        self.credit_bills = CreditBillRepository(self, "credit_bills", "CreditBill")
        self.cheques: Repository[Cheque] = Repository(self, "cheques", "Cheque")

    @classmethod
    def open(cls, path: Optional[Path] = None, max_retries: Optional[int] = None) -> "EntityStore":
        """Create a store and load its document from disk"""
        store = cls(path, max_retries)
        store.load()
        return store

    def load(self) -> PosDocument:
        """
        Read the document from disk.

        A missing file yields the default document, which is written straight
        away. Absent collections and fields are filled in by the document model.
        """
        if not self.path.exists():
            logging.info("No ledger document found, starting fresh", extra={"path": str(self.path)})
            self.document = PosDocument()
            self.save()
            return self.document

        try:
            raw = self.path.read_text(encoding="utf-8")
            self.document = PosDocument.model_validate_json(raw) if raw.strip() else PosDocument()
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            raise PersistenceFailure(f"Could not read ledger document {self.path}: {e}") from e

        self.dirty = False
        return self.document

    def save(self) -> None:
        """Replace the on-disk document, retrying before giving up"""
        payload = self.document.model_dump_json(by_alias=True, indent=2)
        last_error: Optional[OSError] = None

        for attempt in range(1, max(self.max_retries, 1) + 1):
            try:
                with document_save_histogram.time():
                    self._write(payload)
                self.dirty = False
                return
            except OSError as e:
                last_error = e
                persistence_failure_counter.inc()
                logging.warning(f"Save attempt {attempt} failed: {e}", extra={"path": str(self.path)})

        self.dirty = True
        log_persistence_failure(str(self.path), self.max_retries, last_error)
        raise PersistenceFailure(f"Changes are not saved to {self.path}: {last_error}", unsaved=True) from last_error

    def flush(self) -> None:
        """Retry a save that previously failed"""
        if self.dirty:
            self.save()

    def _write(self, payload: str) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    @contextmanager
    def transaction(self) -> Iterator[PosDocument]:
        """All-or-nothing mutation of the document followed by a save"""
        if self._depth:
            # Already inside an outer transaction, which owns snapshot and save
            yield self.document
            return

        snapshot = self.document.model_copy(deep=True)
        self._depth += 1
        try:
            yield self.document
        except Exception:
            self.document = snapshot
            raise
        finally:
            self._depth -= 1

        self.save()
