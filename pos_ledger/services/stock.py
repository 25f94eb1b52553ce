"""Goods received notes and quotations"""

from datetime import date
from decimal import Decimal
from typing import Dict, List

from pos_ledger.domain.exceptions import ValidationError
from pos_ledger.domain.models import ReceiptLine
from pos_ledger.domain.pricing import to_quantity
from pos_ledger.infrastructure.observability.logging import log_deletion
from pos_ledger.infrastructure.storage.models import (
    InventoryItem,
    Quotation,
    QuotationLine,
    StockReceipt,
    StockReceiptLine,
)
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.guards import rejections
from pos_ledger.utils.identifiers import new_document_number


class StockService:
    """Replenishes stock from supplier deliveries and records priced quotations"""

    def __init__(self, store: EntityStore):
        self.store = store

    def _resolve_lines(self, lines: List[ReceiptLine]) -> Dict[str, tuple]:
        """Look every code up in inventory and merge repeated codes"""
        if not lines:
            raise ValidationError("Add at least one item")

        resolved: Dict[str, tuple] = {}
        for line in lines:
            qty = to_quantity(line.qty, f"qty of {line.code}")
            item = self.store.inventory.find_by_code((line.code or "").strip())
            if item is None:
                raise ValidationError(f"Item {line.code!r} not found in inventory. Please add it first.")
            _, merged = resolved.get(item.id, (item, 0))
            resolved[item.id] = (item, merged + qty)
        return resolved

    def create_stock_receipt(self, supplier: str, received_on: date, lines: List[ReceiptLine]) -> StockReceipt:
        """Record a delivery and add the received quantities to stock"""
        with rejections("create_stock_receipt"):
            if not (supplier or "").strip() or received_on is None:
                raise ValidationError("Supplier and date are required")
            resolved = self._resolve_lines(lines)

        with self.store.transaction():
            receipt = self.store.receipts.add(
                StockReceipt(
                    id=new_document_number("GRN"),
                    date=received_on,
                    supplier=supplier.strip(),
                    items=[
                        StockReceiptLine(item_id=item.id, code=item.code, name=item.name, qty=qty)
                        for item, qty in resolved.values()
                    ],
                )
            )
            for line in receipt.items:
                item: InventoryItem = self.store.inventory.find(line.item_id)
                item.stock += line.qty

        return receipt

    def delete_stock_receipt(self, receipt_id: str) -> StockReceipt:
        """Remove the receipt; stock it added is not taken back"""
        with rejections("delete_stock_receipt"):
            self.store.receipts.get(receipt_id)
        with self.store.transaction():
            receipt = self.store.receipts.remove(receipt_id)
        log_deletion("StockReceipt", receipt_id)
        return receipt

    def create_quotation(self, customer_name: str, quoted_on: date, lines: List[ReceiptLine]) -> Quotation:
        """Price a list of items at current inventory prices; stock is not reserved"""
        with rejections("create_quotation"):
            if not (customer_name or "").strip() or quoted_on is None:
                raise ValidationError("Customer name and date are required")
            resolved = self._resolve_lines(lines)

        quote_lines = [
            QuotationLine(item_id=item.id, code=item.code, name=item.name, price=item.price, qty=qty)
            for item, qty in resolved.values()
        ]
        total = sum((line.price * line.qty for line in quote_lines), Decimal("0"))

        with self.store.transaction():
            quotation = self.store.quotations.add(
                Quotation(
                    id=new_document_number("Q"),
                    date=quoted_on,
                    customer_name=customer_name.strip(),
                    items=quote_lines,
                    total=total,
                )
            )
        return quotation

    def delete_quotation(self, quotation_id: str) -> Quotation:
        with rejections("delete_quotation"):
            self.store.quotations.get(quotation_id)
        with self.store.transaction():
            quotation = self.store.quotations.remove(quotation_id)
        log_deletion("Quotation", quotation_id)
        return quotation
