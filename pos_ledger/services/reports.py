"""Read-side summaries over the ledger document"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pos_ledger.config import settings
from pos_ledger.domain import reports
from pos_ledger.domain.exceptions import ValidationError
from pos_ledger.domain.models import DashboardSummary, ReportSummary
from pos_ledger.infrastructure.storage.models import InventoryItem
from pos_ledger.infrastructure.storage.store import EntityStore


class ReportAggregator:
    """Recomputes every figure from the store on each call; nothing is cached or mutated"""

    def __init__(self, store: EntityStore):
        self.store = store

    def summary(self, start: date, end: date) -> ReportSummary:
        if start is None or end is None:
            raise ValidationError("Please select both start and end dates for the report")

        document = self.store.document
        prices = {item.id: item.price for item in document.inventory}

        return ReportSummary(
            start=start,
            end=end,
            total_sales=reports.total_sales(document.sales, start, end),
            total_credit_sales=reports.total_credit_sales(document.sales, start, end),
            total_payments_collected=reports.total_payments_collected(document.payments, start, end),
            total_receipt_value=reports.total_receipt_value(document.grns, prices, start, end),
            current_inventory_value=reports.inventory_value(document.inventory),
        )

    def dashboard(self, today: date, recent_limit: Optional[int] = None) -> DashboardSummary:
        document = self.store.document
        limit = settings.recent_sales_limit if recent_limit is None else recent_limit
        recent = document.sales[-limit:] if limit > 0 else []

        return DashboardSummary(
            today_sales=reports.total_sales(document.sales, today, today),
            inventory_count=len(document.inventory),
            total_outstanding_credit=sum(
                (customer.outstanding_credit for customer in document.customers), Decimal("0")
            ),
            recent_sale_ids=[sale.id for sale in reversed(recent)],
        )

    def low_stock_items(self) -> List[InventoryItem]:
        """Items at or below their warning threshold (items without a threshold never qualify)"""
        return [item for item in self.store.inventory.all() if item.threshold > 0 and item.stock <= item.threshold]
