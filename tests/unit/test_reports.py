"""Unit tests for report summaries"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from pos_ledger.domain.exceptions import ValidationError
from pos_ledger.domain.models import CustomerSelection, PaymentMethod, ReceiptLine
from pos_ledger.services.transactions import TransactionEngine


def sell_on(store, day: date, *args, **kwargs):
    """Run a sale as if it happened on the given day"""
    engine = TransactionEngine(store, clock=lambda: datetime.combine(day, datetime.min.time()))
    return engine.process_sale(*args, **kwargs)


def test_summary_window_includes_whole_end_day(ledger, store, sku1, line_for, fresh_customer):
    sell_on(store, date(2024, 3, 1), [line_for(sku1, 1)], CustomerSelection.walking())
    sell_on(
        store,
        date(2024, 3, 5),
        [line_for(sku1, 2)],
        CustomerSelection.registered(fresh_customer.id),
        payment_method=PaymentMethod.CREDIT,
    )
    sell_on(store, date(2024, 3, 6), [line_for(sku1, 4)], CustomerSelection.walking())

    summary = ledger.reports.summary(date(2024, 3, 1), date(2024, 3, 5))

    assert summary.total_sales == Decimal("300")
    assert summary.total_credit_sales == Decimal("200")
    assert summary.total_payments_collected == Decimal("300")
    # 10 - 1 - 2 - 4 left at 100 each
    assert summary.current_inventory_value == Decimal("300")


def test_summary_counts_installments_on_their_own_day(ledger, store, fresh_customer, sku1, line_for, sale_day):
    sale = sell_on(
        store,
        date(2024, 3, 1),
        [line_for(sku1, 3)],
        CustomerSelection.registered(fresh_customer.id),
        payment_method=PaymentMethod.CREDIT,
    )
    bill = store.credit_bills.for_sale(sale.id)
    ledger.credit.apply_installment(bill.id, Decimal("120"))

    assert ledger.reports.summary(date(2024, 3, 1), date(2024, 3, 1)).total_payments_collected == Decimal("300")
    assert ledger.reports.summary(sale_day, sale_day).total_payments_collected == Decimal("120")


def test_receipt_value_uses_current_price(ledger, store, sku1, sku2):
    ledger.stock.create_stock_receipt("Ceylon Supplies", date(2024, 3, 3), [ReceiptLine("SKU1", 2), ReceiptLine("SKU2", 1)])
    with store.transaction():
        store.inventory.get(sku1.id).price = Decimal("110")

    assert ledger.reports.summary(date(2024, 3, 1), date(2024, 3, 31)).total_receipt_value == Decimal("270")

    ledger.catalog.delete_item(sku2.id)
    assert ledger.reports.summary(date(2024, 3, 1), date(2024, 3, 31)).total_receipt_value == Decimal("220")


def test_summary_of_empty_window(ledger, sku1):
    summary = ledger.reports.summary(date(2020, 1, 1), date(2020, 1, 31))

    assert summary.total_sales == Decimal("0")
    assert summary.total_payments_collected == Decimal("0")
    assert summary.current_inventory_value == Decimal("1000")


def test_summary_requires_both_dates(ledger):
    with pytest.raises(ValidationError):
        ledger.reports.summary(date(2024, 3, 1), None)


def test_dashboard(ledger, store, sku1, customer, line_for, sale_day):
    ids = [ledger.transactions.process_sale([line_for(sku1, 1)], CustomerSelection.walking()).id for _ in range(7)]
    sell_on(store, date(2024, 3, 1), [line_for(sku1, 1)], CustomerSelection.walking())

    dashboard = ledger.reports.dashboard(sale_day)

    assert dashboard.today_sales == Decimal("700")
    assert dashboard.inventory_count == 1
    assert dashboard.total_outstanding_credit == Decimal("800")
    assert len(dashboard.recent_sale_ids) == 5
    assert dashboard.recent_sale_ids[1:] == list(reversed(ids))[:4]

    assert ledger.reports.dashboard(sale_day, recent_limit=0).recent_sale_ids == []


def test_low_stock_items(ledger, store, sku1, sku2):
    assert ledger.reports.low_stock_items() == []

    with store.transaction():
        store.inventory.get(sku1.id).stock = 2
        store.inventory.get(sku2.id).stock = 0

    # SKU2 has no threshold and never qualifies
    assert [item.id for item in ledger.reports.low_stock_items()] == [sku1.id]
