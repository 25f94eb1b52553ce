"""Report rollups - pure sums over ledger records"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable

from pos_ledger.domain.models import PaymentMethod
from pos_ledger.utils.date_utils import in_window

ZERO = Decimal("0")


def total_sales(sales: Iterable, start: date, end: date) -> Decimal:
    return sum((sale.grand_total for sale in sales if in_window(sale.date, start, end)), ZERO)


def total_credit_sales(sales: Iterable, start: date, end: date) -> Decimal:
    return sum(
        (
            sale.grand_total
            for sale in sales
            if in_window(sale.date, start, end) and sale.payment_method == PaymentMethod.CREDIT
        ),
        ZERO,
    )


def total_payments_collected(payments: Iterable, start: date, end: date) -> Decimal:
    return sum((payment.amount for payment in payments if in_window(payment.date, start, end)), ZERO)


def total_receipt_value(receipts: Iterable, prices: Dict[str, Decimal], start: date, end: date) -> Decimal:
    """
    Value of goods received in the window.

    Receipts do not record a cost, so each line is valued at the item's
    current price. Lines whose item has since been deleted count as zero.
    """
    value = ZERO
    for receipt in receipts:
        if not in_window(receipt.date, start, end):
            continue
        for line in receipt.items:
            price = prices.get(line.item_id)
            if price is not None:
                value += price * line.qty
    return value


def inventory_value(items: Iterable) -> Decimal:
    """Stock on hand at current prices; not tied to any date window"""
    return sum((item.price * item.stock for item in items), ZERO)
