"""Unit tests for cart pricing"""

import pytest
from decimal import Decimal
from pos_ledger.domain.exceptions import ValidationError
from pos_ledger.domain.models import CartLine, Discount, DiscountType
from pos_ledger.domain.pricing import calculate_discount, price_cart, to_amount


def line(price: str, qty: int, code: str = "SKU1") -> CartLine:
    return CartLine(item_id=None, code=code, name=code, price=Decimal(price), qty=qty)


def test_flat_discount():
    """3 x 100 with 10 off"""
    totals = price_cart([line("100", 3)], Discount(DiscountType.FLAT, Decimal("10")))

    assert totals.subtotal == Decimal("300")
    assert totals.discount_amount == Decimal("10")
    assert totals.grand_total == Decimal("290")


def test_percentage_discount():
    """10% off a 250 subtotal"""
    totals = price_cart([line("125", 2)], Discount(DiscountType.PERCENTAGE, Decimal("10")))

    assert totals.subtotal == Decimal("250")
    assert totals.discount_amount == Decimal("25")
    assert totals.grand_total == Decimal("225")


def test_percentage_discount_rounds_to_cents():
    amount = calculate_discount(Decimal("99.99"), Discount(DiscountType.PERCENTAGE, Decimal("15")))
    assert amount == Decimal("15.00")  # 14.9985 rounds half-up


def test_flat_discount_capped_at_subtotal():
    totals = price_cart([line("40", 1)], Discount(DiscountType.FLAT, Decimal("75")))

    assert totals.discount_amount == Decimal("40")
    assert totals.grand_total == Decimal("0")


def test_percentage_over_hundred_capped_at_subtotal():
    totals = price_cart([line("80", 1)], Discount(DiscountType.PERCENTAGE, Decimal("150")))
    assert totals.discount_amount == Decimal("80")
    assert totals.grand_total == Decimal("0")


def test_string_discount_type_accepted():
    totals = price_cart([line("100", 1)], Discount("percentage", Decimal("5")))
    assert totals.discount_amount == Decimal("5.00")


@pytest.mark.parametrize("value", [Decimal("-1"), "abc", float("nan"), None])
def test_bad_discount_value_rejected(value):
    with pytest.raises(ValidationError):
        price_cart([line("100", 1)], Discount(DiscountType.FLAT, value))


def test_empty_cart_rejected():
    with pytest.raises(ValidationError, match="empty"):
        price_cart([], Discount())


@pytest.mark.parametrize("qty", [0, -2, 1.5])
def test_bad_quantity_rejected(qty):
    with pytest.raises(ValidationError):
        price_cart([line("100", qty)], Discount())


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        price_cart([line("-5", 1)], Discount())


def test_to_amount_accepts_numbers():
    assert to_amount(12, "x") == Decimal("12")
    assert to_amount(12.5, "x") == Decimal("12.5")
    assert to_amount("7.25", "x") == Decimal("7.25")


def test_to_amount_rejects_booleans():
    with pytest.raises(ValidationError):
        to_amount(True, "x")
