"""Cart pricing - subtotal, discount and grand total for a sale"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List

from pos_ledger.domain.exceptions import ValidationError
from pos_ledger.domain.models import CartLine, Discount, DiscountType, PricedTotals

CENTS = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_amount(value: Any, field: str) -> Decimal:
    """Coerce a numeric input to Decimal, rejecting NaN, infinities and negatives"""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")
    return amount


def to_quantity(value: Any, field: str = "qty") -> int:
    """Quantities are whole units strictly greater than zero"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be a whole number")
    if value <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return value


def calculate_subtotal(lines: List[CartLine]) -> Decimal:
    """Sum of price x qty over every cart line"""
    subtotal = ZERO
    for line in lines:
        price = to_amount(line.price, f"price of {line.code or line.name}")
        qty = to_quantity(line.qty, f"qty of {line.code or line.name}")
        subtotal += price * qty
    return subtotal


def calculate_discount(subtotal: Decimal, discount: Discount) -> Decimal:
    """
    Resolve the discount amount against a subtotal.

    Flat discounts take the value as-is, percentage discounts take value% of the
    subtotal rounded half-up to cents. Either way the amount is capped at the
    subtotal so a grand total can never go negative.
    """
    value = to_amount(discount.value, "discount value")

    if discount.type == DiscountType.FLAT:
        amount = value
    elif discount.type == DiscountType.PERCENTAGE:
        amount = (subtotal * value / HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        raise ValidationError(f"Unknown discount type: {discount.type!r}")

    return min(subtotal, amount)


def price_cart(lines: List[CartLine], discount: Discount) -> PricedTotals:
    """
    Price a cart.

    Example:
        3 x 100.00 with a flat discount of 10 → subtotal 300, discount 10, total 290
        250.00 with a 10% discount → discount 25.00, total 225.00
    """
    if not lines:
        raise ValidationError("Cart is empty")

    subtotal = calculate_subtotal(lines)
    discount_amount = calculate_discount(subtotal, discount)

    return PricedTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        grand_total=subtotal - discount_amount,
    )
