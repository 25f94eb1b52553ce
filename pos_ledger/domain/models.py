"""Domain models - pure Python dataclasses representing business inputs and results"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    CREDIT = "credit"


class DiscountType(str, Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


class ChequeStatus(str, Enum):
    PENDING = "Pending"
    CLAIMED = "Claimed"
    RELEASED = "Released"
    BOUNCED = "Bounced"


class CustomerType(str, Enum):
    WALKING = "walking"
    REGISTERED = "registered"


@dataclass
class CartLine:
    """One line of a cart handed to the engine"""

    item_id: Optional[str]
    code: str
    name: str
    price: Decimal
    qty: int


@dataclass
class Discount:
    """Discount requested for a sale"""

    type: DiscountType = DiscountType.FLAT
    value: Decimal = Decimal("0")


@dataclass
class ChequeDetails:
    """Physical cheque handed over as payment"""

    number: str
    bank: str
    due_date: Optional[date]


@dataclass
class CustomerSelection:
    """Who the sale is for: a walking customer or a registered one"""

    type: CustomerType
    customer_id: Optional[str] = None
    name: str = ""
    address: str = ""
    tp: str = ""

    @classmethod
    def walking(cls, name: str = "", address: str = "", tp: str = "") -> "CustomerSelection":
        return cls(type=CustomerType.WALKING, name=name or "Walking Customer", address=address, tp=tp)

    @classmethod
    def registered(cls, customer_id: str) -> "CustomerSelection":
        return cls(type=CustomerType.REGISTERED, customer_id=customer_id)


@dataclass
class PricedTotals:
    """Subtotal, discount and grand total computed for a cart"""

    subtotal: Decimal
    discount_amount: Decimal
    grand_total: Decimal


@dataclass
class ReceiptLine:
    """Requested quantity of an inventory item, looked up by code"""

    code: str
    qty: int


@dataclass
class ReportSummary:
    """Totals over a date window"""

    start: date
    end: date
    total_sales: Decimal
    total_credit_sales: Decimal
    total_payments_collected: Decimal
    total_receipt_value: Decimal
    current_inventory_value: Decimal


@dataclass
class DashboardSummary:
    """Point-in-time figures for the landing view"""

    today_sales: Decimal
    inventory_count: int
    total_outstanding_credit: Decimal
    recent_sale_ids: List[str] = field(default_factory=list)
