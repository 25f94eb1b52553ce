"""Pydantic records making up the persisted POS document"""

import datetime as dt
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pos_ledger.domain.models import ChequeStatus, CustomerType, DiscountType, PaymentMethod

MAIN_CHANNEL_ID = "main"
PLACEHOLDER_LOGO = "https://placehold.co/80x80/000000/FFFFFF?text=LOGO"


class Record(BaseModel):
    """Base for stored records: camelCase on disk, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _blank_to_none(value: Any) -> Any:
    return None if value == "" else value


OptionalDate = Annotated[Optional[dt.date], BeforeValidator(_blank_to_none)]


class Shop(Record):
    name: str = "Your Shop Name"
    address: str = ""
    tp: str = ""
    dashboard_logo: str = PLACEHOLDER_LOGO
    receipt_logo: str = PLACEHOLDER_LOGO


class InventoryItem(Record):
    id: str
    code: str
    name: str
    description: str = ""
    price: Decimal
    stock: int
    threshold: int = 0

    @field_validator("threshold", mode="before")
    @classmethod
    def default_threshold(cls, value: Any) -> Any:
        return value or 0


class Customer(Record):
    id: str
    name: str
    address: str = ""
    tp: str = ""
    credit_limit: Decimal = Decimal("0")
    outstanding_credit: Decimal = Decimal("0")


class DistributionChannel(Record):
    id: str
    name: str
    reg_no: str = ""
    address: str = ""
    hotline: str = ""
    receipt_logo: str = PLACEHOLDER_LOGO


def default_channels() -> List[DistributionChannel]:
    return [DistributionChannel(id=MAIN_CHANNEL_ID, name="Main Shop")]


class CustomerSnapshot(Record):
    """Customer details frozen onto a sale"""

    type: CustomerType
    id: str
    name: str
    address: str = ""
    tp: str = ""


class SaleLine(Record):
    item_id: Optional[str] = None
    code: str = ""
    name: str
    qty: int
    price: Decimal

    @model_validator(mode="before")
    @classmethod
    def legacy_item_id(cls, data: Any) -> Any:
        # Older documents copied the whole inventory row, keeping its id under "id"
        if isinstance(data, dict) and "id" in data and "itemId" not in data and "item_id" not in data:
            data = dict(data)
            data["itemId"] = data.pop("id")
        return data


class AppliedDiscount(Record):
    type: DiscountType = DiscountType.FLAT
    value: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")

    @field_validator("type", mode="before")
    @classmethod
    def legacy_currency_type(cls, value: Any) -> Any:
        # Older documents stored flat discounts under the currency code
        return DiscountType.FLAT.value if value == "lkr" else value


class ChequeInfo(Record):
    number: str
    bank: str
    due_date: OptionalDate = None


LEGACY_DISCOUNT_KEYS = ("discountType", "discountValue", "discountAmount")


class Sale(Record):
    id: str
    date: dt.date
    time: dt.time
    customer: CustomerSnapshot
    channel_id: str = MAIN_CHANNEL_ID
    items: List[SaleLine]
    subtotal: Decimal
    discount: AppliedDiscount = Field(default_factory=AppliedDiscount)
    grand_total: Decimal
    payment_method: PaymentMethod
    payment_ref: str = ""
    cheque_details: Optional[ChequeInfo] = None

    @model_validator(mode="before")
    @classmethod
    def legacy_discount_fields(cls, data: Any) -> Any:
        """Older documents kept the discount as top-level discountType/discountValue/discountAmount"""
        if not isinstance(data, dict) or "discount" in data:
            return data
        legacy = {key: data.get(key) for key in LEGACY_DISCOUNT_KEYS if key in data}
        if not legacy:
            return data
        data = {key: value for key, value in data.items() if key not in LEGACY_DISCOUNT_KEYS}
        data["discount"] = {
            "type": legacy.get("discountType") or DiscountType.FLAT.value,
            "value": legacy.get("discountValue") or 0,
            "amount": legacy.get("discountAmount") or 0,
        }
        return data


class Payment(Record):
    id: str
    date: dt.date
    bill_id: str
    amount: Decimal
    method: PaymentMethod
    reference: str = ""
    cheque_details: Optional[ChequeInfo] = None


class CreditBill(Record):
    id: str
    bill_id: str
    customer_id: str
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    due_amount: Decimal
    bill_date: dt.date
    due_date: OptionalDate = None
    payment_history: List[Payment] = Field(default_factory=list)


class Cheque(Record):
    id: str
    bill_id: str
    cheque_number: str
    bank: str
    amount: Decimal
    due_date: OptionalDate = None
    status: ChequeStatus = ChequeStatus.PENDING


class StockReceiptLine(Record):
    item_id: str
    code: str
    name: str
    qty: int


class StockReceipt(Record):
    """Goods received note"""

    id: str
    date: dt.date
    supplier: str
    items: List[StockReceiptLine]


class QuotationLine(Record):
    item_id: str
    code: str
    name: str
    price: Decimal
    qty: int


class Quotation(Record):
    id: str
    date: dt.date
    customer_name: str
    items: List[QuotationLine]
    total: Decimal


COLLECTIONS = (
    "inventory",
    "customers",
    "distribution_channels",
    "sales",
    "grns",
    "quotations",
    "payments",
    "credit_bills",
    "cheques",
)


class PosDocument(Record):
    """The whole ledger, persisted as one JSON object"""

    shop: Shop = Field(default_factory=Shop)
    inventory: List[InventoryItem] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)
    distribution_channels: List[DistributionChannel] = Field(default_factory=default_channels)
    sales: List[Sale] = Field(default_factory=list)
    grns: List[StockReceipt] = Field(default_factory=list)
    quotations: List[Quotation] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    credit_bills: List[CreditBill] = Field(default_factory=list)
    cheques: List[Cheque] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fill_missing_collections(cls, data: Any) -> Any:
        """Documents written by older versions may carry nulls where lists are expected"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name in COLLECTIONS:
            for key in (name, to_camel(name)):
                if key in data and data[key] is None:
                    del data[key]
        if data.get("shop") is None:
            data.pop("shop", None)
        return data

    @model_validator(mode="after")
    def ensure_main_channel(self) -> "PosDocument":
        if not any(channel.id == MAIN_CHANNEL_ID for channel in self.distribution_channels):
            self.distribution_channels.insert(0, default_channels()[0])
        return self
