"""Sale processing - turns a cart into a sale and its derived records"""

from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from pos_ledger.domain.cheques import require_cheque_details
from pos_ledger.domain.exceptions import (
    BusinessRuleViolation,
    CreditLimitExceededError,
    InsufficientStockError,
    ValidationError,
)
from pos_ledger.domain.models import (
    CartLine,
    ChequeDetails,
    CustomerSelection,
    CustomerType,
    Discount,
    PaymentMethod,
)
from pos_ledger.domain.pricing import price_cart
from pos_ledger.infrastructure.observability.logging import log_deletion, log_sale
from pos_ledger.infrastructure.observability.metrics import record_sale
from pos_ledger.infrastructure.storage.models import (
    MAIN_CHANNEL_ID,
    AppliedDiscount,
    Cheque,
    ChequeInfo,
    CreditBill,
    Customer,
    CustomerSnapshot,
    Payment,
    Sale,
    SaleLine,
)
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.guards import rejections
from pos_ledger.services.schemas import record_errors
from pos_ledger.utils.identifiers import new_document_number, new_id


def parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(f"Unknown payment method: {value!r}")


def cheque_info(details: ChequeDetails) -> ChequeInfo:
    return ChequeInfo(number=details.number, bank=details.bank, due_date=details.due_date)


class TransactionEngine:
    """Validates a checkout and records the sale with all of its side effects"""

    def __init__(self, store: EntityStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or datetime.now

    def process_sale(
        self,
        cart: List[CartLine],
        customer: CustomerSelection,
        channel_id: str = MAIN_CHANNEL_ID,
        discount: Optional[Discount] = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        payment_ref: str = "",
        cheque_details: Optional[ChequeDetails] = None,
    ) -> Sale:
        """
        Record a sale.

        Flow:
        1. Validate cart, stock, discount, channel, customer, credit and cheque
        2. Append the sale with a frozen copy of the cart
        3. Take sold quantities out of stock for lines backed by inventory
        4. Append the originating payment for the grand total
        5. Credit sales open a credit bill and raise the customer's outstanding credit
        6. Cheque sales open a pending cheque record
        7. Persist the document

        Any failure in step 1 leaves the document untouched.
        """
        discount = discount or Discount()

        with rejections("process_sale"):
            method = parse_payment_method(payment_method)
            totals = price_cart(cart, discount)
            self._check_stock(cart)
            self.store.channels.get(channel_id)
            snapshot, account = self._resolve_customer(customer)

            if method == PaymentMethod.CREDIT:
                self._check_credit(account, totals.grand_total)

            cheque = require_cheque_details(cheque_details) if method == PaymentMethod.CHEQUE else None

            now = self.clock()
            sale_date = now.date()
            with record_errors("sale"):
                sale = Sale(
                    id=new_document_number("BILL"),
                    date=sale_date,
                    time=now.time().replace(microsecond=0),
                    customer=snapshot,
                    channel_id=channel_id,
                    items=[
                        SaleLine(
                            item_id=line.item_id,
                            code=line.code or "",
                            name=line.name,
                            qty=line.qty,
                            price=Decimal(str(line.price)),
                        )
                        for line in cart
                    ],
                    subtotal=totals.subtotal,
                    discount=AppliedDiscount(
                        type=discount.type,
                        value=Decimal(str(discount.value)),
                        amount=totals.discount_amount,
                    ),
                    grand_total=totals.grand_total,
                    payment_method=method,
                    payment_ref=payment_ref or "",
                    cheque_details=cheque_info(cheque) if cheque else None,
                )

        with self.store.transaction():
            self.store.sales.add(sale)

            for line in cart:
                item = self.store.inventory.find(line.item_id) if line.item_id else None
                if item is not None:
                    item.stock -= line.qty

            self.store.payments.add(
                Payment(
                    id=new_id(),
                    date=sale_date,
                    bill_id=sale.id,
                    amount=totals.grand_total,
                    method=method,
                    reference=sale.payment_ref,
                    cheque_details=cheque_info(cheque) if cheque else None,
                )
            )

            if method == PaymentMethod.CREDIT:
                self.store.credit_bills.add(
                    CreditBill(
                        id=new_id(),
                        bill_id=sale.id,
                        customer_id=account.id,
                        total_amount=totals.grand_total,
                        paid_amount=Decimal("0"),
                        due_amount=totals.grand_total,
                        bill_date=sale_date,
                    )
                )
                account.outstanding_credit += totals.grand_total

            if cheque is not None:
                self.store.cheques.add(
                    Cheque(
                        id=new_id(),
                        bill_id=sale.id,
                        cheque_number=cheque.number,
                        bank=cheque.bank,
                        amount=totals.grand_total,
                        due_date=cheque.due_date,
                    )
                )

        record_sale(method.value, totals.grand_total)
        log_sale(sale.id, method.value, totals.grand_total, len(cart))
        return sale

    def _check_stock(self, cart: List[CartLine]) -> None:
        """Lines backed by inventory must not sell more than is on hand; manual lines are unlimited"""
        requested: Counter = Counter()
        for line in cart:
            if line.item_id:
                requested[line.item_id] += line.qty

        for item_id, qty in requested.items():
            item = self.store.inventory.find(item_id)
            if item is not None and qty > item.stock:
                raise InsufficientStockError(f"Not enough stock for {item.name}. Available: {item.stock}")

    def _resolve_customer(self, selection: CustomerSelection) -> Tuple[CustomerSnapshot, Optional[Customer]]:
        if selection.type == CustomerType.REGISTERED:
            if not selection.customer_id:
                raise ValidationError("Please select a registered customer")
            account = self.store.customers.get(selection.customer_id)
            snapshot = CustomerSnapshot(
                type=CustomerType.REGISTERED,
                id=account.id,
                name=account.name,
                address=account.address,
                tp=account.tp,
            )
            return snapshot, account

        with record_errors("walking customer"):
            snapshot = CustomerSnapshot(
                type=CustomerType.WALKING,
                id=new_id(),
                name=selection.name or "Walking Customer",
                address=selection.address or "",
                tp=selection.tp or "",
            )
        return snapshot, None

    def _check_credit(self, account: Optional[Customer], grand_total: Decimal) -> None:
        if account is None:
            raise BusinessRuleViolation("Credit billing is only available for registered customers")
        if account.outstanding_credit + grand_total > account.credit_limit:
            raise CreditLimitExceededError(
                f"Credit limit exceeded for {account.name}. "
                f"Outstanding: {account.outstanding_credit}, Limit: {account.credit_limit}"
            )

    def delete_sale(self, sale_id: str) -> Sale:
        """Remove a sale row. Stock, payments, credit bills and cheques are left as they are."""
        with rejections("delete_sale"):
            self.store.sales.get(sale_id)
        with self.store.transaction():
            sale = self.store.sales.remove(sale_id)
        log_deletion("Sale", sale_id)
        return sale

    def delete_payment(self, payment_id: str) -> Payment:
        """Remove a payment row without touching the bill or credit balances it settled"""
        with rejections("delete_payment"):
            self.store.payments.get(payment_id)
        with self.store.transaction():
            payment = self.store.payments.remove(payment_id)
        log_deletion("Payment", payment_id)
        return payment
