"""Credit bill settlement - installments, due dates and bill removal"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional

from pos_ledger.domain.cheques import require_cheque_details
from pos_ledger.domain.exceptions import InstallmentExceedsDueError, ValidationError
from pos_ledger.domain.models import ChequeDetails, PaymentMethod
from pos_ledger.domain.pricing import to_amount
from pos_ledger.infrastructure.observability.logging import log_deletion, log_installment
from pos_ledger.infrastructure.observability.metrics import installment_counter
from pos_ledger.infrastructure.storage.models import Cheque, CreditBill, Payment
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.guards import rejections
from pos_ledger.services.schemas import record_errors
from pos_ledger.services.transactions import cheque_info, parse_payment_method
from pos_ledger.utils.identifiers import new_id

ZERO = Decimal("0")


class BillStatus(str, Enum):
    PAID = "Paid"
    OVERDUE = "Overdue"
    OUTSTANDING = "Outstanding"


def bill_status(bill: CreditBill, today: date) -> BillStatus:
    """Paid once nothing is due, overdue once the due date has passed"""
    if bill.due_amount <= 0:
        return BillStatus.PAID
    if bill.due_date is not None and bill.due_date < today:
        return BillStatus.OVERDUE
    return BillStatus.OUTSTANDING


class CreditLedger:
    """Applies payments against credit bills and keeps customer balances in step"""

    def __init__(self, store: EntityStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or datetime.now

    def apply_installment(
        self,
        credit_bill_id: str,
        amount: Decimal,
        method: PaymentMethod = PaymentMethod.CASH,
        reference: str = "",
        cheque_details: Optional[ChequeDetails] = None,
    ) -> Payment:
        """
        Apply a partial payment to a credit bill.

        The payment row carries the originating sale's bill id, not the credit
        bill id. Cheque installments open a pending cheque for the installment
        amount only.
        """
        with rejections("apply_installment"):
            bill = self.store.credit_bills.get(credit_bill_id)
            method = parse_payment_method(method)
            if method == PaymentMethod.CREDIT:
                raise ValidationError("Installments cannot be paid on credit")

            amount = to_amount(amount, "payment amount")
            if amount <= 0:
                raise ValidationError("Please enter a valid payment amount")
            if amount > bill.due_amount:
                raise InstallmentExceedsDueError(f"Payment amount exceeds due amount. Due: {bill.due_amount}")

            cheque = require_cheque_details(cheque_details) if method == PaymentMethod.CHEQUE else None

            with record_errors("payment"):
                payment = Payment(
                    id=new_id(),
                    date=self.clock().date(),
                    bill_id=bill.bill_id,
                    amount=amount,
                    method=method,
                    reference=reference or "",
                    cheque_details=cheque_info(cheque) if cheque else None,
                )

        with self.store.transaction():
            # Re-fetch inside the transaction so mutations land on the live document
            bill = self.store.credit_bills.get(credit_bill_id)
            bill.paid_amount += amount
            bill.due_amount -= amount
            bill.payment_history.append(payment)
            self.store.payments.add(payment.model_copy(deep=True))

            customer = self.store.customers.find(bill.customer_id)
            if customer is not None:
                customer.outstanding_credit = max(ZERO, customer.outstanding_credit - amount)

            if cheque is not None:
                self.store.cheques.add(
                    Cheque(
                        id=new_id(),
                        bill_id=bill.bill_id,
                        cheque_number=cheque.number,
                        bank=cheque.bank,
                        amount=amount,
                        due_date=cheque.due_date,
                    )
                )

        installment_counter.labels(method=method.value).inc()
        log_installment(bill.id, bill.bill_id, amount, bill.due_amount)
        return payment

    def set_due_date(self, credit_bill_id: str, due_date: Optional[date]) -> CreditBill:
        """Change when a bill falls due; amounts are untouched"""
        with rejections("set_due_date"):
            self.store.credit_bills.get(credit_bill_id)
        with self.store.transaction():
            bill = self.store.credit_bills.get(credit_bill_id)
            bill.due_date = due_date
        return bill

    def delete_credit_bill(self, credit_bill_id: str) -> CreditBill:
        """
        Remove a credit bill, first releasing whatever is still due on it from
        the customer's outstanding credit (never below zero). The originating
        sale, its payments and any cheques stay in place.
        """
        with rejections("delete_credit_bill"):
            self.store.credit_bills.get(credit_bill_id)
        with self.store.transaction():
            bill = self.store.credit_bills.get(credit_bill_id)
            customer = self.store.customers.find(bill.customer_id)
            if customer is not None:
                customer.outstanding_credit = max(ZERO, customer.outstanding_credit - bill.due_amount)
            self.store.credit_bills.remove(credit_bill_id)

        log_deletion("CreditBill", credit_bill_id)
        return bill

    def bills_for_customer(self, customer_id: str) -> List[CreditBill]:
        return self.store.credit_bills.for_customer(customer_id)

    def status(self, credit_bill_id: str, today: Optional[date] = None) -> BillStatus:
        bill = self.store.credit_bills.get(credit_bill_id)
        return bill_status(bill, today or self.clock().date())
