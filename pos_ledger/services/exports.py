"""CSV report exports with fixed column headers"""

import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pos_ledger.infrastructure.storage.models import ChequeInfo
from pos_ledger.infrastructure.storage.store import EntityStore

SALES_COLUMNS = [
    "Bill ID", "Date", "Time", "Customer Type", "Customer Name", "Customer TP", "Customer Address",
    "Distribution Channel", "Items", "Subtotal", "Discount Type", "Discount Value", "Discount Amount",
    "Grand Total", "Payment Method", "Payment Reference", "Cheque Number", "Cheque Bank", "Cheque Due Date",
]
INVENTORY_COLUMNS = ["Item Code", "Item Name", "Description", "Unit Price", "Current Stock"]
CREDIT_COLUMNS = [
    "Credit Bill ID", "Original Bill ID", "Customer Name", "Bill Date", "Due Date",
    "Total Amount", "Paid Amount", "Due Amount",
]
RECEIPT_COLUMNS = ["GRN ID", "Date", "Supplier", "Item Code", "Item Name", "Quantity", "Item Price (current)"]
PAYMENT_COLUMNS = [
    "Payment ID", "Date", "Bill ID", "Amount", "Method", "Reference",
    "Cheque Number", "Cheque Bank", "Cheque Due Date",
]


def _render(columns: List[str], rows: Iterable[Dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def _cheque_columns(details: Optional[ChequeInfo]) -> Dict[str, str]:
    return {
        "Cheque Number": details.number if details else "",
        "Cheque Bank": details.bank if details else "",
        "Cheque Due Date": details.due_date.isoformat() if details and details.due_date else "",
    }


class ReportExporter:
    """Builds CSV text for each report type straight from the stored records"""

    def __init__(self, store: EntityStore):
        self.store = store

    def sales_csv(self, start: date, end: date) -> str:
        channels = {channel.id: channel.name for channel in self.store.channels.all()}
        rows = []
        for sale in self.store.sales.between(start, end):
            rows.append(
                {
                    "Bill ID": sale.id,
                    "Date": sale.date.isoformat(),
                    "Time": sale.time.isoformat(),
                    "Customer Type": sale.customer.type.value,
                    "Customer Name": sale.customer.name,
                    "Customer TP": sale.customer.tp,
                    "Customer Address": sale.customer.address,
                    "Distribution Channel": channels.get(sale.channel_id, "N/A"),
                    "Items": "; ".join(f"{line.name}({line.qty} @ {line.price})" for line in sale.items),
                    "Subtotal": sale.subtotal,
                    "Discount Type": sale.discount.type.value,
                    "Discount Value": sale.discount.value,
                    "Discount Amount": sale.discount.amount,
                    "Grand Total": sale.grand_total,
                    "Payment Method": sale.payment_method.value,
                    "Payment Reference": sale.payment_ref,
                    **_cheque_columns(sale.cheque_details),
                }
            )
        return _render(SALES_COLUMNS, rows)

    def inventory_csv(self) -> str:
        rows = [
            {
                "Item Code": item.code,
                "Item Name": item.name,
                "Description": item.description,
                "Unit Price": item.price,
                "Current Stock": item.stock,
            }
            for item in self.store.inventory.all()
        ]
        return _render(INVENTORY_COLUMNS, rows)

    def credit_csv(self, start: date, end: date) -> str:
        customers = {customer.id: customer.name for customer in self.store.customers.all()}
        rows = [
            {
                "Credit Bill ID": bill.id,
                "Original Bill ID": bill.bill_id,
                "Customer Name": customers.get(bill.customer_id, "Unknown Customer"),
                "Bill Date": bill.bill_date.isoformat(),
                "Due Date": bill.due_date.isoformat() if bill.due_date else "",
                "Total Amount": bill.total_amount,
                "Paid Amount": bill.paid_amount,
                "Due Amount": bill.due_amount,
            }
            for bill in self.store.credit_bills.between(start, end, key=lambda bill: bill.bill_date)
        ]
        return _render(CREDIT_COLUMNS, rows)

    def receipts_csv(self, start: date, end: date) -> str:
        prices = {item.id: item.price for item in self.store.inventory.all()}
        rows = [
            {
                "GRN ID": receipt.id,
                "Date": receipt.date.isoformat(),
                "Supplier": receipt.supplier,
                "Item Code": line.code,
                "Item Name": line.name,
                "Quantity": line.qty,
                "Item Price (current)": prices.get(line.item_id, "N/A"),
            }
            for receipt in self.store.receipts.between(start, end)
            for line in receipt.items
        ]
        return _render(RECEIPT_COLUMNS, rows)

    def payments_csv(self, start: date, end: date) -> str:
        rows = [
            {
                "Payment ID": payment.id,
                "Date": payment.date.isoformat(),
                "Bill ID": payment.bill_id,
                "Amount": payment.amount,
                "Method": payment.method.value,
                "Reference": payment.reference,
                **_cheque_columns(payment.cheque_details),
            }
            for payment in self.store.payments.between(start, end)
        ]
        return _render(PAYMENT_COLUMNS, rows)
