"""Unit tests for stock receipts and quotations"""

import pytest
from datetime import date
from decimal import Decimal
from pos_ledger.domain.exceptions import EntityNotFoundError, ValidationError
from pos_ledger.domain.models import ReceiptLine


def test_stock_receipt_adds_stock(ledger, store, sku1, sku2):
    receipt = ledger.stock.create_stock_receipt(
        "Ceylon Supplies", date(2024, 3, 10), [ReceiptLine("SKU1", 5), ReceiptLine("SKU2", 6)]
    )

    assert receipt.id.startswith("GRN-")
    assert store.inventory.get(sku1.id).stock == 15
    assert store.inventory.get(sku2.id).stock == 10
    assert [(line.code, line.qty) for line in receipt.items] == [("SKU1", 5), ("SKU2", 6)]
    assert store.receipts.get(receipt.id).supplier == "Ceylon Supplies"


def test_repeated_codes_merged(ledger, store, sku1):
    receipt = ledger.stock.create_stock_receipt(
        "Ceylon Supplies", date(2024, 3, 10), [ReceiptLine("SKU1", 2), ReceiptLine(" SKU1", 3)]
    )

    assert len(receipt.items) == 1
    assert receipt.items[0].qty == 5
    assert store.inventory.get(sku1.id).stock == 15


def test_unknown_code_rejects_whole_receipt(ledger, store, sku1):
    with pytest.raises(ValidationError, match="not found"):
        ledger.stock.create_stock_receipt(
            "Ceylon Supplies", date(2024, 3, 10), [ReceiptLine("SKU1", 2), ReceiptLine("NOPE", 1)]
        )

    assert store.inventory.get(sku1.id).stock == 10
    assert store.receipts.all() == []


@pytest.mark.parametrize(
    "supplier,received_on,lines",
    [
        ("", date(2024, 3, 10), [ReceiptLine("SKU1", 1)]),
        ("Ceylon Supplies", None, [ReceiptLine("SKU1", 1)]),
        ("Ceylon Supplies", date(2024, 3, 10), []),
        ("Ceylon Supplies", date(2024, 3, 10), [ReceiptLine("SKU1", 0)]),
    ],
)
def test_incomplete_receipt_rejected(ledger, sku1, supplier, received_on, lines):
    with pytest.raises(ValidationError):
        ledger.stock.create_stock_receipt(supplier, received_on, lines)


def test_delete_receipt_keeps_stock(ledger, store, sku1):
    receipt = ledger.stock.create_stock_receipt("Ceylon Supplies", date(2024, 3, 10), [ReceiptLine("SKU1", 5)])

    ledger.stock.delete_stock_receipt(receipt.id)

    assert store.receipts.all() == []
    assert store.inventory.get(sku1.id).stock == 15


def test_quotation_prices_at_current_price_without_touching_stock(ledger, store, sku1, sku2):
    quotation = ledger.stock.create_quotation(
        "Hotel Lakeview", date(2024, 3, 12), [ReceiptLine("SKU1", 3), ReceiptLine("SKU2", 2)]
    )

    assert quotation.id.startswith("Q-")
    assert quotation.total == Decimal("400")
    assert [line.price for line in quotation.items] == [Decimal("100"), Decimal("50")]
    assert store.inventory.get(sku1.id).stock == 10
    assert store.inventory.get(sku2.id).stock == 4


def test_quotation_may_exceed_stock(ledger, sku2):
    quotation = ledger.stock.create_quotation("Hotel Lakeview", date(2024, 3, 12), [ReceiptLine("SKU2", 40)])
    assert quotation.total == Decimal("2000")


def test_quotation_keeps_price_after_item_edit(ledger, store, sku1):
    quotation = ledger.stock.create_quotation("Hotel Lakeview", date(2024, 3, 12), [ReceiptLine("SKU1", 1)])

    with store.transaction():
        store.inventory.get(sku1.id).price = Decimal("175")

    assert store.quotations.get(quotation.id).total == Decimal("100")


def test_delete_quotation(ledger, store, sku1):
    quotation = ledger.stock.create_quotation("Hotel Lakeview", date(2024, 3, 12), [ReceiptLine("SKU1", 1)])

    ledger.stock.delete_quotation(quotation.id)

    assert store.quotations.all() == []
    with pytest.raises(EntityNotFoundError):
        ledger.stock.delete_quotation(quotation.id)
