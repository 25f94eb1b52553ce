"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from pos_ledger.app import PosLedger, create_ledger
from pos_ledger.domain.models import CartLine
from pos_ledger.infrastructure.storage.models import Customer, InventoryItem
from pos_ledger.infrastructure.storage.store import EntityStore

FIXED_NOW = datetime(2024, 3, 15, 10, 30, 45, 123456)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "pos_data.json"


@pytest.fixture
def clock():
    """Clock pinned to a known moment so sale dates are predictable"""
    return lambda: FIXED_NOW


@pytest.fixture
def ledger(data_file: Path, clock) -> PosLedger:
    """Fresh ledger over an empty document in a temp directory"""
    return create_ledger(data_file=data_file, clock=clock, configure_logging=False)


@pytest.fixture
def store(ledger: PosLedger) -> EntityStore:
    return ledger.store


@pytest.fixture
def sku1(store: EntityStore) -> InventoryItem:
    """SKU1: price 100, stock 10"""
    with store.transaction():
        return store.inventory.add(
            InventoryItem(id="item-sku1", code="SKU1", name="Widget", price=Decimal("100"), stock=10, threshold=2)
        )


@pytest.fixture
def sku2(store: EntityStore) -> InventoryItem:
    with store.transaction():
        return store.inventory.add(
            InventoryItem(id="item-sku2", code="SKU2", name="Gadget", price=Decimal("50"), stock=4)
        )


@pytest.fixture
def customer(store: EntityStore) -> Customer:
    """Registered customer: limit 1000, outstanding 800"""
    with store.transaction():
        return store.customers.add(
            Customer(
                id="cust-1",
                name="Nimal Perera",
                address="12 Galle Road",
                tp="077-0000001",
                credit_limit=Decimal("1000"),
                outstanding_credit=Decimal("800"),
            )
        )


@pytest.fixture
def fresh_customer(store: EntityStore) -> Customer:
    """Registered customer: limit 1000, nothing outstanding"""
    with store.transaction():
        return store.customers.add(
            Customer(id="cust-2", name="Kamala Silva", credit_limit=Decimal("1000"))
        )


def cart_line(item: InventoryItem, qty: int) -> CartLine:
    return CartLine(item_id=item.id, code=item.code, name=item.name, price=item.price, qty=qty)


@pytest.fixture
def line_for():
    return cart_line


@pytest.fixture
def sale_day() -> date:
    return FIXED_NOW.date()
