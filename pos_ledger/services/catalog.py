"""Catalog commands - inventory items, customers, channels and shop details"""

from decimal import Decimal
from typing import List, Optional, Union

from pos_ledger.domain.exceptions import DeletionRefusedError, DuplicateCodeError, ValidationError
from pos_ledger.infrastructure.observability.logging import log_deletion
from pos_ledger.infrastructure.storage.models import (
    MAIN_CHANNEL_ID,
    PLACEHOLDER_LOGO,
    Customer,
    DistributionChannel,
    InventoryItem,
    Shop,
)
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.guards import rejections
from pos_ledger.services.schemas import (
    ChannelFields,
    Command,
    Create,
    CustomerFields,
    InventoryItemFields,
    ShopFields,
    Update,
    parse_fields,
)
from pos_ledger.utils.identifiers import new_id


class Catalog:
    """Direct create/update/delete commands for master data"""

    def __init__(self, store: EntityStore):
        self.store = store

    # Inventory

    def handle_item(self, command: Command[InventoryItemFields]) -> InventoryItem:
        """Create or update an inventory item; codes stay unique across the collection"""
        with rejections("save_item"):
            fields = parse_fields(InventoryItemFields, command.fields)

            if isinstance(command, Create):
                if self.store.inventory.code_taken(fields.code):
                    raise DuplicateCodeError(f"Item with code {fields.code!r} already exists")
                with self.store.transaction():
                    return self.store.inventory.add(InventoryItem(id=new_id(), **fields.model_dump()))

            if isinstance(command, Update):
                self.store.inventory.get(command.id)
                if self.store.inventory.code_taken(fields.code, exclude_id=command.id):
                    raise DuplicateCodeError(f"Another item already uses code {fields.code!r}")
                with self.store.transaction():
                    item = self.store.inventory.get(command.id)
                    for name, value in fields.model_dump().items():
                        setattr(item, name, value)
                    return item

            raise ValidationError(f"Unsupported command: {type(command).__name__}")

    def delete_item(self, item_id: str) -> InventoryItem:
        """Historical sales keep their own copy of the item, so nothing else changes"""
        with rejections("delete_item"):
            self.store.inventory.get(item_id)
        with self.store.transaction():
            item = self.store.inventory.remove(item_id)
        log_deletion("InventoryItem", item_id)
        return item

    def find_item_by_code(self, code: str) -> Optional[InventoryItem]:
        return self.store.inventory.find_by_code(code.strip())

    def search_items(self, keyword: str) -> List[InventoryItem]:
        return self.store.inventory.search(keyword)

    # Customers

    def handle_customer(self, command: Command[CustomerFields]) -> Customer:
        """Create or update a customer; outstanding credit is only ever moved by sales and installments"""
        with rejections("save_customer"):
            fields = parse_fields(CustomerFields, command.fields)

            if isinstance(command, Create):
                with self.store.transaction():
                    return self.store.customers.add(
                        Customer(id=new_id(), outstanding_credit=Decimal("0"), **fields.model_dump())
                    )

            if isinstance(command, Update):
                self.store.customers.get(command.id)
                with self.store.transaction():
                    customer = self.store.customers.get(command.id)
                    for name, value in fields.model_dump().items():
                        setattr(customer, name, value)
                    return customer

            raise ValidationError(f"Unsupported command: {type(command).__name__}")

    def delete_customer(self, customer_id: str) -> Customer:
        with rejections("delete_customer"):
            self.store.customers.get(customer_id)
            if self.store.credit_bills.has_outstanding(customer_id):
                raise DeletionRefusedError(
                    "Cannot delete customer with outstanding credit bills. Settle all credit bills first."
                )
        with self.store.transaction():
            customer = self.store.customers.remove(customer_id)
        log_deletion("Customer", customer_id)
        return customer

    # Distribution channels

    def handle_channel(self, command: Command[ChannelFields]) -> DistributionChannel:
        with rejections("save_channel"):
            fields = parse_fields(ChannelFields, command.fields)
            values = fields.model_dump(exclude={"receipt_logo"})

            if isinstance(command, Create):
                with self.store.transaction():
                    return self.store.channels.add(
                        DistributionChannel(
                            id=new_id(),
                            receipt_logo=fields.receipt_logo or PLACEHOLDER_LOGO,
                            **values,
                        )
                    )

            if isinstance(command, Update):
                self.store.channels.get(command.id)
                with self.store.transaction():
                    channel = self.store.channels.get(command.id)
                    for name, value in values.items():
                        setattr(channel, name, value)
                    if fields.receipt_logo:
                        channel.receipt_logo = fields.receipt_logo
                    return channel

            raise ValidationError(f"Unsupported command: {type(command).__name__}")

    def delete_channel(self, channel_id: str) -> DistributionChannel:
        with rejections("delete_channel"):
            if channel_id == MAIN_CHANNEL_ID:
                raise DeletionRefusedError("Cannot delete the main shop channel")
            self.store.channels.get(channel_id)
        with self.store.transaction():
            channel = self.store.channels.remove(channel_id)
        log_deletion("DistributionChannel", channel_id)
        return channel

    # Shop

    def update_shop(self, fields: Union[ShopFields, dict]) -> Shop:
        """Logos are only replaced when a new one is given"""
        with rejections("update_shop"):
            fields = parse_fields(ShopFields, fields)
            with self.store.transaction() as document:
                shop = document.shop
                shop.name = fields.name
                shop.address = fields.address
                shop.tp = fields.tp
                if fields.dashboard_logo:
                    shop.dashboard_logo = fields.dashboard_logo
                if fields.receipt_logo:
                    shop.receipt_logo = fields.receipt_logo
        return shop
