"""Ledger factory - wires the store and every operation component together"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pos_ledger.config import Settings, settings as default_settings
from pos_ledger.infrastructure.observability.logging import setup_logging
from pos_ledger.infrastructure.storage.store import EntityStore
from pos_ledger.services.catalog import Catalog
from pos_ledger.services.cheques import ChequeTracker
from pos_ledger.services.credit import CreditLedger
from pos_ledger.services.exports import ReportExporter
from pos_ledger.services.reports import ReportAggregator
from pos_ledger.services.stock import StockService
from pos_ledger.services.transactions import TransactionEngine


@dataclass
class PosLedger:
    """Everything the presentation layer calls into"""

    store: EntityStore
    catalog: Catalog
    transactions: TransactionEngine
    credit: CreditLedger
    cheques: ChequeTracker
    stock: StockService
    reports: ReportAggregator
    exports: ReportExporter


def create_ledger(
    data_file: Optional[Path] = None,
    config: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
    configure_logging: bool = True,
) -> PosLedger:
    """Open (or initialise) the ledger document and build the components around it"""
    config = config or default_settings

    if configure_logging:
        setup_logging(config.log_level, config.service_name)

    store = EntityStore.open(data_file or config.data_file, max_retries=config.persist_max_retries)

    return PosLedger(
        store=store,
        catalog=Catalog(store),
        transactions=TransactionEngine(store, clock=clock),
        credit=CreditLedger(store, clock=clock),
        cheques=ChequeTracker(store, strict=config.strict_cheque_transitions),
        stock=StockService(store),
        reports=ReportAggregator(store),
        exports=ReportExporter(store),
    )
