"""
Marketplace factory.

* Loads the account ledger and opens the receipt log.
* Wires the fare engine, its surge context and the trip registry.
* One ``Marketplace`` is shared by every dashboard of a session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from swiftride.config import Settings, settings as default_settings
from swiftride.domain.pricing import FareEngine, PricingContext
from swiftride.workers.registry import TripRegistry
from swiftride.infrastructure.ledger import LedgerStore
from swiftride.infrastructure.receipts import ReceiptLog
from swiftride.infrastructure.repositories import AccountRepository


@dataclass
class Marketplace:
    settings: Settings
    accounts: AccountRepository
    receipts: ReceiptLog
    fares: FareEngine
    registry: TripRegistry

    @property
    def pricing(self) -> PricingContext:
        return self.fares.context


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_marketplace(settings: Optional[Settings] = None) -> Marketplace:
    settings = settings or default_settings
    accounts = AccountRepository.load(LedgerStore(settings.users_path))
    receipts = ReceiptLog(settings.receipts_path)
    fares = FareEngine(
        PricingContext(
            settings.default_surge,
            min_surge=settings.min_surge,
            max_surge=settings.max_surge,
        )
    )
    registry = TripRegistry(
        fares, accounts, receipts, commission_rate=settings.commission_rate
    )
    return Marketplace(
        settings=settings,
        accounts=accounts,
        receipts=receipts,
        fares=fares,
        registry=registry,
    )
