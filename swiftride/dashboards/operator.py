"""
Operator (admin) dashboard
==========================

* Driver roster with wallet, rating and live ON TRIP / AVAILABLE status
* Revenue reports (daily / monthly)
* Surge control
* Driver registration and deletion
"""

from __future__ import annotations

import logging

from swiftride.app import Marketplace
from swiftride.dashboards.schemas import DriverRow, Notice, ReportView
from swiftride.domain import reporting
from swiftride.domain.entities import Operator
from swiftride.domain.enums import Granularity, Role
from swiftride.domain.errors import InvalidSurgeError, MarketplaceError

logger = logging.getLogger(__name__)


class OperatorDashboard:
    def __init__(self, market: Marketplace, operator: Operator):
        self.market = market
        self.operator = operator

    def surge_status(self) -> str:
        pricing = self.market.pricing
        if pricing.surge_active:
            return f"{pricing.surge_multiplier}x (HIGH DEMAND)"
        return f"Normal ({pricing.surge_multiplier}x)"

    def drivers(self) -> list[DriverRow]:
        registry = self.market.registry
        return [
            DriverRow(
                username=d.username,
                plate_number=d.plate_number,
                rating=d.rating_display,
                busy=registry.is_busy(d),
                wallet_balance=d.wallet_balance,
                average_rating=d.average_rating,
            )
            for d in self.market.accounts.drivers()
        ]

    def revenue(self, granularity: Granularity | str = Granularity.DAILY) -> ReportView | Notice:
        report = reporting.revenue(self.market.receipts.read(), granularity)
        if not report.periods:
            return Notice.warning("No data available.")
        return ReportView.from_report(report)

    def set_surge(self, value: float) -> Notice:
        try:
            self.market.pricing.set_surge(value)
        except InvalidSurgeError as exc:
            return Notice.error(str(exc))
        logger.info("%s set surge to %sx", self.operator.username, value)
        return Notice.success(f"Surge set to {value}x")

    async def register_driver(self, username: str, password: str, plate_number: str) -> Notice:
        if not plate_number.strip():
            return Notice.error("Plate number is required.")
        try:
            await self.market.accounts.register(Role.DRIVER, username, password, plate_number)
        except (MarketplaceError, ValueError) as exc:
            return Notice.error(str(exc))
        return Notice.success(f"Driver {username} registered.")

    async def delete_driver(self, username: str) -> Notice:
        if not await self.market.accounts.delete_driver(username):
            return Notice.error("Driver not found.")
        return Notice.success("Driver deleted.")
