"""
Driver dashboard
================

Commands a logged-in driver can issue.  The job board is a snapshot:
``accept`` picks from the most recent listing, and the registry decides
whether the pick is still available.
"""

from __future__ import annotations

from swiftride.app import Marketplace
from swiftride.dashboards.schemas import DriverStatus, JobOffer, Notice, ReportView
from swiftride.domain import reporting
from swiftride.domain.entities import Driver, TripBooking
from swiftride.domain.errors import MarketplaceError


class DriverDashboard:
    def __init__(self, market: Marketplace, driver: Driver):
        self.market = market
        self.driver = driver
        self.driver.is_online = True
        self._offers: list[TripBooking] = []

    @property
    def _earnings_share(self) -> float:
        return 1 - self.market.settings.commission_rate

    def status(self) -> DriverStatus:
        return DriverStatus(
            username=self.driver.username,
            plate_number=self.driver.plate_number,
            rating=self.driver.rating_display,
            busy=self.market.registry.is_busy(self.driver),
        )

    def job_board(self) -> list[JobOffer] | Notice:
        registry = self.market.registry
        if not self.driver.is_online:
            return Notice.warning("You must go ONLINE first.")
        if registry.is_busy(self.driver):
            return Notice.warning("Please finish your current trip first.")

        self._offers = list(registry.list_open_jobs())
        if not self._offers:
            return Notice.warning("No passengers currently waiting.")

        offers = []
        for choice, booking in enumerate(self._offers, start=1):
            fare = self.market.fares.calculate_fare(booking.destination)
            offers.append(
                JobOffer(
                    choice=choice,
                    passenger=booking.passenger.username,
                    destination=booking.destination,
                    fare=fare,
                    earnings=round(fare * self._earnings_share, 2),
                )
            )
        return offers

    async def accept(self, choice: int) -> Notice:
        if not 1 <= choice <= len(self._offers):
            return Notice.error("Invalid job selection.")
        booking = self._offers[choice - 1]
        try:
            receipt = await self.market.registry.accept(self.driver, booking)
        except MarketplaceError as exc:
            return Notice.error(str(exc))
        finally:
            self._offers = []
        return Notice.success(f"Trip Accepted! Cash to collect: P{receipt.total_fare:,.2f}.")

    async def complete_trip(self) -> Notice:
        try:
            await self.market.registry.complete(self.driver)
        except MarketplaceError:
            return Notice.warning("You don't have an active trip to complete.")
        return Notice.success("Passenger dropped off. Waiting for rating...")

    def earnings(self) -> ReportView | Notice:
        report = reporting.driver_earnings(self.market.receipts.read(), self.driver.username)
        if not report.periods:
            return Notice.warning("No earnings record found.")
        return ReportView.from_report(report)
