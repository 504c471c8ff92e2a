"""Passenger dashboard: book, follow, cancel and rate trips."""

from __future__ import annotations

from swiftride.app import Marketplace
from swiftride.dashboards.schemas import (
    FarePreview,
    Notice,
    PassengerStatus,
    PendingRating,
    TripHistoryEntry,
)
from swiftride.domain import reporting
from swiftride.domain.entities import Passenger
from swiftride.domain.errors import (
    AlreadyAcceptedError,
    DuplicateBookingError,
    MarketplaceError,
    NoActiveTripError,
)


class PassengerDashboard:
    def __init__(self, market: Marketplace, passenger: Passenger):
        self.market = market
        self.passenger = passenger

    def status(self) -> PassengerStatus:
        trip = self.market.registry.booking_for(self.passenger)
        view = PassengerStatus(username=self.passenger.username, status="Ready to ride")
        if trip is None:
            return view
        view.destination = trip.destination
        if not trip.is_accepted:
            view.status = "Waiting for driver..."
        elif not trip.is_completed:
            view.status = "On trip..."
        else:
            view.status = "Arrived at destination"
        if trip.driver is not None:
            view.driver = trip.driver.username
            view.plate_number = trip.driver.plate_number
        return view

    def destinations(self) -> list[str]:
        return self.market.fares.destinations()

    def quote(self, destination: str) -> FarePreview | Notice:
        if not self.market.fares.knows(destination):
            return Notice.error(f"Unknown destination {destination!r}.")
        q = self.market.fares.quote(destination)
        return FarePreview(
            destination=q.destination,
            fare=q.fare,
            surge_multiplier=q.surge_multiplier,
            surge_active=q.surge_active,
        )

    async def book(self, destination: str) -> Notice:
        try:
            await self.market.registry.request(self.passenger, destination)
        except DuplicateBookingError:
            return Notice.warning("You already have a booking in progress.")
        except MarketplaceError as exc:
            return Notice.error(str(exc))
        return Notice.success("Request sent! Finding drivers...")

    def pending_rating(self) -> PendingRating | None:
        done = self.market.registry.completed_for(self.passenger)
        if done is None:
            return None
        return PendingRating(
            destination=done.destination,
            driver=done.driver.username if done.driver else None,
        )

    async def rate(self, stars: int) -> Notice:
        try:
            done = await self.market.registry.rate(self.passenger, stars)
        except ValueError as exc:
            return Notice.error(str(exc))
        if done is None:
            return Notice.warning("No completed trip to rate yet.")
        return Notice.success("Thank you! Rating submitted.")

    async def cancel(self) -> Notice:
        try:
            await self.market.registry.cancel(self.passenger)
        except NoActiveTripError:
            return Notice.warning("No active booking to cancel.")
        except AlreadyAcceptedError:
            return Notice.error("Cannot cancel. Driver is already on the way!")
        return Notice.success("Booking cancelled.")

    def history(self) -> list[TripHistoryEntry] | Notice:
        receipts = reporting.passenger_history(
            self.market.receipts.read(), self.passenger.username
        )
        if not receipts:
            return Notice.warning("You haven't taken any rides yet.")
        return [
            TripHistoryEntry(
                timestamp=r.timestamp,
                driver=r.driver_name,
                destination=r.destination,
                total_fare=r.total_fare,
            )
            for r in receipts
        ]
