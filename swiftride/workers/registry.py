"""
Trip Registry -- the matching / lifecycle engine
================================================

Lifecycle per booking::

    REQUESTED --accept--> ACCEPTED --complete--> COMPLETED --rate--> (removed)
        \\--cancel--> CANCELLED (removed)

Rules
-----
* A passenger has at most one booking in the registry at a time; a
  completed booking must be rated before the passenger can book again.
* A driver is *busy* while a booking names them and is not completed.
  Busy-ness is recomputed from the bookings on every call; nothing is
  cached on the driver.
* Jobs are offered in insertion order with no reservation.  The first
  driver whose ``accept`` runs wins; every later attempt on the same
  booking raises ``AlreadyAcceptedError``.
* The fare is frozen at acceptance.  The driver is credited their share
  immediately and a receipt is appended; the registry keeps no history
  of its own.

Concurrency
-----------
Commands are serialised with keyed asyncio locks: ``accept`` holds the
booking and the driver, ``complete`` the driver, ``request`` / ``cancel``
/ ``rate`` the passenger.  Persistence is awaited inside the critical
section, so the in-memory change and its write are observed together.

Complexity: every look-up is an O(n) scan of the active bookings.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from swiftride.domain.entities import Driver, Passenger, Receipt, TripBooking
from swiftride.domain.enums import BookingStatus
from swiftride.domain.errors import (
    AlreadyAcceptedError,
    DriverBusyError,
    DuplicateBookingError,
    NoActiveTripError,
    PersistenceError,
    UnknownDestinationError,
)
from swiftride.domain.pricing import FareEngine
from swiftride.infrastructure.locks import KeyedLock
from swiftride.infrastructure.receipts import ReceiptLog
from swiftride.infrastructure.repositories import AccountRepository

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class TripRegistry:
    def __init__(
        self,
        fares: FareEngine,
        accounts: AccountRepository,
        receipts: ReceiptLog,
        commission_rate: float = 0.20,
        locks: Optional[KeyedLock] = None,
    ):
        self.fares = fares
        self.accounts = accounts
        self.receipts = receipts
        self.commission_rate = commission_rate
        self._locks = locks or KeyedLock()
        self._bookings: list[TripBooking] = []

    # ── Queries ───────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._bookings)

    def list_open_jobs(self) -> Iterator[TripBooking]:
        """Lazily yield unaccepted bookings, oldest first."""
        for booking in list(self._bookings):
            if not booking.is_accepted:
                yield booking

    def booking_for(self, passenger: Passenger) -> Optional[TripBooking]:
        return next(
            (b for b in self._bookings if b.passenger.same_account(passenger)),
            None,
        )

    def completed_for(self, passenger: Passenger) -> Optional[TripBooking]:
        return next(
            (
                b
                for b in self._bookings
                if b.passenger.same_account(passenger) and b.is_completed
            ),
            None,
        )

    def active_trip_for(self, driver: Driver) -> Optional[TripBooking]:
        return next(
            (
                b
                for b in self._bookings
                if driver.same_account(b.driver) and not b.is_completed
            ),
            None,
        )

    def is_busy(self, driver: Driver) -> bool:
        return self.active_trip_for(driver) is not None

    # ── Commands ──────────────────────────────────────────────────

    async def request(self, passenger: Passenger, destination: str) -> TripBooking:
        async with self._locks.hold(self._passenger_key(passenger)):
            if self.booking_for(passenger) is not None:
                raise DuplicateBookingError(
                    f"{passenger.username} already has a booking in progress"
                )
            name = self.fares.table.canonical(destination)
            if name is None:
                raise UnknownDestinationError(f"No fare for destination {destination!r}")

            booking = TripBooking(passenger=passenger, destination=name)
            self._bookings.append(booking)
            logger.info(
                "Booking %s requested by %s to %s",
                booking.booking_id,
                passenger.username,
                name,
            )
            return booking

    async def accept(self, driver: Driver, booking: TripBooking) -> Receipt:
        driver = self._resolve_driver(driver)
        async with self._locks.hold(
            self._booking_key(booking), self._driver_key(driver)
        ):
            if self.is_busy(driver):
                raise DriverBusyError(f"{driver.username} must finish the current trip first")
            if booking.is_accepted or not self._contains(booking):
                raise AlreadyAcceptedError(
                    f"Booking {booking.booking_id} is no longer available"
                )
            fare = self.fares.calculate_fare(booking.destination)
            if fare <= 0:
                raise UnknownDestinationError(
                    f"Refusing zero fare for destination {booking.destination!r}"
                )

            booking.assign(driver, fare)
            receipt = Receipt.split(
                driver=driver,
                passenger=booking.passenger,
                destination=booking.destination,
                fare=fare,
                commission_rate=self.commission_rate,
            )
            driver.credit(receipt.driver_earnings)
            logger.info(
                "Booking %s accepted by %s at %.2f (earnings %.2f, commission %.2f)",
                booking.booking_id,
                driver.username,
                fare,
                receipt.driver_earnings,
                receipt.commission,
            )

            await self.accounts.persist()
            try:
                await self.receipts.aappend(receipt)
            except PersistenceError:
                logger.exception("Receipt for booking %s was not written", booking.booking_id)
            return receipt

    async def complete(self, driver: Driver) -> TripBooking:
        async with self._locks.hold(self._driver_key(driver)):
            trip = self.active_trip_for(driver)
            if trip is None:
                raise NoActiveTripError(f"{driver.username} has no active trip to complete")
            trip.transition_to(BookingStatus.COMPLETED)
            logger.info("Booking %s completed by %s", trip.booking_id, driver.username)
            return trip

    async def rate(self, passenger: Passenger, rating: int) -> Optional[TripBooking]:
        """
        Rate the driver of the passenger's completed trip and retire it.

        Returns the retired booking, or ``None`` when there is nothing to
        rate yet.
        """
        if (
            not isinstance(rating, int)
            or isinstance(rating, bool)
            or not MIN_RATING <= rating <= MAX_RATING
        ):
            raise ValueError(f"Rating must be a whole number from {MIN_RATING} to {MAX_RATING}")

        async with self._locks.hold(self._passenger_key(passenger)):
            done = self.completed_for(passenger)
            if done is None:
                return None

            if done.driver is not None:
                driver = self._resolve_driver(done.driver)
                driver.add_rating(rating)
                logger.info(
                    "%s rated %s %d stars (now %s)",
                    passenger.username,
                    driver.username,
                    rating,
                    driver.rating_display,
                )
                await self.accounts.persist()
            else:
                logger.warning("Completed booking %s has no driver; rating skipped", done.booking_id)

            self._remove(done)
            return done

    async def cancel(self, passenger: Passenger) -> TripBooking:
        async with self._locks.hold(self._passenger_key(passenger)):
            trip = self.booking_for(passenger)
            if trip is None:
                raise NoActiveTripError(f"{passenger.username} has no booking to cancel")
            async with self._locks.hold(self._booking_key(trip)):
                if trip.is_accepted:
                    raise AlreadyAcceptedError("Cannot cancel. Driver is already on the way!")
                trip.transition_to(BookingStatus.CANCELLED)
                self._remove(trip)
            logger.info("Booking %s cancelled by %s", trip.booking_id, passenger.username)
            return trip

    # ── Internals ─────────────────────────────────────────────────

    def _resolve_driver(self, driver: Driver) -> Driver:
        # Mutate the instance the ledger persists, not a stale copy.
        return self.accounts.get_driver(driver.username) or driver

    def _contains(self, booking: TripBooking) -> bool:
        return any(b is booking for b in self._bookings)

    def _remove(self, booking: TripBooking) -> None:
        self._bookings = [b for b in self._bookings if b is not booking]

    def _booking_key(self, booking: TripBooking) -> str:
        return KeyedLock.key("booking", booking.booking_id)

    def _driver_key(self, driver: Driver) -> str:
        return KeyedLock.key("driver", driver.key)

    def _passenger_key(self, passenger: Passenger) -> str:
        return KeyedLock.key("passenger", passenger.key)
