"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``TripBooking``: enforces valid lifecycle transitions
  (REQUESTED -> ACCEPTED -> COMPLETED, REQUESTED -> CANCELLED).
- Accounts are polymorphic over ``Role``; identity is the case-folded
  username, never object identity.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional

from .enums import BOOKING_TRANSITIONS, BookingStatus, Role


class InvalidStateTransition(Exception):
    """Raised when a booking status change violates the state machine."""


def username_key(username: str) -> str:
    return username.casefold()


def _short_booking_id() -> str:
    return uuid.uuid4().hex[:8].upper()


# ── Accounts ──────────────────────────────────────────────────────────


@dataclass
class Account:
    role: ClassVar[Role]

    username: str = ""
    password: str = ""

    @property
    def key(self) -> str:
        return username_key(self.username)

    def same_account(self, other: Optional[Account]) -> bool:
        return other is not None and self.role == other.role and self.key == other.key


@dataclass
class Operator(Account):
    role: ClassVar[Role] = Role.OPERATOR


@dataclass
class Passenger(Account):
    role: ClassVar[Role] = Role.PASSENGER


@dataclass
class Driver(Account):
    role: ClassVar[Role] = Role.DRIVER

    plate_number: str = "N/A"
    wallet_balance: float = 0.0
    rating_sum: float = 0.0
    rating_count: int = 0
    is_online: bool = True

    @property
    def average_rating(self) -> float:
        if self.rating_count == 0:
            return 0.0
        return round(self.rating_sum / self.rating_count, 1)

    @property
    def rating_display(self) -> str:
        return f"{self.average_rating}★ ({self.rating_count})"

    def credit(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("Wallet credits must be non-negative")
        self.wallet_balance = round(self.wallet_balance + amount, 2)

    def add_rating(self, stars: int) -> None:
        self.rating_sum += stars
        self.rating_count += 1


ACCOUNT_TYPES: dict[Role, type[Account]] = {
    Role.OPERATOR: Operator,
    Role.DRIVER: Driver,
    Role.PASSENGER: Passenger,
}


# ── Bookings ──────────────────────────────────────────────────────────


@dataclass
class TripBooking:
    passenger: Passenger
    destination: str
    booking_id: str = field(default_factory=_short_booking_id)
    requested_at: datetime = field(default_factory=datetime.now)
    status: BookingStatus = BookingStatus.REQUESTED
    driver: Optional[Driver] = None
    final_fare: Optional[float] = None

    @property
    def is_accepted(self) -> bool:
        return self.status in (BookingStatus.ACCEPTED, BookingStatus.COMPLETED)

    @property
    def is_completed(self) -> bool:
        return self.status == BookingStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    def transition_to(self, new_status: BookingStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = BOOKING_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    def assign(self, driver: Driver, fare: float) -> None:
        """Claim the booking for *driver* and freeze the fare."""
        self.transition_to(BookingStatus.ACCEPTED)
        self.driver = driver
        self.final_fare = fare


# ── Receipts ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Receipt:
    timestamp: datetime
    driver_name: str
    plate_number: str
    passenger_name: str
    destination: str
    total_fare: float
    commission: float
    driver_earnings: float
    transaction_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def split(
        cls,
        *,
        driver: Driver,
        passenger: Passenger,
        destination: str,
        fare: float,
        commission_rate: float,
        timestamp: Optional[datetime] = None,
    ) -> Receipt:
        commission = round(fare * commission_rate, 2)
        return cls(
            timestamp=timestamp or datetime.now(),
            driver_name=driver.username,
            plate_number=driver.plate_number,
            passenger_name=passenger.username,
            destination=destination,
            total_fare=fare,
            commission=commission,
            driver_earnings=round(fare - commission, 2),
        )
