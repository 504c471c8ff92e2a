"""Domain enumerations and state-transition rules."""

import enum


class Role(str, enum.Enum):
    OPERATOR = "Operator"
    DRIVER = "Driver"
    PASSENGER = "Passenger"


class BookingStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# State machine: maps current status -> set of valid next statuses.
# Rated bookings leave the registry instead of entering a new status.
BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.REQUESTED: {BookingStatus.ACCEPTED, BookingStatus.CANCELLED},
    BookingStatus.ACCEPTED: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


class Granularity(str, enum.Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
