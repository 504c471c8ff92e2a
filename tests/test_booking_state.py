"""Unit tests for booking state transitions and account entities."""

import pytest

from swiftride.domain.entities import (
    Driver,
    InvalidStateTransition,
    Passenger,
    Receipt,
    TripBooking,
)
from swiftride.domain.enums import BookingStatus


def _booking(status=BookingStatus.REQUESTED) -> TripBooking:
    return TripBooking(passenger=Passenger(username="aiza"), destination="IT Park", status=status)


class TestBookingStateMachine:
    def test_initial_status_is_requested(self):
        booking = _booking()
        assert booking.status == BookingStatus.REQUESTED
        assert not booking.is_accepted
        assert booking.driver is None
        assert booking.final_fare is None

    def test_booking_id_is_short_token(self):
        booking = _booking()
        assert len(booking.booking_id) == 8
        assert booking.booking_id == booking.booking_id.upper()

    # ── Valid transitions ─────────────────────────────────────────

    def test_assign_sets_driver_and_fare(self):
        booking = _booking()
        driver = Driver(username="jun")
        booking.assign(driver, 95.0)
        assert booking.status == BookingStatus.ACCEPTED
        assert booking.is_accepted and not booking.is_completed
        assert booking.driver is driver
        assert booking.final_fare == 95.0

    def test_accepted_to_completed(self):
        booking = _booking(BookingStatus.ACCEPTED)
        booking.transition_to(BookingStatus.COMPLETED)
        assert booking.is_completed
        assert booking.is_accepted

    def test_requested_to_cancelled(self):
        booking = _booking()
        booking.transition_to(BookingStatus.CANCELLED)
        assert booking.is_cancelled

    # ── Invalid transitions ───────────────────────────────────────

    def test_requested_to_completed_fails(self):
        with pytest.raises(InvalidStateTransition):
            _booking().transition_to(BookingStatus.COMPLETED)

    def test_accepted_cannot_be_cancelled(self):
        with pytest.raises(InvalidStateTransition):
            _booking(BookingStatus.ACCEPTED).transition_to(BookingStatus.CANCELLED)

    def test_second_assign_fails(self):
        booking = _booking()
        booking.assign(Driver(username="jun"), 95.0)
        with pytest.raises(InvalidStateTransition):
            booking.assign(Driver(username="marites"), 120.0)
        assert booking.driver.username == "jun"
        assert booking.final_fare == 95.0

    def test_cancelled_is_terminal(self):
        with pytest.raises(InvalidStateTransition):
            _booking(BookingStatus.CANCELLED).transition_to(BookingStatus.ACCEPTED)


class TestDriverAccount:
    def test_average_rating_without_ratings(self):
        assert Driver(username="jun").average_rating == 0.0

    def test_average_rating_rounds_to_one_decimal(self):
        driver = Driver(username="jun")
        for stars in (5, 4, 4):
            driver.add_rating(stars)
        assert driver.average_rating == 4.3
        assert driver.rating_display == "4.3★ (3)"

    def test_credit_rejects_negative(self):
        with pytest.raises(ValueError):
            Driver(username="jun").credit(-1.0)

    def test_identity_is_case_insensitive(self):
        assert Driver(username="Jun").same_account(Driver(username="JUN"))
        assert not Driver(username="jun").same_account(Passenger(username="jun"))
        assert not Driver(username="jun").same_account(None)


class TestReceiptSplit:
    def test_split_is_eighty_twenty(self):
        receipt = Receipt.split(
            driver=Driver(username="jun", plate_number="GAB 1234"),
            passenger=Passenger(username="aiza"),
            destination="IT Park",
            fare=95.0,
            commission_rate=0.20,
        )
        assert receipt.commission == 19.0
        assert receipt.driver_earnings == 76.0
        assert receipt.commission + receipt.driver_earnings == receipt.total_fare
        assert receipt.plate_number == "GAB 1234"
        assert receipt.transaction_id
