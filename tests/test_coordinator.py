"""
Tests for ReservationCoordinator: the slot state machine and its guards.
"""

import random
from datetime import date

import pytest
from sqlalchemy import func

from models import db
from models.booking import Booking, STATUS_APPROVED, STATUS_PENDING
from services.booking_ledger import BookingLedger, DATE_NOT_OPEN, DATE_TAKEN
from services.errors import Conflict, InvalidState, NotFound, ReservationError, ValidationError
from services.view_projector import ViewProjector, SLOT_OPEN, SLOT_PENDING, SLOT_BOOKED, SLOT_CLOSED

S1 = "S1"
DAY = date(2025, 6, 1)


def _guest_state(story_id, day):
    for row in ViewProjector().guest_calendar(story_id):
        if row["dateStr"] == day.isoformat():
            return row["state"]
    return "closed"


def _slot_state(story_id, day):
    views = ViewProjector().slot_states(story_id, day, day)
    return views[0].state


class TestRequestBooking:
    """Tests for guest requests."""

    def test_request_on_open_date_is_pending(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())

        rows = BookingLedger().list_by_story(S1)
        assert len(rows) == 1
        assert rows[0].id == booking.id
        assert rows[0].slot_date == DAY
        assert rows[0].status == STATUS_PENDING

    def test_request_on_closed_date_conflicts(self, coordinator, guest):
        with pytest.raises(Conflict) as exc:
            coordinator.request_booking(S1, DAY, guest())
        assert exc.value.message == DATE_NOT_OPEN

    def test_second_request_conflicts(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        coordinator.request_booking(S1, DAY, guest())

        with pytest.raises(Conflict) as exc:
            coordinator.request_booking(S1, DAY, guest(author_name="Someone Else"))
        assert exc.value.message == DATE_TAKEN
        assert Booking.query.count() == 1

    def test_retry_after_success_conflicts(self, coordinator, guest):
        """A client resubmitting an accepted request must not double-book."""
        coordinator.toggle_availability(S1, DAY, True)
        coordinator.request_booking(S1, DAY, guest())
        with pytest.raises(Conflict):
            coordinator.request_booking(S1, DAY, guest())

    @pytest.mark.parametrize("field,value", [
        ("author_name", ""),
        ("email", ""),
        ("email", "not-an-email"),
        ("story_link", ""),
        ("story_link", "royalroad.com/fiction/1"),
        ("story_link", "ftp://example.com/story"),
        ("shoutout_code", ""),
    ])
    def test_invalid_guest_info(self, coordinator, guest, field, value):
        coordinator.toggle_availability(S1, DAY, True)
        with pytest.raises(ValidationError) as exc:
            coordinator.request_booking(S1, DAY, guest(**{field: value}))
        assert exc.value.details
        assert Booking.query.count() == 0

    def test_validation_runs_before_availability(self, coordinator, guest):
        with pytest.raises(ValidationError):
            coordinator.request_booking(S1, DAY, guest(email="broken"))


class TestApproval:
    """Tests for approve and the notification side effect."""

    def test_scenario_a_request_then_approve(self, coordinator, guest, dispatcher):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())
        assert booking.status == STATUS_PENDING
        assert _guest_state(S1, DAY) == "taken"

        result = coordinator.approve(booking.id)

        assert result.booking.status == STATUS_APPROVED
        assert result.notification.sent is True
        assert result.warning is None
        assert dispatcher.approved == [booking.id]
        assert _guest_state(S1, DAY) == "taken"

    def test_approve_twice_is_invalid_state(self, coordinator, guest, dispatcher):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())
        coordinator.approve(booking.id)

        with pytest.raises(InvalidState):
            coordinator.approve(booking.id)
        assert dispatcher.approved == [booking.id]

    def test_approve_unknown_booking(self, coordinator):
        with pytest.raises(NotFound):
            coordinator.approve(12345)

    def test_dispatch_failure_keeps_approval(self, coordinator, guest, dispatcher):
        dispatcher.error = "SMTP connection refused"
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())

        result = coordinator.approve(booking.id)

        assert result.notification.sent is False
        assert result.warning is not None
        assert result.warning.kind == "upstream_failure"
        assert "SMTP connection refused" in result.warning.message
        assert db.session.get(Booking, booking.id).status == STATUS_APPROVED

    def test_dispatcher_exception_keeps_approval(self, coordinator, guest, dispatcher):
        dispatcher.raise_exc = RuntimeError("mailer exploded")
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())

        result = coordinator.approve(booking.id)

        assert result.warning is not None
        assert result.notification.error == "mailer exploded"
        assert db.session.get(Booking, booking.id).status == STATUS_APPROVED


class TestRejectAndCancel:
    """Tests for freeing a date."""

    def test_scenario_c_reject_frees_date(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())

        coordinator.reject(booking.id)

        assert db.session.get(Booking, booking.id) is None
        assert _guest_state(S1, DAY) == "bookable"

    def test_reject_approved_is_invalid_state(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())
        coordinator.approve(booking.id)

        with pytest.raises(InvalidState):
            coordinator.reject(booking.id)
        assert _slot_state(S1, DAY) == SLOT_BOOKED

    def test_cancel_pending_is_invalid_state(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())

        with pytest.raises(InvalidState):
            coordinator.cancel_approved(booking.id)
        assert _slot_state(S1, DAY) == SLOT_PENDING

    def test_reject_unknown(self, coordinator):
        with pytest.raises(NotFound):
            coordinator.reject(7)

    def test_scenario_e_cancel_then_rebook(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())
        coordinator.approve(booking.id)

        coordinator.cancel_approved(booking.id)
        assert _slot_state(S1, DAY) == SLOT_OPEN

        again = coordinator.request_booking(S1, DAY, guest(author_name="Next Author"))
        assert again.status == STATUS_PENDING
        assert again.author_name == "Next Author"

    def test_withdraw_picks_reject_or_cancel(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        pending = coordinator.request_booking(S1, DAY, guest())
        assert coordinator.withdraw(pending.id).status == STATUS_PENDING

        approved = coordinator.request_booking(S1, DAY, guest())
        coordinator.approve(approved.id)
        assert coordinator.withdraw(approved.id).status == STATUS_APPROVED
        assert _slot_state(S1, DAY) == SLOT_OPEN


class TestToggleAvailability:
    """Tests for the open/close transitions."""

    def test_closed_open_closed(self, coordinator):
        assert _slot_state(S1, DAY) == SLOT_CLOSED
        assert coordinator.toggle_availability(S1, DAY, True) is True
        assert _slot_state(S1, DAY) == SLOT_OPEN
        assert coordinator.toggle_availability(S1, DAY, False) is True
        assert _slot_state(S1, DAY) == SLOT_CLOSED

    def test_scenario_d_close_while_pending(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        coordinator.request_booking(S1, DAY, guest())

        with pytest.raises(InvalidState):
            coordinator.toggle_availability(S1, DAY, False)
        assert _slot_state(S1, DAY) == SLOT_PENDING

    def test_close_while_booked(self, coordinator, guest):
        coordinator.toggle_availability(S1, DAY, True)
        booking = coordinator.request_booking(S1, DAY, guest())
        coordinator.approve(booking.id)

        with pytest.raises(InvalidState):
            coordinator.toggle_availability(S1, DAY, False)
        assert _slot_state(S1, DAY) == SLOT_BOOKED


def test_at_most_one_active_booking_under_random_operations(coordinator, guest):
    """Drive random operations over a few dates and check the invariant after each."""
    rng = random.Random(20250601)
    days = [date(2025, 6, d) for d in (1, 2, 3)]
    stories = ["S1", "S2"]

    for _ in range(200):
        story_id = rng.choice(stories)
        day = rng.choice(days)
        op = rng.choice(["open", "close", "request", "approve", "reject", "cancel"])
        booking = BookingLedger().active_for(story_id, day)
        try:
            if op == "open":
                coordinator.toggle_availability(story_id, day, True)
            elif op == "close":
                coordinator.toggle_availability(story_id, day, False)
            elif op == "request":
                coordinator.request_booking(story_id, day, guest())
            elif booking is not None and op == "approve":
                coordinator.approve(booking.id)
            elif booking is not None and op == "reject":
                coordinator.reject(booking.id)
            elif booking is not None and op == "cancel":
                coordinator.cancel_approved(booking.id)
        except ReservationError:
            pass

        counts = (
            db.session.query(func.count(Booking.id))
            .filter(Booking.status.in_((STATUS_PENDING, STATUS_APPROVED)))
            .group_by(Booking.story_id, Booking.slot_date)
            .all()
        )
        assert all(c <= 1 for (c,) in counts)
