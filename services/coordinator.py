from dataclasses import dataclass
from datetime import date
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking, STATUS_PENDING, STATUS_APPROVED
from services.booking_ledger import BookingLedger, BookingDraft, DATE_NOT_OPEN, DATE_TAKEN
from services.errors import Conflict, UpstreamFailure, ValidationError
from services.notifications import DispatchResult
from services.slot_store import SlotStore
from utils.validation import guest_info_errors


@dataclass
class GuestInfo:
    author_name: str
    email: str
    story_link: str
    shoutout_code: str

    @classmethod
    def from_json(cls, data: dict) -> "GuestInfo":
        def _text(key):
            value = data.get(key)
            return value.strip() if isinstance(value, str) else ""

        return cls(
            author_name=_text("authorName"),
            email=_text("email"),
            story_link=_text("storyLink"),
            shoutout_code=_text("shoutoutCode"),
        )


@dataclass
class ApprovalResult:
    booking: Booking
    notification: DispatchResult
    warning: Optional[UpstreamFailure] = None


class ReservationCoordinator:
    """The only entry point that mutates slots and bookings.

    Each public method is one transaction: it commits on success and
    leaves the session rolled back on failure. Approval is the exception
    in that its email goes out after the commit and may fail on its own.

    Per (story, date) the slot moves through
    closed -> open -> pending -> booked, with reject and cancel returning
    it to open. Closing is refused while pending or booked.
    """

    def __init__(self, slots=None, ledger=None, dispatcher=None):
        self.slots = slots or SlotStore()
        self.ledger = ledger or BookingLedger()
        self._dispatcher = dispatcher

    @property
    def dispatcher(self):
        return self._dispatcher or current_app.extensions["notification_dispatcher"]

    def request_booking(self, story_id: str, day: date, guest: GuestInfo) -> Booking:
        errors = guest_info_errors(guest.author_name, guest.email, guest.story_link, guest.shoutout_code)
        if errors:
            raise ValidationError("Invalid booking request", details=errors)

        if not self.slots.is_open(story_id, day):
            raise Conflict(DATE_NOT_OPEN)
        if self.ledger.active_for(story_id, day) is not None:
            raise Conflict(DATE_TAKEN)

        # The check above is advisory; the unique index decides races.
        booking = self.ledger.create(BookingDraft(
            story_id=story_id,
            slot_date=day,
            author_name=guest.author_name,
            email=guest.email,
            story_link=guest.story_link,
            shoutout_code=guest.shoutout_code,
        ))
        self._commit(Conflict(DATE_TAKEN))
        return booking

    def approve(self, booking_id: int) -> ApprovalResult:
        booking = self.ledger.update_status(booking_id, STATUS_APPROVED, expected=STATUS_PENDING)
        db.session.commit()

        notification = self._notify_approval(booking)
        warning = None
        if not notification.sent:
            warning = UpstreamFailure(
                f"Booking approved but the confirmation email was not sent: {notification.error}"
            )
        return ApprovalResult(booking=booking, notification=notification, warning=warning)

    def reject(self, booking_id: int) -> Booking:
        removed = self.ledger.delete(booking_id, expected=STATUS_PENDING)
        db.session.commit()
        return removed

    def cancel_approved(self, booking_id: int) -> Booking:
        removed = self.ledger.delete(booking_id, expected=STATUS_APPROVED)
        db.session.commit()
        return removed

    def withdraw(self, booking_id: int) -> Booking:
        """Reject if pending, cancel if approved."""
        booking = self.ledger.get(booking_id)
        if booking.status == STATUS_PENDING:
            return self.reject(booking_id)
        return self.cancel_approved(booking_id)

    def toggle_availability(self, story_id: str, day: date, is_open: bool) -> bool:
        changed = self.slots.set_availability(story_id, day, is_open)
        db.session.commit()
        return changed

    def _notify_approval(self, booking: Booking) -> DispatchResult:
        try:
            result = self.dispatcher.send_approval(booking)
        except Exception as exc:  # dispatch must not undo the committed approval
            current_app.logger.exception("Approval email for booking %s raised", booking.id)
            return DispatchResult(sent=False, error=str(exc))

        if not result.sent:
            current_app.logger.warning("Approval email for booking %s not sent: %s", booking.id, result.error)
        return result

    def _commit(self, on_integrity_error):
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise on_integrity_error
