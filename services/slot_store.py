from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from models import db
from models.slot import AvailabilitySlot
from models.booking import Booking, ACTIVE_STATUSES
from services.errors import InvalidState

CLOSE_BLOCKED_MESSAGE = "Date has an active booking; reject or cancel it before closing"


class SlotStore:
    """Per-story set of dates open for booking. Absence of a row means closed.

    Methods flush but never commit; the caller owns the transaction.
    """

    def set_availability(self, story_id: str, day: date, is_open: bool) -> bool:
        """Open or close a date. Returns True when the stored state changed.

        Opening is an idempotent upsert. Closing a date that carries an
        active booking raises InvalidState; the foreign key from bookings
        enforces the same rule if a booking lands between check and delete.
        """
        if is_open:
            if self.is_open(story_id, day):
                return False
            db.session.add(AvailabilitySlot(story_id=story_id, slot_date=day))
            try:
                db.session.flush()
            except IntegrityError:
                # Another handler opened it first; the date is open either way
                db.session.rollback()
                return False
            return True

        active = (
            Booking.query
            .filter_by(story_id=story_id, slot_date=day)
            .filter(Booking.status.in_(ACTIVE_STATUSES))
            .first()
        )
        if active is not None:
            raise InvalidState(CLOSE_BLOCKED_MESSAGE, details={"bookingId": active.id, "status": active.status})

        try:
            removed = (
                AvailabilitySlot.query
                .filter_by(story_id=story_id, slot_date=day)
                .delete(synchronize_session=False)
            )
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            raise InvalidState(CLOSE_BLOCKED_MESSAGE)
        return removed > 0

    def is_open(self, story_id: str, day: date) -> bool:
        return (
            AvailabilitySlot.query
            .filter_by(story_id=story_id, slot_date=day)
            .first()
            is not None
        )

    def list_open(self, story_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[date]:
        q = AvailabilitySlot.query.filter_by(story_id=story_id)
        if start is not None:
            q = q.filter(AvailabilitySlot.slot_date >= start)
        if end is not None:
            q = q.filter(AvailabilitySlot.slot_date <= end)
        return [row.slot_date for row in q.order_by(AvailabilitySlot.slot_date.asc()).all()]
