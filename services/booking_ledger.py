from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from models import db
from models.slot import AvailabilitySlot
from models.booking import Booking, STATUS_PENDING, STATUS_APPROVED, ACTIVE_STATUSES
from services.errors import Conflict, InvalidState, NotFound, ValidationError

DATE_NOT_OPEN = "date not open"
DATE_TAKEN = "date already requested/booked"


@dataclass
class BookingDraft:
    story_id: str
    slot_date: date
    author_name: str
    email: str
    story_link: str
    shoutout_code: str


class BookingLedger:
    """Booking rows keyed by (story, date).

    Uniqueness of the active booking per date lives in the database
    (uq_booking_story_date_once); this class translates constraint
    failures into Conflict. Status changes are conditional statements
    so two admins acting on one booking cannot both win.
    """

    def create(self, draft: BookingDraft) -> Booking:
        booking = Booking(
            story_id=draft.story_id,
            slot_date=draft.slot_date,
            author_name=draft.author_name,
            email=draft.email,
            story_link=draft.story_link,
            shoutout_code=draft.shoutout_code,
            status=STATUS_PENDING,
            created_at=datetime.utcnow(),
        )
        db.session.add(booking)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            # Unique index (already taken) or FK to availability (closed)
            still_open = (
                AvailabilitySlot.query
                .filter_by(story_id=draft.story_id, slot_date=draft.slot_date)
                .first()
                is not None
            )
            raise Conflict(DATE_TAKEN if still_open else DATE_NOT_OPEN)
        return booking

    def find(self, booking_id: int) -> Optional[Booking]:
        return db.session.get(Booking, booking_id)

    def get(self, booking_id: int) -> Booking:
        booking = self.find(booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    def active_for(self, story_id: str, day: date) -> Optional[Booking]:
        return (
            Booking.query
            .filter_by(story_id=story_id, slot_date=day)
            .filter(Booking.status.in_(ACTIVE_STATUSES))
            .first()
        )

    def update_status(self, booking_id: int, status: str, expected: Optional[str] = None) -> Booking:
        if status not in ACTIVE_STATUSES:
            raise ValidationError(f"Unknown booking status: {status}")

        values = {"status": status}
        if status == STATUS_APPROVED:
            values["approved_at"] = datetime.utcnow()
        elif status == STATUS_PENDING:
            values["approved_at"] = None

        q = Booking.query.filter_by(id=booking_id)
        if expected is not None:
            q = q.filter_by(status=expected)
        updated = q.update(values, synchronize_session=False)

        if not updated:
            self._raise_missed(booking_id, expected)
        return db.session.get(Booking, booking_id, populate_existing=True)

    def delete(self, booking_id: int, expected: Optional[str] = None) -> Booking:
        """Delete a booking, freeing its date. Returns the removed (detached) row."""
        booking = self.get(booking_id)
        if expected is not None and booking.status != expected:
            raise InvalidState(f"Booking is {booking.status}, expected {expected}")

        q = Booking.query.filter_by(id=booking_id)
        if expected is not None:
            q = q.filter_by(status=expected)
        deleted = q.delete(synchronize_session=False)

        if not deleted:
            db.session.expire(booking)
            self._raise_missed(booking_id, expected)
        db.session.expunge(booking)
        return booking

    def list_by_story(
        self,
        story_id: str,
        status: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Booking]:
        q = Booking.query.filter_by(story_id=story_id)
        if status:
            q = q.filter_by(status=status)
        if start is not None:
            q = q.filter(Booking.slot_date >= start)
        if end is not None:
            q = q.filter(Booking.slot_date <= end)
        return q.order_by(Booking.slot_date.asc(), Booking.created_at.asc()).all()

    def list_recent(self, status: Optional[str] = None, limit: int = 200) -> List[Booking]:
        q = Booking.query
        if status:
            q = q.filter_by(status=status)
        return q.order_by(Booking.created_at.desc()).limit(limit).all()

    def _raise_missed(self, booking_id: int, expected: Optional[str]):
        current = db.session.get(Booking, booking_id, populate_existing=True)
        if current is None:
            raise NotFound("Booking not found")
        raise InvalidState(f"Booking is {current.status}, expected {expected}")
