from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional

from models.booking import Booking, STATUS_APPROVED
from services.booking_ledger import BookingLedger
from services.errors import ValidationError
from services.slot_store import SlotStore
from utils.settings import get_settings

SLOT_CLOSED = "closed"
SLOT_OPEN = "open"
SLOT_PENDING = "pending"
SLOT_BOOKED = "booked"

GUEST_BOOKABLE = "bookable"
GUEST_TAKEN = "taken"
GUEST_CLOSED = "closed"

# Guests must not tell a pending request from a confirmed one
_GUEST_STATE = {
    SLOT_CLOSED: GUEST_CLOSED,
    SLOT_OPEN: GUEST_BOOKABLE,
    SLOT_PENDING: GUEST_TAKEN,
    SLOT_BOOKED: GUEST_TAKEN,
}


def booking_to_dict(b: Booking) -> dict:
    return {
        "id": b.id,
        "storyId": b.story_id,
        "dateStr": b.slot_date.isoformat(),
        "authorName": b.author_name,
        "email": b.email,
        "storyLink": b.story_link,
        "shoutoutCode": b.shoutout_code,
        "status": b.status,
        "createdAt": b.created_at.isoformat() if b.created_at else None,
        "approvedAt": b.approved_at.isoformat() if b.approved_at else None,
    }


@dataclass
class DayView:
    day: date
    state: str
    booking: Optional[Booking] = None


class ViewProjector:
    """Read model over SlotStore and BookingLedger. Holds no state.

    Without a range only dates that carry an open slot or a booking are
    listed; with ``start``/``end`` every date in the range is listed.
    """

    def __init__(self, slots=None, ledger=None, max_days: Optional[int] = None):
        self.slots = slots or SlotStore()
        self.ledger = ledger or BookingLedger()
        self._max_days = max_days

    def slot_states(self, story_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[DayView]:
        self._check_range(start, end)

        open_days = set(self.slots.list_open(story_id, start, end))
        bookings: Dict[date, Booking] = {
            b.slot_date: b for b in self.ledger.list_by_story(story_id, start=start, end=end)
        }

        if start is not None:
            days = [start + timedelta(days=i) for i in range((end - start).days + 1)]
        else:
            days = sorted(open_days | set(bookings))

        out = []
        for day in days:
            booking = bookings.get(day)
            if booking is not None:
                state = SLOT_BOOKED if booking.status == STATUS_APPROVED else SLOT_PENDING
            elif day in open_days:
                state = SLOT_OPEN
            else:
                state = SLOT_CLOSED
            out.append(DayView(day=day, state=state, booking=booking))
        return out

    def guest_calendar(self, story_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[dict]:
        return [
            {"dateStr": v.day.isoformat(), "state": _GUEST_STATE[v.state]}
            for v in self.slot_states(story_id, start, end)
        ]

    def admin_calendar(self, story_id: str, start: Optional[date] = None, end: Optional[date] = None) -> dict:
        views = self.slot_states(story_id, start, end)
        pending = [booking_to_dict(v.booking) for v in views if v.state == SLOT_PENDING]
        approved = [booking_to_dict(v.booking) for v in views if v.state == SLOT_BOOKED]
        return {
            "storyId": story_id,
            "days": [
                {
                    "dateStr": v.day.isoformat(),
                    "state": v.state,
                    "booking": booking_to_dict(v.booking) if v.booking is not None else None,
                }
                for v in views
            ],
            "pending": pending,
            "approved": approved,
            "counts": {
                SLOT_OPEN: sum(1 for v in views if v.state == SLOT_OPEN),
                SLOT_PENDING: len(pending),
                SLOT_BOOKED: len(approved),
            },
        }

    def _check_range(self, start: Optional[date], end: Optional[date]):
        if start is None and end is None:
            return
        if start is None or end is None:
            raise ValidationError("start and end must be given together")
        if end < start:
            raise ValidationError("end must not be before start")
        max_days = self._max_days or get_settings().calendar_max_days
        if (end - start).days + 1 > max_days:
            raise ValidationError(f"Range too long; at most {max_days} days")
