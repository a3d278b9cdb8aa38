from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import or_

from models.booking import Booking
from models.shoutout_code import ShoutoutCode
from utils.emailer import send_email
from utils.settings import get_settings


@dataclass
class DispatchResult:
    sent: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"sent": self.sent, "error": self.error}


def codes_for_story(story_id: Optional[str]) -> List[ShoutoutCode]:
    """Codes scoped to the story plus global ones, oldest first."""
    q = ShoutoutCode.query
    if story_id:
        q = q.filter(or_(ShoutoutCode.story_id == story_id, ShoutoutCode.story_id.is_(None)))
    return q.order_by(ShoutoutCode.created_at.asc(), ShoutoutCode.id.asc()).all()


def render_approval_email(booking: Booking, codes: List[ShoutoutCode], site_name: str):
    day = booking.slot_date.isoformat()
    subject = f"Your shoutout for {day} is confirmed"

    if codes:
        code_lines = "\n\n".join(f"--- {c.label} ---\n{c.code}" for c in codes)
        codes_block = (
            "Please run one of these shoutouts on your story on that date:\n\n"
            f"{code_lines}"
        )
    else:
        codes_block = "The shoutout code to run on your side will follow in a separate email."

    body = (
        f"Hi {booking.author_name},\n\n"
        f"Your shoutout swap request for {day} has been approved. "
        "Your shoutout will run on that date.\n\n"
        f"{codes_block}\n\n"
        f"Your story: {booking.story_link}\n\n"
        f"Thank you,\n{site_name}"
    )
    return subject, body


class NotificationDispatcher:
    """Sends guest-facing emails. Failures are returned, never raised."""

    def send_approval(self, booking: Booking) -> DispatchResult:
        settings = get_settings()
        subject, body = render_approval_email(booking, codes_for_story(booking.story_id), settings.site_name)
        ok, error = send_email(booking.email, subject, body)
        return DispatchResult(sent=ok, error=error)

    def send_test(self, to_email: str) -> DispatchResult:
        settings = get_settings()
        ok, error = send_email(
            to_email,
            f"{settings.site_name}: test email",
            "This is a test message from the shoutout scheduler. SMTP settings work.",
        )
        return DispatchResult(sent=ok, error=error)
