from datetime import datetime
from models.db import db

class AvailabilitySlot(db.Model):
    """A date a story owner has opened for booking. No row means closed."""

    __tablename__ = "shoutout_availability"

    id = db.Column(db.Integer, primary_key=True)

    story_id = db.Column(db.String(64), nullable=False, index=True)
    slot_date = db.Column(db.Date, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        # One row per story/date; also the parent key for bookings
        db.UniqueConstraint("story_id", "slot_date", name="uq_availability_story_date"),
    )
