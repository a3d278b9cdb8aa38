from datetime import datetime
from models.db import db

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"

# Rejected and cancelled bookings are deleted, so every stored row is active.
ACTIVE_STATUSES = (STATUS_PENDING, STATUS_APPROVED)


class Booking(db.Model):
    __tablename__ = "shoutout_bookings"

    id = db.Column(db.Integer, primary_key=True)

    story_id = db.Column(db.String(64), nullable=False, index=True)
    slot_date = db.Column(db.Date, nullable=False, index=True)

    author_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    story_link = db.Column(db.String(500), nullable=False)
    shoutout_code = db.Column(db.Text, nullable=False)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    # status values: pending, approved

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    approved_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        # Hard business-rule: at most one active booking per story/date
        db.UniqueConstraint("story_id", "slot_date", name="uq_booking_story_date_once"),
        # A booking can only sit on an open date, and an open date carrying
        # a booking cannot be closed (deleted) underneath it
        db.ForeignKeyConstraint(
            ["story_id", "slot_date"],
            ["shoutout_availability.story_id", "shoutout_availability.slot_date"],
            name="fk_booking_open_slot",
        ),
    )
