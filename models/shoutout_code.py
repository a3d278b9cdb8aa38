from datetime import datetime
from models.db import db


class ShoutoutCode(db.Model):
    """Admin's own shoutout snippet, mailed to guests on approval."""

    __tablename__ = "shoutout_codes"

    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String(120), nullable=False)
    code = db.Column(db.Text, nullable=False)
    story_id = db.Column(db.String(64), nullable=True, index=True)  # NULL applies to every story

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
