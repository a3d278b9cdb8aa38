from flask import Blueprint, request, jsonify

from security.rbac import require_admin
from services.coordinator import ReservationCoordinator
from services.errors import InvalidState, ValidationError
from services.slot_store import SlotStore
from services.view_projector import ViewProjector
from utils.audit import log_event
from utils.settings import get_settings
from utils.validation import require_date, require_json_object, require_story_id

availability_bp = Blueprint("availability", __name__)


def _optional_range():
    start_raw = request.args.get("start")
    end_raw = request.args.get("end")
    start = require_date(start_raw, "start") if start_raw else None
    end = require_date(end_raw, "end") if end_raw else None
    return start, end


# ---------- GUESTS: open dates for a story ----------
@availability_bp.get("/availability")
def list_availability():
    story_id = require_story_id(request.args.get("storyId"))
    days = SlotStore().list_open(story_id)
    return jsonify([d.isoformat() for d in days]), 200


# ---------- ADMIN: open / close a date ----------
@availability_bp.post("/availability")
@require_admin
def set_availability():
    data = require_json_object(request.get_json(silent=True))
    story_id = require_story_id(data.get("storyId"))
    day = require_date(data.get("dateStr"))
    is_available = data.get("isAvailable")
    if not isinstance(is_available, bool):
        raise ValidationError("isAvailable must be true or false")

    try:
        changed = ReservationCoordinator().toggle_availability(story_id, day, is_available)
    except InvalidState:
        log_event(
            "AVAILABILITY_CLOSE_BLOCKED",
            actor="admin",
            entity="availability",
            entity_id=f"{story_id}:{day.isoformat()}",
        )
        raise

    log_event(
        "AVAILABILITY_OPEN" if is_available else "AVAILABILITY_CLOSE",
        actor="admin",
        entity="availability",
        entity_id=f"{story_id}:{day.isoformat()}",
        metadata={"changed": changed},
    )
    return jsonify(success=True, storyId=story_id, dateStr=day.isoformat(),
                   isAvailable=is_available, changed=changed), 200


# ---------- GUESTS: calendar view ----------
@availability_bp.get("/calendar")
def guest_calendar():
    story_id = require_story_id(request.args.get("storyId"))
    start, end = _optional_range()
    days = ViewProjector().guest_calendar(story_id, start, end)
    return jsonify(storyId=story_id, days=days), 200


# ---------- GUESTS: scheduler settings ----------
@availability_bp.get("/config")
def public_config():
    return jsonify(get_settings().public()), 200
