from flask import Blueprint, request, jsonify

from models.booking import STATUS_APPROVED, STATUS_PENDING
from security.rbac import require_admin
from services.booking_ledger import BookingLedger
from services.coordinator import GuestInfo, ReservationCoordinator
from services.errors import Conflict, InvalidState, ValidationError
from services.view_projector import booking_to_dict
from utils.audit import log_event
from utils.validation import require_date, require_id, require_json_object, require_story_id

booking_bp = Blueprint("booking", __name__)

STATUS_REJECTED = "rejected"


# ---------- ADMIN: list bookings ----------
@booking_bp.get("/bookings")
@require_admin
def list_bookings():
    story_id = (request.args.get("storyId") or "").strip()
    status = (request.args.get("status") or "").strip().lower() or None
    if status and status not in (STATUS_PENDING, STATUS_APPROVED):
        raise ValidationError("status must be pending or approved")

    ledger = BookingLedger()
    if story_id:
        rows = ledger.list_by_story(require_story_id(story_id), status=status)
    else:
        rows = ledger.list_recent(status=status)
    return jsonify([booking_to_dict(b) for b in rows]), 200


# ---------- GUESTS: request a date (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("/bookings")
def create_booking():
    data = require_json_object(request.get_json(silent=True))
    story_id = require_story_id(data.get("storyId"))
    day = require_date(data.get("dateStr"))
    guest = GuestInfo.from_json(data)

    try:
        booking = ReservationCoordinator().request_booking(story_id, day, guest)
    except Conflict as exc:
        log_event(
            "BOOKING_REQUEST_CONFLICT",
            entity="availability",
            entity_id=f"{story_id}:{day.isoformat()}",
            metadata={"reason": exc.message},
        )
        raise

    log_event(
        "BOOKING_REQUEST",
        entity="booking",
        entity_id=booking.id,
        metadata={"storyId": story_id, "dateStr": day.isoformat()},
    )
    return jsonify(booking_to_dict(booking)), 201


# ---------- ADMIN: approve / reject ----------
@booking_bp.put("/bookings")
@require_admin
def update_booking_status():
    data = require_json_object(request.get_json(silent=True))
    booking_id = require_id(data.get("id"))
    status = (data.get("status") or "").strip().lower() if isinstance(data.get("status"), str) else ""

    coordinator = ReservationCoordinator()

    if status == STATUS_APPROVED:
        result = coordinator.approve(booking_id)
        booking = result.booking
        log_event("BOOKING_APPROVE", actor="admin", entity="booking", entity_id=booking.id)
        log_event(
            "BOOKING_APPROVAL_EMAIL",
            actor="admin",
            entity="booking",
            entity_id=booking.id,
            metadata=result.notification.to_dict(),
        )
        payload = {"booking": booking_to_dict(booking), "emailSent": result.notification.to_dict()}
        if result.warning is not None:
            payload["warning"] = result.warning.message
            payload["warningKind"] = result.warning.kind
        return jsonify(payload), 200

    if status == STATUS_REJECTED:
        removed = coordinator.reject(booking_id)
        log_event(
            "BOOKING_REJECT",
            actor="admin",
            entity="booking",
            entity_id=booking_id,
            metadata={"storyId": removed.story_id, "dateStr": removed.slot_date.isoformat()},
        )
        return jsonify(message="Rejected", id=booking_id), 200

    if status == STATUS_PENDING:
        BookingLedger().get(booking_id)
        # No transition leads back to pending
        raise InvalidState("A booking cannot be moved back to pending")

    raise ValidationError("status must be approved or rejected")


# ---------- ADMIN: delete (reject pending / cancel approved) ----------
@booking_bp.delete("/bookings")
@require_admin
def delete_booking():
    booking_id = require_id(request.args.get("id"))

    removed = ReservationCoordinator().withdraw(booking_id)
    log_event(
        "BOOKING_CANCEL" if removed.status == STATUS_APPROVED else "BOOKING_REJECT",
        actor="admin",
        entity="booking",
        entity_id=booking_id,
        metadata={"storyId": removed.story_id, "dateStr": removed.slot_date.isoformat()},
    )
    return "", 204
