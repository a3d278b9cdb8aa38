from flask import Blueprint, request, jsonify

from models import db
from models.shoutout_code import ShoutoutCode
from security.rbac import require_admin
from services.errors import Conflict, NotFound, ValidationError
from services.notifications import codes_for_story
from utils.audit import log_event
from utils.settings import get_settings
from utils.validation import require_id, require_json_object, require_story_id

shoutouts_bp = Blueprint("shoutouts", __name__, url_prefix="/shoutouts")

LABEL_MAX_LEN = 120


def _code_json(c: ShoutoutCode) -> dict:
    return {"id": c.id, "label": c.label, "code": c.code, "storyId": c.story_id}


@shoutouts_bp.get("")
@require_admin
def list_codes():
    story_id = (request.args.get("storyId") or "").strip() or None
    if story_id:
        story_id = require_story_id(story_id)
    return jsonify([_code_json(c) for c in codes_for_story(story_id)]), 200


@shoutouts_bp.post("")
@require_admin
def upsert_code():
    data = require_json_object(request.get_json(silent=True))
    label = (data.get("label") or "").strip() if isinstance(data.get("label"), str) else ""
    code = (data.get("code") or "").strip() if isinstance(data.get("code"), str) else ""
    story_id = data.get("storyId")
    story_id = require_story_id(story_id) if story_id else None

    if not label or not code:
        raise ValidationError("label and code are required")
    if len(label) > LABEL_MAX_LEN:
        raise ValidationError(f"label must be at most {LABEL_MAX_LEN} characters")

    code_id = data.get("id")
    if code_id is not None:
        code_id = require_id(code_id)
        row = db.session.get(ShoutoutCode, code_id)
        if row is None:
            raise NotFound("Shoutout code not found")
        created = False
    else:
        max_codes = get_settings().shoutout_codes_max
        if ShoutoutCode.query.count() >= max_codes:
            raise Conflict(f"At most {max_codes} shoutout codes can be stored")
        row = ShoutoutCode()
        db.session.add(row)
        created = True

    row.label = label
    row.code = code
    row.story_id = story_id
    db.session.commit()

    log_event("SHOUTOUT_CODE_UPSERT", actor="admin", entity="shoutout_code", entity_id=row.id,
              metadata={"created": created, "storyId": story_id})
    return jsonify(_code_json(row)), 201 if created else 200


@shoutouts_bp.delete("")
@require_admin
def delete_code():
    code_id = require_id(request.args.get("id"))

    row = db.session.get(ShoutoutCode, code_id)
    if row is None:
        raise NotFound("Shoutout code not found")

    db.session.delete(row)
    db.session.commit()

    log_event("SHOUTOUT_CODE_DELETE", actor="admin", entity="shoutout_code", entity_id=code_id)
    return "", 204
