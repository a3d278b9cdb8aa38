from flask import Blueprint, jsonify, request

from models.audit_log import AuditLog
from security.rbac import require_admin
from services.view_projector import ViewProjector
from utils.validation import require_date, require_story_id

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.get("/calendar")
@require_admin
def admin_calendar():
    story_id = require_story_id(request.args.get("storyId"))
    start_raw = request.args.get("start")
    end_raw = request.args.get("end")
    start = require_date(start_raw, "start") if start_raw else None
    end = require_date(end_raw, "end") if end_raw else None

    return jsonify(ViewProjector().admin_calendar(story_id, start, end)), 200


@admin_bp.get("/audit-logs")
@require_admin
def list_audit_logs():
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    action = request.args.get("action")

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([
        {
            "id": r.id,
            "created_at": r.timestamp.isoformat() if r.timestamp else None,
            "actor": r.actor,
            "action": r.action,
            "entity": r.entity,
            "entity_id": r.entity_id,
            "ip": r.ip,
            "user_agent": r.user_agent,
            "metadata": r.metadata_json,
        }
        for r in rows
    ]), 200
