import hmac
from functools import wraps
from flask import current_app, jsonify, request

def is_admin_request() -> bool:
    expected = current_app.config.get("ADMIN_API_TOKEN")
    header = current_app.config.get("ADMIN_TOKEN_HEADER", "X-Admin-Token")
    supplied = request.headers.get(header)
    if not expected or not supplied:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))

def require_admin(fn):
    """
    Usage: @require_admin
    Admin login lives outside this service; it hands us a shared token.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("ADMIN_API_TOKEN"):
            return jsonify(error="Admin access not configured"), 503

        header = current_app.config.get("ADMIN_TOKEN_HEADER", "X-Admin-Token")
        if not request.headers.get(header):
            return jsonify(error="Authentication required"), 401

        if not is_admin_request():
            return jsonify(error="Forbidden"), 403

        return fn(*args, **kwargs)
    return wrapper
