from flask import Flask, jsonify
from config import Config
from routes import health_bp, availability_bp, booking_bp, admin_bp, shoutouts_bp

from models import db
from flask_migrate import Migrate
from services.errors import ReservationError
from services.notifications import NotificationDispatcher
from utils.settings import SchedulerSettings


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Settings are loaded once; a bad value stops startup
    app.extensions["scheduler_settings"] = SchedulerSettings.from_config(app.config)
    app.extensions["notification_dispatcher"] = NotificationDispatcher()

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(availability_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(shoutouts_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()

    if not app.config.get("ADMIN_API_TOKEN"):
        app.logger.warning("ADMIN_API_TOKEN is not set; admin endpoints will answer 503")

    @app.errorhandler(ReservationError)
    def _reservation_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # CSP can be strict if you serve frontend separately; for API it's fine to keep minimal:
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
from datetime import timedelta

import click
from services.coordinator import ReservationCoordinator
from utils.audit import log_event
from utils.validation import parse_date_str

def register_cli(app):
    @app.cli.command("send-test-email")
    @click.argument("address")
    def send_test_email(address):
        """Send a test message with the current SMTP settings."""
        result = app.extensions["notification_dispatcher"].send_test(address)
        if result.sent:
            print(f"Test email sent to {address}")
        else:
            print(f"Test email failed: {result.error}")

    @app.cli.command("open-dates")
    @click.argument("story_id")
    @click.argument("start")
    @click.argument("end")
    def open_dates(story_id, start, end):
        """Open every date from START to END (YYYY-MM-DD, inclusive) for STORY_ID."""
        first = parse_date_str(start)
        last = parse_date_str(end)
        if first is None or last is None or last < first:
            print("Invalid range. Use YYYY-MM-DD and make END >= START")
            return

        coordinator = ReservationCoordinator()
        opened = 0
        day = first
        while day <= last:
            if coordinator.toggle_availability(story_id, day, True):
                opened += 1
            day += timedelta(days=1)

        log_event("AVAILABILITY_OPEN", actor="cli", entity="availability", entity_id=story_id,
                  metadata={"start": first.isoformat(), "end": last.isoformat(), "opened": opened})
        print(f"Opened {opened} date(s) for {story_id}")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
