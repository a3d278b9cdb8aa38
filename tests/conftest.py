import pytest

from app import create_app
from config import Config
from models import db
from services.coordinator import GuestInfo, ReservationCoordinator
from services.notifications import DispatchResult

ADMIN_TOKEN = "test-admin-token"


class _TestingConfig(Config):
    TESTING = True
    ADMIN_API_TOKEN = ADMIN_TOKEN
    SMTP_HOST = None
    SMTP_FROM_EMAIL = None
    SHOUTOUT_MONTHS_TO_SHOW = 3


class RecordingDispatcher:
    """Stands in for the SMTP dispatcher and remembers what it was asked to send."""

    def __init__(self):
        self.approved = []
        self.error = None
        self.raise_exc = None

    def send_approval(self, booking):
        self.approved.append(booking.id)
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.error:
            return DispatchResult(sent=False, error=self.error)
        return DispatchResult(sent=True)

    def send_test(self, to_email):
        return DispatchResult(sent=True)


@pytest.fixture
def config_class(tmp_path):
    class _Cfg(_TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "shoutouts-test.db")
    return _Cfg


@pytest.fixture
def app(config_class):
    app = create_app(config_class)
    app.extensions["notification_dispatcher"] = RecordingDispatcher()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def dispatcher(app):
    return app.extensions["notification_dispatcher"]


@pytest.fixture
def coordinator(ctx):
    return ReservationCoordinator()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def guest():
    def _make(**overrides):
        values = {
            "author_name": "Jane Writer",
            "email": "jane@example.com",
            "story_link": "https://www.royalroad.com/fiction/12345",
            "shoutout_code": "<a href='https://example.com'>Read my story</a>",
        }
        values.update(overrides)
        return GuestInfo(**values)
    return _make


@pytest.fixture
def booking_payload():
    def _make(story_id="S1", date_str="2025-06-01", **overrides):
        payload = {
            "storyId": story_id,
            "dateStr": date_str,
            "authorName": "Jane Writer",
            "email": "jane@example.com",
            "storyLink": "https://www.royalroad.com/fiction/12345",
            "shoutoutCode": "<a href='https://example.com'>Read my story</a>",
        }
        payload.update(overrides)
        return payload
    return _make
