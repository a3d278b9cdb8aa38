import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as shoutouts.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "shoutouts.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Create missing tables at startup (migrations remain the source of truth)
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

    # Admin gate: requests must send this value in X-Admin-Token
    ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN")
    ADMIN_TOKEN_HEADER = "X-Admin-Token"

    # Scheduler settings (see utils/settings.py)
    SHOUTOUT_SETTINGS_VERSION = 1
    SHOUTOUT_MONTHS_TO_SHOW = int(os.getenv("SHOUTOUT_MONTHS_TO_SHOW", "3"))
    SHOUTOUT_CODES_MAX = int(os.getenv("SHOUTOUT_CODES_MAX", "10"))
    CALENDAR_MAX_DAYS = int(os.getenv("CALENDAR_MAX_DAYS", "400"))
    SITE_NAME = os.getenv("SITE_NAME", "Shoutout Manager")

    # Email (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_FROM_NAME = os.getenv("SMTP_FROM_NAME", "Shoutout Manager")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    SMTP_TIMEOUT_SECONDS = int(os.getenv("SMTP_TIMEOUT_SECONDS", "10"))

    # Basic app settings
    DEBUG = False
