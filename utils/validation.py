import re
from datetime import date
from typing import List, Optional
from urllib.parse import urlparse

from services.errors import ValidationError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

STORY_ID_MAX_LEN = 64
AUTHOR_NAME_MAX_LEN = 120
EMAIL_MAX_LEN = 255
STORY_LINK_MAX_LEN = 500
SHOUTOUT_CODE_MAX_LEN = 20000


def parse_date_str(value) -> Optional[date]:
    # Strict YYYY-MM-DD; fromisoformat alone also takes compact forms
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def is_valid_email(email: str) -> bool:
    return isinstance(email, str) and len(email) <= EMAIL_MAX_LEN and bool(_EMAIL_RE.match(email))


def is_valid_url(url: str) -> bool:
    if not isinstance(url, str) or len(url) > STORY_LINK_MAX_LEN:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc) and " " not in url


def require_story_id(value) -> str:
    story_id = (value or "").strip() if isinstance(value, str) else ""
    if not story_id:
        raise ValidationError("storyId is required")
    if len(story_id) > STORY_ID_MAX_LEN:
        raise ValidationError(f"storyId must be at most {STORY_ID_MAX_LEN} characters")
    return story_id


def require_date(value, field: str = "dateStr") -> date:
    day = parse_date_str(value)
    if day is None:
        raise ValidationError(f"Invalid {field}. Use YYYY-MM-DD")
    return day


def guest_info_errors(author_name, email, story_link, shoutout_code) -> List[str]:
    errors: List[str] = []

    if not author_name:
        errors.append("authorName is required")
    elif len(author_name) > AUTHOR_NAME_MAX_LEN:
        errors.append(f"authorName must be at most {AUTHOR_NAME_MAX_LEN} characters")

    if not email:
        errors.append("email is required")
    elif not is_valid_email(email):
        errors.append("email is not a valid address")

    if not story_link:
        errors.append("storyLink is required")
    elif not is_valid_url(story_link):
        errors.append("storyLink must be an http(s) URL")

    if not shoutout_code:
        errors.append("shoutoutCode is required")
    elif len(shoutout_code) > SHOUTOUT_CODE_MAX_LEN:
        errors.append(f"shoutoutCode must be at most {SHOUTOUT_CODE_MAX_LEN} characters")

    return errors


def require_json_object(data) -> dict:
    # A missing or unparsable body reads as {}; anything but an object is refused
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_id(value, field: str = "id") -> int:
    # bool is an int subclass; true must not read as id 1
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        record_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if record_id <= 0:
        raise ValidationError(f"{field} must be positive")
    return record_id
