from dataclasses import dataclass

from flask import current_app

SETTINGS_VERSION = 1
MIN_MONTHS_TO_SHOW = 1
MAX_MONTHS_TO_SHOW = 24


@dataclass(frozen=True)
class SchedulerSettings:
    """Admin-facing scheduler settings, loaded once per app.

    Replaces the loose key/value config rows the calendar used to mutate
    field by field. ``version`` lets clients detect a shape change.
    """

    version: int
    months_to_show: int
    site_name: str
    from_name: str
    shoutout_codes_max: int
    calendar_max_days: int

    @classmethod
    def from_config(cls, config) -> "SchedulerSettings":
        version = int(config.get("SHOUTOUT_SETTINGS_VERSION", SETTINGS_VERSION))
        if version != SETTINGS_VERSION:
            raise ValueError(f"Unsupported settings version {version}, expected {SETTINGS_VERSION}")

        months = int(config.get("SHOUTOUT_MONTHS_TO_SHOW", 3))
        if not MIN_MONTHS_TO_SHOW <= months <= MAX_MONTHS_TO_SHOW:
            raise ValueError(
                f"SHOUTOUT_MONTHS_TO_SHOW must be between {MIN_MONTHS_TO_SHOW} and {MAX_MONTHS_TO_SHOW}"
            )

        codes_max = int(config.get("SHOUTOUT_CODES_MAX", 10))
        if codes_max < 1:
            raise ValueError("SHOUTOUT_CODES_MAX must be at least 1")

        max_days = int(config.get("CALENDAR_MAX_DAYS", 400))
        if max_days < 1:
            raise ValueError("CALENDAR_MAX_DAYS must be at least 1")

        return cls(
            version=version,
            months_to_show=months,
            site_name=config.get("SITE_NAME") or "Shoutout Manager",
            from_name=config.get("SMTP_FROM_NAME") or "Shoutout Manager",
            shoutout_codes_max=codes_max,
            calendar_max_days=max_days,
        )

    def public(self) -> dict:
        return {"version": self.version, "monthsToShow": self.months_to_show}


def get_settings() -> SchedulerSettings:
    return current_app.extensions["scheduler_settings"]
