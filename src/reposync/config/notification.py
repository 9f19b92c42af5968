"""Import report delivery configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    api_key: str = field(repr=False)
    from_email: str
    to_emails: tuple[str, ...]


def get_notification_config() -> NotificationConfig | None:
    """Return mail settings, or ``None`` when report mails are disabled."""

    if optional_env_var("SENDGRID_API_KEY") is None:
        return None
    values = require_env_vars(("SENDGRID_API_KEY", "REPORT_FROM_EMAIL", "REPORT_TO_EMAIL"))
    recipients = tuple(
        address.strip() for address in values["REPORT_TO_EMAIL"].split(",") if address.strip()
    )
    return NotificationConfig(
        api_key=values["SENDGRID_API_KEY"],
        from_email=values["REPORT_FROM_EMAIL"],
        to_emails=recipients,
    )
