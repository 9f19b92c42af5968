"""Delivery of import completion reports."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Content, Email, Mail, To

if TYPE_CHECKING:
    from reposync.config.notification import NotificationConfig

log = getLogger(__name__)

_ACCEPTED_STATUS_CODES = frozenset({200, 201, 202})


class NotificationError(RuntimeError):
    """Raised when the mail service does not accept a report."""


class SendGridNotifier:
    """Mail the report to every configured recipient via SendGrid."""

    def __init__(
        self,
        config: NotificationConfig,
        *,
        client: SendGridAPIClient | None = None,
    ) -> None:
        self._config = config
        self._client = client or SendGridAPIClient(api_key=config.api_key)

    def send(self, subject: str, body: str) -> None:
        if not self._config.to_emails:
            log.warning("No report recipients configured, not sending '%s'", subject)
            return

        message = Mail(
            from_email=Email(self._config.from_email),
            to_emails=[To(address) for address in self._config.to_emails],
            subject=subject,
        )
        message.add_content(Content("text/plain", body))

        response = self._client.send(message)
        if response.status_code not in _ACCEPTED_STATUS_CODES:
            raise NotificationError(
                f"SendGrid rejected report '{subject}' with status {response.status_code}"
            )
        log.info(
            "Report sent: to=%s, subject='%s', status=%s",
            ", ".join(self._config.to_emails),
            subject,
            response.status_code,
        )


class LoggingNotifier:
    """Report sink used when mail delivery is not configured."""

    def send(self, subject: str, body: str) -> None:
        log.info("%s\n%s", subject, body)
