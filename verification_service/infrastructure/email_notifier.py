"""Email Notifiers - deliver NotificationMessage over SMTP, or only log it.

Invariants:
    - SmtpNotifier renders HTML from the message theme (core/format_messages.py)
    - Transport failures surface as NotificationDeliveryError; nothing retries
    - LoggingNotifier never logs the code itself

Design Decisions:
    - fastapi-mail for SMTP: async send, STARTTLS/SSL handled by the library
    - LoggingNotifier used when mail is disabled (local dev, tests)
"""

import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors

from verification_service.core.errors import NotificationDeliveryError
from verification_service.core.format_messages import render_html
from verification_service.core.records import NotificationMessage

logger = logging.getLogger(__name__)


class SmtpNotifier:
    """Sends rendered verification emails through an SMTP relay."""

    def __init__(self, config: ConnectionConfig):
        self._mail = FastMail(config)

    async def send(self, message: NotificationMessage) -> None:
        schema = MessageSchema(
            subject=message.subject,
            recipients=[message.destination],
            body=render_html(message),
            subtype=MessageType.html,
        )
        try:
            await self._mail.send_message(schema)
        except ConnectionErrors as e:
            logger.error(f"SMTP delivery failed: {e}", extra={"event": "notify"})
            raise NotificationDeliveryError(str(e)) from e
        logger.info("Verification email sent", extra={"event": "notify"})


class LoggingNotifier:
    """Drop-in notifier that records the send in the log instead of mailing."""

    async def send(self, message: NotificationMessage) -> None:
        logger.info(
            f"Mail disabled, not sending '{message.subject}' "
            f"(theme={message.theme}, expires in "
            f"{message.model.get('ExpiryMinutes')} min)",
            extra={"event": "notify"},
        )


def build_mail_config(settings) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.mail_username,
        MAIL_PASSWORD=settings.mail_password,
        MAIL_FROM=settings.mail_from,
        MAIL_FROM_NAME=settings.mail_from_name,
        MAIL_PORT=settings.mail_port,
        MAIL_SERVER=settings.mail_server,
        MAIL_STARTTLS=settings.mail_starttls,
        MAIL_SSL_TLS=settings.mail_ssl_tls,
        USE_CREDENTIALS=bool(settings.mail_username),
        VALIDATE_CERTS=True,
    )
