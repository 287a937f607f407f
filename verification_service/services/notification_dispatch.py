"""Notification Dispatch - hands a freshly issued code to the notifier.

Invariants:
    - Only EMAIL records are dispatched; other channels raise ValueError
    - ExpiryMinutes is computed at dispatch time from the dispatcher's clock
    - Notifier errors propagate unchanged; the record is never touched here
"""

import logging

from verification_service.core.domain_types import VerificationChannel
from verification_service.core.format_messages import (
    VERIFICATION_PRIMARY_COLOR,
    VERIFICATION_SUBJECT,
    VERIFICATION_THEME,
    compose_verification_message,
)
from verification_service.core.records import VerificationRecord
from verification_service.core.repository_protocols import Notifier
from verification_service.services.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Composes the verification-code message and sends it."""

    def __init__(
        self,
        notifier: Notifier,
        subject: str = VERIFICATION_SUBJECT,
        theme: str = VERIFICATION_THEME,
        primary_color: str | None = VERIFICATION_PRIMARY_COLOR,
        clock: Clock = utc_now,
    ):
        self.notifier = notifier
        self.subject = subject
        self.theme = theme
        self.primary_color = primary_color
        self.clock = clock

    async def dispatch(self, record: VerificationRecord) -> None:
        if record.channel != VerificationChannel.EMAIL:
            raise ValueError(f"No notifier for channel '{record.channel.value}'")

        message = compose_verification_message(
            record,
            self.clock(),
            subject=self.subject,
            theme=self.theme,
            primary_color=self.primary_color,
        )
        logger.info(
            "Dispatching verification code",
            extra={
                "verification_id": record.id,
                "purpose_code": record.purpose_code,
                "channel": record.channel.value,
            },
        )
        await self.notifier.send(message)
