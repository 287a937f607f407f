"""In-Process Event Bus - fans VerificationCompleted facts out to subscribers.

Invariants:
    - publish() returns only after every subscriber has run
    - Any subscriber failure surfaces as EventPublishError after the rest ran
    - No persistence: a fact published while the process dies is lost

Design Decisions:
    - Explicit subscribe() registration, no discovery
    - Subscribers receive the frozen event; to_payload() is the wire shape
"""

import logging
from collections.abc import Awaitable, Callable

from verification_service.core.errors import ErrorContext, EventPublishError
from verification_service.core.records import VerificationCompletedEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[VerificationCompletedEvent], Awaitable[None]]


class InProcessEventBus:

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, handler: Subscriber) -> None:
        self._subscribers.append(handler)

    async def publish(self, event: VerificationCompletedEvent) -> None:
        failures: list[str] = []
        for handler in self._subscribers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    f"Subscriber {getattr(handler, '__name__', handler)} failed: {e}",
                    exc_info=True,
                    extra={"verification_id": event.verification_id},
                )
                failures.append(str(e))
        if failures:
            raise EventPublishError(
                "; ".join(failures),
                ErrorContext(
                    verification_id=str(event.verification_id),
                    purpose_code=event.purpose_code,
                ),
            )


async def log_completed_event(event: VerificationCompletedEvent) -> None:
    """Default subscriber: one structured log line per completion fact."""
    logger.info(
        f"VerificationCompleted {event.to_payload()}",
        extra={
            "event": "verification_completed",
            "verification_id": event.verification_id,
            "purpose_code": event.purpose_code,
        },
    )
