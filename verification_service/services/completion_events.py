"""Completion Event Emitter - one VerificationCompleted fact per successful verify.

Invariants:
    - Called only after the VERIFIED state is committed
    - is_successful is always True; no failure fact exists
    - Bus errors propagate after being logged; the committed state stays

Design Decisions:
    - Best-effort publish straight after commit, no outbox table: a crash between
      commit and publish loses the fact
"""

import logging
from datetime import datetime

from verification_service.core.enforce_lifecycle import build_completed_event
from verification_service.core.records import (
    VerificationCompletedEvent, VerificationRecord,
)
from verification_service.core.repository_protocols import EventBus

logger = logging.getLogger(__name__)


class CompletionEventEmitter:

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus

    async def emit(
        self, record: VerificationRecord, completed_at: datetime,
    ) -> VerificationCompletedEvent:
        event = build_completed_event(record, completed_at)
        try:
            await self.event_bus.publish(event)
        except Exception:
            logger.error(
                "Completion event not published; verification stays verified",
                exc_info=True,
                extra={
                    "verification_id": record.id,
                    "purpose_code": record.purpose_code,
                },
            )
            raise
        return event
