"""Dependency Wiring - builds services per request from process-wide collaborators.

Invariants:
    - Notifier and event bus are process singletons, set once in the lifespan
    - Stores and services are request-scoped: one AsyncSession per request
    - Every provider is a plain function so tests override it with
      app.dependency_overrides

Design Decisions:
    - Module-level singletons mirror db_manager in infrastructure/database.py
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from verification_service.config import Settings, get_settings
from verification_service.core.repository_protocols import EventBus, Notifier
from verification_service.infrastructure.database import get_db
from verification_service.infrastructure.email_notifier import (
    LoggingNotifier, SmtpNotifier, build_mail_config,
)
from verification_service.infrastructure.event_bus import (
    InProcessEventBus, log_completed_event,
)
from verification_service.infrastructure.verification_store import (
    SqlPurposeStore, SqlVerificationStore,
)
from verification_service.services.completion_events import CompletionEventEmitter
from verification_service.services.notification_dispatch import NotificationDispatcher
from verification_service.services.purpose_service import VerificationPurposeService
from verification_service.services.verification_service import VerificationService

_notifier: Notifier | None = None
_event_bus: EventBus | None = None


def init_collaborators(settings: Settings) -> None:
    """Create the notifier and event bus for this process."""
    global _notifier, _event_bus
    if settings.mail_enabled:
        _notifier = SmtpNotifier(build_mail_config(settings))
    else:
        _notifier = LoggingNotifier()
    bus = InProcessEventBus()
    bus.subscribe(log_completed_event)
    _event_bus = bus


def get_notifier() -> Notifier:
    if _notifier is None:
        raise RuntimeError("Notifier not initialized")
    return _notifier


def get_event_bus() -> EventBus:
    if _event_bus is None:
        raise RuntimeError("Event bus not initialized")
    return _event_bus


def get_verification_service(
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    event_bus: EventBus = Depends(get_event_bus),
    settings: Settings = Depends(get_settings),
) -> VerificationService:
    dispatcher = NotificationDispatcher(
        notifier,
        subject=settings.verification_email_subject,
        theme=settings.verification_email_theme,
        primary_color=settings.verification_email_primary_color,
    )
    return VerificationService(
        SqlVerificationStore(db),
        dispatcher,
        CompletionEventEmitter(event_bus),
        expiry_minutes=settings.verification_code_expiry_minutes,
        scope_lookups_to_user=settings.scope_lookups_to_user,
    )


def get_purpose_service(
    db: AsyncSession = Depends(get_db),
) -> VerificationPurposeService:
    return VerificationPurposeService(SqlPurposeStore(db))
