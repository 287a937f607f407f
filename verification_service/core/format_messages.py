"""Message Formatting - builds the verification-code notification and renders it.

Invariants:
    - The render model always carries exactly VerificationCode and ExpiryMinutes
    - ExpiryMinutes is computed at compose time, not copied from creation time
    - render_html() is deterministic for a given message (no clock reads)
"""

from datetime import datetime
from html import escape

from verification_service.core.enforce_lifecycle import remaining_minutes
from verification_service.core.records import NotificationMessage, VerificationRecord

VERIFICATION_SUBJECT = "🔐 Verify Your Account"
VERIFICATION_THEME = "VerificationCode"
VERIFICATION_PRIMARY_COLOR = "#28a745"


def compose_verification_message(
    record: VerificationRecord,
    now: datetime,
    subject: str = VERIFICATION_SUBJECT,
    theme: str = VERIFICATION_THEME,
    primary_color: str | None = VERIFICATION_PRIMARY_COLOR,
) -> NotificationMessage:
    return NotificationMessage(
        destination=record.destination,
        subject=subject,
        theme=theme,
        model={
            "VerificationCode": record.code,
            "ExpiryMinutes": remaining_minutes(record, now),
        },
        primary_color=primary_color,
    )


def _render_verification_code(message: NotificationMessage) -> str:
    color = escape(message.primary_color or VERIFICATION_PRIMARY_COLOR)
    code = escape(str(message.model.get("VerificationCode", "")))
    minutes = message.model.get("ExpiryMinutes", 0)
    return (
        "<!DOCTYPE html>"
        "<html><body style=\"font-family: Arial, sans-serif; color: #333;\">"
        f"<h2 style=\"color: {color};\">{escape(message.subject)}</h2>"
        "<p>Use the code below to complete your verification:</p>"
        f"<p style=\"font-size: 32px; font-weight: bold; letter-spacing: 8px; "
        f"color: {color};\">{code}</p>"
        f"<p>This code expires in {minutes} minute{'s' if minutes != 1 else ''}.</p>"
        "<p>If you did not request this, you can ignore this email.</p>"
        "</body></html>"
    )


# ADR: every theme mapping explicit - adding a theme requires editing this dict
_RENDERERS = {
    VERIFICATION_THEME: _render_verification_code,
}


def render_html(message: NotificationMessage) -> str:
    """Render a message body for its theme. Unknown themes raise KeyError."""
    return _RENDERERS[message.theme](message)
