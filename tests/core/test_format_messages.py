"""Message Formatting tests - verification notification model and HTML rendering."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from verification_service.core.domain_types import VerificationChannel
from verification_service.core.format_messages import (
    VERIFICATION_PRIMARY_COLOR,
    VERIFICATION_SUBJECT,
    VERIFICATION_THEME,
    compose_verification_message,
    render_html,
)
from verification_service.core.records import NotificationMessage, VerificationRecord

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _record(minutes=10):
    return VerificationRecord(
        user_id=uuid4(),
        channel=VerificationChannel.EMAIL,
        destination="a@b.com",
        code="482913",
        purpose_code="REGISTRATION",
        expires_at=NOW + timedelta(minutes=minutes),
    )


def test_compose_uses_defaults():
    message = compose_verification_message(_record(), NOW)
    assert message.destination == "a@b.com"
    assert message.subject == VERIFICATION_SUBJECT
    assert message.theme == VERIFICATION_THEME
    assert message.primary_color == VERIFICATION_PRIMARY_COLOR
    assert message.model == {"VerificationCode": "482913", "ExpiryMinutes": 10}


def test_compose_computes_minutes_at_compose_time():
    message = compose_verification_message(_record(), NOW + timedelta(minutes=4))
    assert message.model["ExpiryMinutes"] == 6


def test_render_contains_code_and_minutes():
    html = render_html(compose_verification_message(_record(), NOW))
    assert "482913" in html
    assert "10 minutes" in html
    assert VERIFICATION_PRIMARY_COLOR in html


def test_render_singular_minute():
    html = render_html(compose_verification_message(_record(minutes=1), NOW))
    assert "1 minute." in html


def test_render_escapes_subject():
    message = compose_verification_message(
        _record(), NOW, subject="<script>x</script>",
    )
    assert "<script>" not in render_html(message)


def test_unknown_theme_raises():
    message = NotificationMessage(
        destination="a@b.com", subject="s", theme="Newsletter", model={},
    )
    with pytest.raises(KeyError):
        render_html(message)
