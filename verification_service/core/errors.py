"""Error Hierarchy - typed, categorized exceptions for every verification failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller-correctable; infrastructure errors are 5xx
    - to_response() produces the REST envelope
    - InvalidOrExpiredCodeError never says which of wrong/expired/used applied

Design Decisions:
    - Single hierarchy with VerificationError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from verification_service.core.records import FieldError


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    verification_id: str | None = None
    purpose_code: str | None = None
    debug_info: dict[str, Any] | None = None


class VerificationError(Exception):
    """Base exception for all verification service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(VerificationError):
    """Request failed one or more field rules. Raised before any mutation."""

    def __init__(self, errors: list[FieldError], context: ErrorContext | None = None):
        super().__init__(
            "Invalid request data", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.errors = errors

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [
            {"field": e.field, "message": e.message} for e in self.errors
        ]
        return response


class InvalidOrExpiredCodeError(VerificationError):
    """No PENDING, unexpired record matches the presented code."""

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or expired verification code",
            "INVALID_OR_EXPIRED_CODE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(VerificationError):
    """Requested resource does not exist."""

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class UnknownPropertyError(VerificationError):
    """Sort/filter field name not in the static property map."""

    def __init__(self, entity: str, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown property for {entity}: {name}",
            "UNKNOWN_PROPERTY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.name = name


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(VerificationError):
    """Database operation failed."""

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class NotificationDeliveryError(VerificationError):
    """Notifier transport failed. The PENDING record it was sending stays stored."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Notification delivery failed: {message}",
            "NOTIFICATION_DELIVERY_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )


class EventPublishError(VerificationError):
    """Event bus rejected the completion fact. The VERIFIED state is not rolled back."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Event publish failed: {message}",
            "EVENT_PUBLISH_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
