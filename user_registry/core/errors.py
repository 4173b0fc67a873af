"""Error Hierarchy — typed, categorized exceptions for all User Registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every user-creation failure is a single OperationError tagged with an
      OperationErrorKind; status code and message are derived from the kind
    - to_response() produces the REST envelope rendered by api/error_handlers.py

Design Decisions:
    - One OperationError type with a kind tag instead of one subclass per failure:
      the five creation failures differ only in status and message text
    - Collaborator exceptions are chained as __cause__, never embedded beyond
      what the message format requires
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context carried alongside an error for logging and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_name: str | None = None
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class UserRegistryError(Exception):
    """Base exception for all User Registry errors."""

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

    @property
    def status_code(self) -> int:
        return self.http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_name": self.context.user_name,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── User Creation Errors ───────────────────────────────────────

class OperationErrorKind(str, Enum):
    """Every way a user creation request can fail."""
    MISSING_INPUT = "MISSING_INPUT"
    CHECK_FAILURE = "CHECK_FAILURE"
    CONFLICT = "CONFLICT"
    CREATE_FAILURE = "CREATE_FAILURE"
    RELOAD_FAILURE = "RELOAD_FAILURE"


_KIND_TRAITS: dict[OperationErrorKind, tuple[int, ErrorCategory, ErrorSeverity]] = {
    OperationErrorKind.MISSING_INPUT: (400, ErrorCategory.VALIDATION, ErrorSeverity.WARNING),
    OperationErrorKind.CHECK_FAILURE: (500, ErrorCategory.DATABASE, ErrorSeverity.CRITICAL),
    OperationErrorKind.CONFLICT: (409, ErrorCategory.CONFLICT, ErrorSeverity.WARNING),
    OperationErrorKind.CREATE_FAILURE: (500, ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL),
    OperationErrorKind.RELOAD_FAILURE: (500, ErrorCategory.DATABASE, ErrorSeverity.CRITICAL),
}


class OperationError(UserRegistryError):
    """A failed user creation: a kind, its HTTP status and a formatted message."""

    def __init__(
        self,
        kind: OperationErrorKind,
        message: str,
        context: ErrorContext | None = None,
    ):
        http_status, category, severity = _KIND_TRAITS[kind]
        super().__init__(
            message, kind.value, category, severity, context, http_status,
        )
        self.kind = kind

    @classmethod
    def missing_input(cls) -> "OperationError":
        return cls(OperationErrorKind.MISSING_INPUT, "name missing")

    @classmethod
    def check_failure(cls, name: str, cause: BaseException) -> "OperationError":
        return cls(
            OperationErrorKind.CHECK_FAILURE,
            f"error checking user: {cause}",
            ErrorContext(user_name=name),
        )

    @classmethod
    def conflict(cls, name: str) -> "OperationError":
        return cls(
            OperationErrorKind.CONFLICT,
            f"user {name} already exists",
            ErrorContext(user_name=name),
        )

    @classmethod
    def create_failure(cls, name: str, cause: BaseException) -> "OperationError":
        return cls(
            OperationErrorKind.CREATE_FAILURE,
            f"unexpected: {cause}",
            ErrorContext(user_name=name),
        )

    @classmethod
    def reload_failure(cls, name: str, user_id: int) -> "OperationError":
        # Message names the requested user; the cause stays on __cause__.
        return cls(
            OperationErrorKind.RELOAD_FAILURE,
            f"error retrieving user: {name}",
            ErrorContext(user_name=name, user_id=user_id),
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class ResourceNotFoundError(UserRegistryError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DatabaseError(UserRegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
