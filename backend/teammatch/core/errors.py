"""Error Hierarchy — typed, categorized exceptions for all TeamMatch failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Business-rule outcomes (4xx) are expected and recoverable; storage faults (5xx) are critical
    - to_response() produces the single REST envelope used by every handler
    - IneligibleApplicationError and DuplicateApplicationError carry ALL evaluator
      reasons, never just the first
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TeamMatchError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Authorization (ForbiddenError) and state preconditions (InvalidStateError) are
      distinct classes so callers can tell "not yours" from "not now"
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    project_id: str | None = None
    actor_id: str | None = None
    reasons: list[str] | None = None
    debug_info: dict[str, Any] | None = None


class TeamMatchError(Exception):
    """Base exception for all TeamMatch errors."""

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
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "user_id": self.context.user_id,
                "project_id": self.context.project_id,
            },
        }
        if self.context.reasons is not None:
            body["reasons"] = list(self.context.reasons)
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ProjectValidationError(TeamMatchError):
    """Project configuration violates a structural rule (dates, bounds, limits)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class UnauthenticatedError(TeamMatchError):
    """No acting user identity was supplied by the upstream gateway."""
    def __init__(self, message: str = "Missing or invalid actor identity",
                 context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TeamMatchError):
    """Actor is not authorized for the requested operation."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"Not allowed to {action}",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class ResourceNotFoundError(TeamMatchError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(TeamMatchError):
    """A uniqueness invariant would be violated."""
    def __init__(
        self, message: str, code: str = "CONFLICT", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class PositionFullError(ConflictError):
    """A position filled up between the capacity check and the write."""
    def __init__(self, positions: list[str], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.reasons = [f"{p} is full" for p in positions]
        super().__init__(
            f"No remaining capacity for: {', '.join(positions)}",
            "POSITION_FULL", ctx,
        )
        self.positions = positions


class DuplicateApplicationError(ConflictError):
    """The pair already has an application or a membership."""
    def __init__(self, reasons: list[str], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.reasons = list(reasons)
        super().__init__(
            "User already applied to or belongs to this project",
            "DUPLICATE_APPLICATION", ctx,
        )
        self.reasons = list(reasons)


class InvalidStateError(TeamMatchError):
    """A state-machine precondition failed."""
    def __init__(
        self, message: str, current_status: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_STATE", ErrorCategory.INVALID_STATE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.current_status = current_status


class IneligibleApplicationError(TeamMatchError):
    """Eligibility evaluation failed — carries every reason."""
    def __init__(self, reasons: list[str], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.reasons = list(reasons)
        super().__init__(
            "User is not eligible to apply to this project",
            "INELIGIBLE_APPLICATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.INFO, ctx, 422,
        )
        self.reasons = list(reasons)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TeamMatchError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
