"""Error Hierarchy - typed, categorized exceptions for all ban registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are terminal for the request; none are retried
    - to_response() produces the REST envelope
    - Messages are human-readable: they name the revoking account or the blocking role

Design Decisions:
    - Single hierarchy with WaitlistError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logging and client rendering."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ban_id: int | None = None
    account_id: int | None = None
    entity_id: int | None = None
    debug_info: dict[str, Any] | None = None


class WaitlistError(Exception):
    """Base exception for all ban registry errors."""

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
                "context": {
                    "ban_id": self.context.ban_id,
                    "entity_id": self.context.entity_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnauthorizedError(WaitlistError):
    """Caller is unknown (401) or lacks the required permission (403)."""
    def __init__(
        self,
        message: str,
        permission: str | None = None,
        http_status: int = 403,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, http_status,
        )
        self.permission = permission


class MalformedRequestError(WaitlistError):
    """Request is missing required fields or has an invalid shape."""
    def __init__(
        self, message: str, fields: list[str], context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "MALFORMED_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields


class PolicyViolationError(WaitlistError):
    """Well-formed request forbidden by a business rule."""
    def __init__(
        self, message: str, rule: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "POLICY_VIOLATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.rule = rule


class PrivilegedEntityError(PolicyViolationError):
    """Entity holds a privileged role and cannot be banned."""
    def __init__(self, role: str, context: ErrorContext | None = None):
        super().__init__(
            f"{role} accounts cannot be banned.", "privileged_entity", context,
        )
        self.role = role


class ResourceNotFoundError(WaitlistError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Could not find a {resource_type} with the ID of {resource_id}",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class BanNotActiveError(WaitlistError):
    """Amend attempted on a ban that is no longer active."""
    def __init__(self, ban_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Ban {ban_id} is no longer active and cannot be amended.",
            "BAN_NOT_ACTIVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.ban_id = ban_id


class BanConflictError(WaitlistError):
    """Lifecycle transition not permitted in the ban's current state."""
    def __init__(
        self, message: str, code: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class BanAlreadyExpiredError(BanConflictError):
    """Ban reached its scheduled end; nothing left to revoke."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot revoke the ban as it has already expired",
            "BAN_ALREADY_EXPIRED", context,
        )


class BanAlreadyRevokedError(BanConflictError):
    """Ban was already manually revoked by another account."""
    def __init__(
        self, revoked_by: int, revoked_by_name: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{revoked_by_name} has already revoked this ban",
            "BAN_ALREADY_REVOKED", context,
        )
        self.revoked_by = revoked_by
        self.revoked_by_name = revoked_by_name


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UpstreamDependencyError(WaitlistError):
    """An external collaborator (ESI, admin registry) failed."""
    def __init__(
        self, message: str, service: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service} request failed: {message}",
            "UPSTREAM_DEPENDENCY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.service = service


class DatabaseError(WaitlistError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
