"""Error Hierarchy: typed, categorized exceptions for all KACLS failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client input errors (400-level) are recoverable; provider errors (500-level) are critical
    - to_response() produces the protocol's flat JSON error shape: {"error": ..., ...}
    - Key material never appears in messages or context

Design Decisions:
    - Single hierarchy with KaclsError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    field_path: str | None = None
    debug_info: dict[str, Any] | None = None


class KaclsError(Exception):
    """Base exception for all KACLS errors."""

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
        """Convert to the protocol's flat JSON error body."""
        return {"error": self.message}


# ─── Client Input Errors (400-level) ────────────────────────────

class MissingKeyMaterialError(KaclsError):
    """No base64-looking candidate anywhere in the request body."""
    def __init__(
        self, message: str, received_keys: list[str],
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "MISSING_KEY_MATERIAL", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.received_keys = received_keys

    def to_response(self) -> dict:
        return {"error": self.message, "received_keys": self.received_keys}


class InvalidKeyMaterialError(KaclsError):
    """Candidate located but it does not decode as base64."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_KEY_MATERIAL", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class PayloadTooLargeError(KaclsError):
    """Request body above the configured size cap."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            "payload_too_large", "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit_bytes = limit_bytes

    def to_response(self) -> dict:
        return {"error": self.message, "limit_bytes": self.limit_bytes}


# ─── Provider Errors (500-level) ────────────────────────────────

class KeyManagementError(KaclsError):
    """The key-management provider call failed (auth, quota, network, bad key)."""
    def __init__(
        self, operation: str, detail: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{operation}_failed", "KEY_MANAGEMENT_ERROR",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
        self.detail = detail

    def to_response(self) -> dict:
        return {"error": self.message, "detail": self.detail}


# ─── Startup Errors (fatal, non-HTTP) ───────────────────────────

class ConfigurationError(KaclsError):
    """Required setting missing or invalid at boot. The process must exit."""
    def __init__(self, setting: str, message: str):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.setting = setting
