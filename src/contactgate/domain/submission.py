"""Contact submission domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

ALLOWED_REASONS = ("General", "Project", "Collaboration", "Job Opportunity", "Other")
DEFAULT_REASON = "General"


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    TOKEN_INVALID = "token_invalid"
    VALIDATION_FAILED = "validation_failed"
    DELIVERY_FAILED = "delivery_failed"


@dataclass(slots=True)
class SubmissionRequest:
    """Raw, untrusted form fields as received from a visitor."""

    client_identity: str
    token_id: str = ""
    email: str = ""
    subject: str = ""
    reason: str = ""
    message: str = ""

    @staticmethod
    def _field(data: Mapping[str, Any], name: str) -> str:
        value = data.get(name)
        # non-string values (uploads, nested JSON) are treated as missing
        return value if isinstance(value, str) else ""

    @classmethod
    def from_form(cls, client_identity: str, data: Mapping[str, Any]) -> "SubmissionRequest":
        return cls(
            client_identity=client_identity,
            token_id=cls._field(data, "token"),
            email=cls._field(data, "email"),
            subject=cls._field(data, "subject"),
            reason=cls._field(data, "reason"),
            message=cls._field(data, "message"),
        )


@dataclass(slots=True)
class SanitizedSubmission:
    """Cleaned fields, safe to interpolate into a notification body."""

    email: str
    subject: str
    reason: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    sanitized: Optional[SanitizedSubmission] = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(slots=True)
class SubmissionOutcome:
    """Terminal result of one submission, mapped directly to an HTTP response."""

    success: bool
    http_status: int
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}


__all__ = [
    "ALLOWED_REASONS",
    "DEFAULT_REASON",
    "ErrorKind",
    "SubmissionRequest",
    "SanitizedSubmission",
    "ValidationResult",
    "SubmissionOutcome",
]
