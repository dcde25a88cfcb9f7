"""
Input validation and sanitization for contact submissions.
Protects the notification channel against XSS and header injection.
"""

import html
import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from ..domain.submission import (
    ALLOWED_REASONS,
    DEFAULT_REASON,
    SanitizedSubmission,
    SubmissionRequest,
    ValidationResult,
)

MAX_SUBJECT_LENGTH = 200
MAX_MESSAGE_LENGTH = 5000

# C0 controls and DEL, keeping tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LINE_BREAKS = re.compile(r"[\r\n]+")


def _strip_controls(text: Optional[str]) -> str:
    return _CONTROL_CHARS.sub("", text or "").strip()


def sanitize_text(text: str, single_line: bool = False) -> str:
    """
    Neutralize markup in untrusted text.

    Args:
        text: Input text to sanitize
        single_line: Collapse line breaks to spaces (for mail headers)

    Returns:
        Text with control characters removed and HTML-significant
        characters escaped. Plain text without markup passes through unchanged.
    """
    text = _strip_controls(text)
    if not text:
        return ""
    if single_line:
        text = _LINE_BREAKS.sub(" ", text)
    return html.escape(text, quote=True)


def normalize_email(email: str) -> Optional[str]:
    """Return the canonical form of ``email``, or None if it isn't plausible."""
    if not email or not email.strip():
        return None
    try:
        info = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return None
    return info.normalized


def validate_submission(req: SubmissionRequest) -> ValidationResult:
    """Check every field and collect all violations before sanitizing."""
    errors: list[str] = []

    email = normalize_email(req.email)
    if email is None:
        errors.append("Valid email address is required")

    # Controls are dropped before the checks so an all-control field counts as empty
    subject = _strip_controls(req.subject)
    if not subject:
        errors.append("Subject is required")
    elif len(subject) > MAX_SUBJECT_LENGTH:
        errors.append(f"Subject must be less than {MAX_SUBJECT_LENGTH} characters")

    message = _strip_controls(req.message)
    if not message:
        errors.append("Message is required")
    elif len(message) > MAX_MESSAGE_LENGTH:
        errors.append(f"Message must be less than {MAX_MESSAGE_LENGTH} characters")

    reason = _strip_controls(req.reason) or DEFAULT_REASON
    if reason not in ALLOWED_REASONS:
        errors.append("Invalid reason selected")

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        sanitized=SanitizedSubmission(
            email=email,  # type: ignore[arg-type]
            subject=sanitize_text(subject, single_line=True),
            reason=sanitize_text(reason),
            message=sanitize_text(message),
        )
    )
