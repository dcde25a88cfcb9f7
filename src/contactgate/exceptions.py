"""Per-request failures raised by the submission gates.

Each error carries the HTTP status and the message that may be shown to the
visitor. ``DeliveryFailed`` never exposes its cause; the transport error is
logged and a generic message is returned instead.
"""

from typing import Optional, Sequence

from .domain.submission import ErrorKind


class SubmissionError(Exception):
    kind: ErrorKind
    status_code: int = 400
    public_message: str = "Request rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)

    @property
    def client_message(self) -> str:
        return self.public_message


class RateLimited(SubmissionError):
    kind = ErrorKind.RATE_LIMITED
    status_code = 429
    public_message = "Too many requests. Please try again later."


class TokenInvalid(SubmissionError):
    kind = ErrorKind.TOKEN_INVALID
    status_code = 403
    public_message = "Invalid or expired security token"


class TokenNotFound(TokenInvalid):
    """Unknown, already consumed, or already swept token."""


class TokenExpired(TokenInvalid):
    """Token exists but its lifetime has elapsed."""


class TokenOwnerMismatch(TokenInvalid):
    """Token presented by a client other than the one it was issued to."""


class ValidationFailed(SubmissionError):
    kind = ErrorKind.VALIDATION_FAILED
    status_code = 400
    public_message = "Invalid submission"

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))

    @property
    def client_message(self) -> str:
        return ", ".join(self.errors)


class DeliveryFailed(SubmissionError):
    kind = ErrorKind.DELIVERY_FAILED
    status_code = 500
    public_message = "Failed to send message. Please try again later."


__all__ = [
    "SubmissionError",
    "RateLimited",
    "TokenInvalid",
    "TokenNotFound",
    "TokenExpired",
    "TokenOwnerMismatch",
    "ValidationFailed",
    "DeliveryFailed",
]
