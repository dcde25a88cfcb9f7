from typing import Protocol

from ..domain.submission import SanitizedSubmission


class MessageDeliverer(Protocol):
    """Protocol for the transport that forwards a submission to the operator.

    Returns True when the transport accepted the message. Implementations may
    also raise; callers treat both as a failed delivery.
    """

    async def deliver(self, submission: SanitizedSubmission) -> bool: ...
