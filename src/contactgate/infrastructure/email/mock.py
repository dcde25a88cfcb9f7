import asyncio

from ...domain.submission import SanitizedSubmission


class MockDeliverer:
    """Records deliveries in memory; used in development and tests."""

    def __init__(self, fail: bool = False):
        self.sent: list[SanitizedSubmission] = []
        self.fail = fail

    async def deliver(self, submission: SanitizedSubmission) -> bool:
        # simulate async send
        await asyncio.sleep(0)
        if self.fail:
            return False
        self.sent.append(submission)
        return True
