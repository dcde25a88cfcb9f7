"""Service layer for anti-forgery tokens and contact submissions."""

import time

from ..domain.submission import SubmissionOutcome, SubmissionRequest
from ..domain.token import Token
from ..exceptions import (
    DeliveryFailed,
    RateLimited,
    SubmissionError,
    TokenInvalid,
    ValidationFailed,
)
from ..logging_config import get_logger
from ..metrics import DELIVERY_DURATION, RATE_LIMIT_HITS, SUBMISSIONS
from ..ports.delivery import MessageDeliverer
from ..ports.stores import RateLimiter, TokenStore
from .validation import validate_submission

logger = get_logger(__name__)


def _record_outcome(outcome: str) -> None:
    try:
        if SUBMISSIONS is not None:
            SUBMISSIONS.labels(outcome=outcome).inc()
    except Exception:
        pass


class SubmissionService:
    """Runs each submission through rate limit, token, validation and delivery gates.

    Every gate is terminal on failure; later gates are skipped. The rate-limit
    slot is charged as soon as a request is admitted, whatever happens after.
    """

    def __init__(
        self,
        token_store: TokenStore,
        rate_limiter: RateLimiter,
        deliverer: MessageDeliverer,
    ):
        self.token_store = token_store
        self.rate_limiter = rate_limiter
        self.deliverer = deliverer

    async def issue_token(self, owner_key: str) -> Token:
        token = await self.token_store.issue(owner_key)
        logger.info("token_issued", owner_key=owner_key)
        return token

    async def submit(self, req: SubmissionRequest) -> SubmissionOutcome:
        """Handle one submission and return its terminal outcome."""
        try:
            await self._process(req)
        except SubmissionError as e:
            _record_outcome(e.kind.value)
            return SubmissionOutcome(
                success=False,
                http_status=e.status_code,
                error_kind=e.kind,
                error=e.client_message,
            )
        _record_outcome("delivered")
        return SubmissionOutcome(success=True, http_status=200)

    async def _process(self, req: SubmissionRequest) -> None:
        owner_key = req.client_identity or "unknown"

        if not await self.rate_limiter.admit(owner_key):
            if RATE_LIMIT_HITS is not None:
                RATE_LIMIT_HITS.inc()
            logger.warning("rate_limited", owner_key=owner_key)
            raise RateLimited()

        try:
            # the store decides whether owner_key is enforced
            await self.token_store.validate_and_consume(req.token_id, owner_key)
        except TokenInvalid as e:
            logger.warning("token_rejected", owner_key=owner_key, reason=type(e).__name__)
            raise

        result = validate_submission(req)
        if not result.ok or result.sanitized is None:
            logger.info("submission_invalid", owner_key=owner_key, errors=result.errors)
            raise ValidationFailed(result.errors)

        start = time.time()
        try:
            delivered = await self.deliverer.deliver(result.sanitized)
        except Exception as e:
            # transport detail stays in the logs, never in the response
            logger.exception("delivery_failed", owner_key=owner_key, error=str(e))
            raise DeliveryFailed()
        finally:
            if DELIVERY_DURATION is not None:
                DELIVERY_DURATION.observe(time.time() - start)

        if not delivered:
            logger.error("delivery_failed", owner_key=owner_key, error="transport rejected message")
            raise DeliveryFailed()

        logger.info("submission_delivered", owner_key=owner_key, reason=result.sanitized.reason)
