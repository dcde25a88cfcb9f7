"""In-process gate stores (tokens and rate windows)."""

from .rate_limiter import SlidingWindowRateLimiter
from .token_store import InMemoryTokenStore

__all__ = ["InMemoryTokenStore", "SlidingWindowRateLimiter"]
