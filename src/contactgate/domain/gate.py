"""Tunable limits for the abuse-resistance gates."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Limits injected into the token store and rate limiter at construction."""

    window_duration: timedelta = timedelta(minutes=15)
    max_requests: int = 3
    token_ttl: timedelta = timedelta(minutes=30)
    # Only accept a token from the owner key it was issued to
    bind_token_to_owner: bool = False


__all__ = ["GateConfig"]
