"""Anti-forgery token domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Token:
    """Single-use credential handed to a form before submission."""

    id: str
    owner_key: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        # valid only while now < expires_at
        return now >= self.expires_at


__all__ = ["Token"]
