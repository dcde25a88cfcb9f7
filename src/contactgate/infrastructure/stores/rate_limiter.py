import asyncio
from collections import deque
from datetime import datetime, timedelta
from typing import Deque

from ...domain.clock import Clock, utcnow


class SlidingWindowRateLimiter:
    """Per-owner sliding-window limiter.

    At most ``max_requests`` admissions may exist in any trailing ``window``
    for a given owner key. Old timestamps are pruned lazily on every call, so
    no timer is needed; ``purge_idle`` drops owners whose window is empty.
    """

    def __init__(
        self,
        max_requests: int = 3,
        window: timedelta = timedelta(minutes=15),
        clock: Clock = utcnow,
    ):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        # store: owner key -> admitted attempt times, oldest first
        self.store: dict[str, Deque[datetime]] = {}
        self.lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self.store)

    def _prune(self, attempts: Deque[datetime], now: datetime) -> None:
        while attempts and now - attempts[0] >= self.window:
            attempts.popleft()

    async def admit(self, owner_key: str) -> bool:
        now = self.clock()
        async with self.lock:
            attempts = self.store.setdefault(owner_key, deque())
            self._prune(attempts, now)
            if len(attempts) >= self.max_requests:
                return False
            attempts.append(now)
            return True

    async def remaining(self, owner_key: str) -> int:
        now = self.clock()
        async with self.lock:
            attempts = self.store.get(owner_key)
            if not attempts:
                return self.max_requests
            self._prune(attempts, now)
            return max(self.max_requests - len(attempts), 0)

    async def purge_idle(self) -> int:
        now = self.clock()
        async with self.lock:
            idle = []
            for key, attempts in self.store.items():
                self._prune(attempts, now)
                if not attempts:
                    idle.append(key)
            for key in idle:
                del self.store[key]
        return len(idle)
