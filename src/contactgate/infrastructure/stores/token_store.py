"""In-process store for single-use anti-forgery tokens.

Tokens are ephemeral: they live in a dict guarded by an asyncio.Lock, expire
after the configured TTL and are deleted on first successful use. Expired
entries are removed opportunistically on every issue and by the periodic
sweep started in the composition root.
"""

import asyncio
import secrets
from datetime import timedelta
from typing import Optional

from ...domain.clock import Clock, utcnow
from ...domain.token import Token
from ...exceptions import TokenExpired, TokenNotFound, TokenOwnerMismatch
from ...logging_config import get_logger
from ...metrics import ACTIVE_TOKENS, record_token_operation

logger = get_logger(__name__)


class InMemoryTokenStore:
    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=30),
        bind_to_owner: bool = False,
        clock: Clock = utcnow,
    ):
        # store: token id -> Token
        self.store: dict[str, Token] = {}
        self.lock = asyncio.Lock()
        self.ttl = ttl
        self.bind_to_owner = bind_to_owner
        self.clock = clock

    def __len__(self) -> int:
        return len(self.store)

    def generate_id(self) -> str:
        return secrets.token_urlsafe(32)

    def _drop_expired(self, now) -> int:
        # caller must hold self.lock
        expired = [tid for tid, tok in self.store.items() if tok.is_expired(now)]
        for tid in expired:
            del self.store[tid]
        return len(expired)

    def _update_gauge(self) -> None:
        if ACTIVE_TOKENS is not None:
            ACTIVE_TOKENS.set(len(self.store))

    async def issue(self, owner_key: str) -> Token:
        """Create and store a fresh token for ``owner_key``."""
        now = self.clock()
        async with self.lock:
            self._drop_expired(now)
            token_id = self.generate_id()
            while token_id in self.store:
                token_id = self.generate_id()
            token = Token(
                id=token_id,
                owner_key=owner_key,
                created_at=now,
                expires_at=now + self.ttl,
            )
            self.store[token_id] = token
            self._update_gauge()
        record_token_operation("issue")
        return token

    async def validate_and_consume(self, token_id: str, owner_key: Optional[str] = None) -> None:
        """Consume a token (one-time use).

        Raises:
            TokenNotFound: unknown, already consumed or already swept
            TokenExpired: present but past ``expires_at``; the entry is removed
            TokenOwnerMismatch: owner binding is enabled and ``owner_key`` differs
        """
        now = self.clock()
        async with self.lock:
            token = self.store.get(token_id) if token_id else None
            if token is None:
                record_token_operation("not_found")
                raise TokenNotFound()
            if token.is_expired(now):
                del self.store[token_id]
                self._update_gauge()
                record_token_operation("expired")
                raise TokenExpired()
            if self.bind_to_owner and owner_key is not None and token.owner_key != owner_key:
                # leave the token in place so its rightful owner can still use it
                record_token_operation("owner_mismatch")
                raise TokenOwnerMismatch()
            del self.store[token_id]
            self._update_gauge()
        record_token_operation("consume")

    async def purge_expired(self) -> int:
        now = self.clock()
        async with self.lock:
            removed = self._drop_expired(now)
            self._update_gauge()
        if removed:
            record_token_operation("purge")
            logger.debug("expired_tokens_purged", removed=removed)
        return removed
