from typing import Optional, Protocol

from ..domain.token import Token


class TokenStore(Protocol):
    """Protocol for single-use anti-forgery token storage."""

    async def issue(self, owner_key: str) -> Token: ...

    async def validate_and_consume(self, token_id: str, owner_key: Optional[str] = None) -> None: ...

    async def purge_expired(self) -> int: ...


class RateLimiter(Protocol):
    """Protocol for per-client admission control."""

    async def admit(self, owner_key: str) -> bool: ...

    async def purge_idle(self) -> int: ...
