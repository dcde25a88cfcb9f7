from fastapi import Depends, Request

from ..config import Settings
from .providers import get_app_settings


def client_identity(request: Request, trusted_proxy_hops: int = 0) -> str:
    """Get client IP address used as the owner key for tokens and rate limits.

    Each trusted proxy appends the address it saw to X-Forwarded-For, so the
    client is the entry ``trusted_proxy_hops`` from the right. Entries further
    left are client-supplied and never used.
    """
    if trusted_proxy_hops > 0:
        forwarded = request.headers.get("X-Forwarded-For", "")
        hops = [part.strip() for part in forwarded.split(",") if part.strip()]
        if len(hops) >= trusted_proxy_hops:
            return hops[-trusted_proxy_hops]
    # Fallback to direct connection
    return request.client.host if request.client else "unknown"


async def get_owner_key(request: Request, settings: Settings = Depends(get_app_settings)) -> str:
    return client_identity(request, trusted_proxy_hops=settings.trusted_proxy_hops)
