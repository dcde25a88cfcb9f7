"""Ports package - defines interfaces for external dependencies.

Exports store protocols and the delivery interface for dependency inversion.
"""

from .delivery import MessageDeliverer
from .stores import RateLimiter, TokenStore

__all__ = [
    # Store protocols
    "TokenStore",
    "RateLimiter",
    "MessageDeliverer",
]
