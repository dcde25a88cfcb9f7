"""Dependency injection for FastAPI.

This package provides all FastAPI dependency functions organized by responsibility:
- providers: Singleton providers (settings, mail transport, submission service)
- client: Client identity (owner key) resolution
"""

from .client import client_identity, get_owner_key
from .providers import (
    build_deliverer,
    get_app_settings,
    get_settings,
    get_submission_service,
)

__all__ = [
    # Providers
    "get_settings",
    "get_app_settings",
    "build_deliverer",
    "get_submission_service",
    # Client
    "client_identity",
    "get_owner_key",
]
