"""Routers package public exports."""

__all__ = [
    "contact",
    "health",
]
