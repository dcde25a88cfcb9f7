"""Pydantic request/response schemas."""

from .contact import HealthResponse, SubmissionResponse, TokenResponse

__all__ = ["TokenResponse", "SubmissionResponse", "HealthResponse"]
