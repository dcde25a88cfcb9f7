from typing import Optional

from pydantic import BaseModel


class TokenResponse(BaseModel):
    token: str


class SubmissionResponse(BaseModel):
    success: bool
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
