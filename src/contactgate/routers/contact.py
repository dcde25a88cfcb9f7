from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..deps import get_owner_key, get_submission_service
from ..domain.submission import SubmissionRequest
from ..logging_config import get_logger
from ..schemas.contact import SubmissionResponse, TokenResponse
from ..services.submission_service import SubmissionService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["contact"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": SubmissionResponse, "description": "Validation failed"},
    403: {"model": SubmissionResponse, "description": "Invalid or expired security token"},
    429: {"model": SubmissionResponse, "description": "Too many requests"},
    500: {"model": SubmissionResponse, "description": "Delivery failed"},
}


async def _read_form(request: Request) -> Mapping[str, Any]:
    """Accept either a JSON object or form data (urlencoded or multipart)."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            body = await request.json()
            return body if isinstance(body, dict) else {}
        form = await request.form()
        return dict(form)
    except Exception as e:
        # malformed bodies fall through to the gates as empty fields
        logger.debug("submission_body_unreadable", content_type=content_type, error=str(e))
        return {}


@router.get("/token", response_model=TokenResponse)
async def issue_token(
    owner_key: str = Depends(get_owner_key),
    service: SubmissionService = Depends(get_submission_service),
):
    token = await service.issue_token(owner_key)
    return TokenResponse(token=token.id)


@router.post("/send_email", response_model=SubmissionResponse, responses=_ERROR_RESPONSES)
async def send_email(
    request: Request,
    owner_key: str = Depends(get_owner_key),
    service: SubmissionService = Depends(get_submission_service),
):
    data = await _read_form(request)
    outcome = await service.submit(SubmissionRequest.from_form(owner_key, data))
    return JSONResponse(status_code=outcome.http_status, content=outcome.to_payload())
