import json
import logging
import platform
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_gateway
from config import settings
from models.responses import AnalysisResult, HealthResponse
from services.completion_gateway import CompletionGateway
from services.errors import AnalysisError, InternalAnalysisError, MalformedBody, PayloadTooLarge
from services.request_validator import validate_request

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

AVAILABLE_ROUTES = ["GET /", "GET /health", "POST /analyze"]


@router.get("/")
async def root():
    return {
        "message": "JobSnip Backend Server",
        "status": "Running",
        "endpoints": {
            "health": "/health",
            "analyze": "/analyze (POST)",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        has_api_key=bool(settings.openrouter_api_key),
        python_version=platform.python_version(),
    )


def _too_large() -> PayloadTooLarge:
    return PayloadTooLarge(details=f"Max size: {settings.max_body_size_mb}MB")


async def _read_payload(request: Request):
    # Reject on the declared length before buffering; chunked bodies are checked after.
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > settings.max_body_bytes:
        raise _too_large()

    body = await request.body()
    if len(body) > settings.max_body_bytes:
        raise _too_large()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MalformedBody()


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze(
    request: Request,
    response: Response,
    gateway: CompletionGateway = Depends(get_gateway),
):
    payload = await _read_payload(request)
    analysis_request = validate_request(payload)

    try:
        outcome = await gateway.analyze(analysis_request)
    except AnalysisError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure during analysis")
        raise InternalAnalysisError(details=str(e))

    if outcome.degraded:
        response.headers["X-Analysis-Degraded"] = "true"
    return outcome.result
