import logging
import platform

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.router import AVAILABLE_ROUTES, limiter, router
from config import settings
from models.responses import ErrorResponse
from services.errors import AnalysisError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="JobSnip API",
    description="Resume to job-description matching backed by a hosted LLM",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    body = ErrorResponse(error=exc.message, details=exc.visible_details(settings.is_development))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 404:
        return await http_exception_handler(request, exc)
    logger.info("404 - Route not found: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=404,
        content={"error": "Route not found", "availableRoutes": AVAILABLE_ROUTES},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    body = ErrorResponse(
        error="Something went wrong!",
        details=str(exc) if settings.is_development else None,
    )
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


app.include_router(router)


def serve():
    """Console entry point: run the API under uvicorn."""
    import uvicorn

    logger.info("JobSnip Backend Server")
    logger.info("Server listening on port %s", settings.port)
    logger.info("Health check: http://localhost:%s/health", settings.port)
    logger.info("Main endpoint: http://localhost:%s/analyze", settings.port)
    logger.info("Environment: %s", settings.environment)
    logger.info("API Key configured: %s", "yes" if settings.openrouter_api_key else "no")
    logger.info("Python version: %s", platform.python_version())
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
