"""Main FastAPI application for StudyDesk.

Wires together:
- Startup checks for Firebase and Firestore
- CORS and per-request ids with access logging
- Exception handlers producing `{error, code, request_id}` bodies
- The `/api` router
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_app_config, get_cors_config, get_settings, setup_logging
from db.firebase import get_firebase_app
from dependencies import get_firestore_service
from responses import ResponseCode, error_dict
from router import router as api_router

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

# HTTP errors raised by the framework itself (routing, auth headers)
STATUS_CODES: dict[int, ResponseCode] = {
    401: ResponseCode.UNAUTHORIZED,
    404: ResponseCode.NOT_FOUND,
    405: ResponseCode.VALIDATION_ERROR,
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize Firebase and verify Firestore before serving requests."""
    settings = get_settings()
    logger.info(
        "Starting StudyDesk (env=%s, model=%s)", settings.environment, settings.llm_model
    )
    logger.info(
        "Chunk size: %d, history: %d messages, scan limit: %d documents",
        settings.chunk_size,
        settings.chat_history_max_messages,
        settings.document_scan_limit,
    )

    firebase_app = get_firebase_app()
    logger.info(
        "Firebase app ready (bucket: %s)", firebase_app.options.get("storageBucket")
    )

    health = await get_firestore_service().health_check()
    if health.get("status") != "healthy":
        logger.error("Firestore unhealthy: %s", health)
        raise RuntimeError(f"Firestore health check failed: {health.get('error')}")
    logger.info("Firestore connected (latency: %sms)", health.get("latency_ms"))

    yield

    logger.info("Shutting down StudyDesk")


app = FastAPI(lifespan=lifespan, **get_app_config())
app.add_middleware(CORSMiddleware, **get_cors_config())


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag each request with a short id and log its outcome."""
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    logger.info(
        "[%s] %s %s -> %d (%.1fms)",
        request_id,
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report the first invalid field; the full list goes in error_details."""
    errors = exc.errors()
    field_name = errors[0].get("loc", ["unknown"])[-1] if errors else "unknown"

    return JSONResponse(
        status_code=422,
        content=error_dict(
            code=ResponseCode.VALIDATION_ERROR,
            custom_message=f"Validation failed for field '{field_name}'",
            error_details={"validation_errors": jsonable_encoder(errors)},
            request_id=_request_id(request),
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Pass through structured details; wrap plain ones."""
    request_id = _request_id(request)

    if isinstance(exc.detail, dict) and "code" in exc.detail:
        content = {**exc.detail, "request_id": request_id}
    else:
        content = error_dict(
            code=STATUS_CODES.get(exc.status_code, ResponseCode.INTERNAL_ERROR),
            custom_message=str(exc.detail),
            request_id=request_id,
        )

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Any failure no handler mapped becomes a 500 with its message."""
    request_id = _request_id(request)
    logger.exception("[%s] Unhandled exception: %s", request_id, exc)

    return JSONResponse(
        status_code=500,
        content=error_dict(
            code=ResponseCode.INTERNAL_ERROR,
            custom_message=str(exc) or None,
            error_details={"exception_type": type(exc).__name__},
            request_id=request_id,
        ),
    )


# =============================================================================
# Routes
# =============================================================================

app.include_router(api_router, prefix="/api")


@app.options("/api/{full_path:path}", include_in_schema=False)
async def preflight(full_path: str) -> Response:
    """Answer bare OPTIONS requests; CORS preflights are handled by middleware."""
    return Response(status_code=200)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "name": "StudyDesk",
        "description": "Document-aware study assistant",
        "docs": "/api/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
