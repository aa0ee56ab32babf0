"""
App middleware — CORS and domain exception handlers.

Extracted from main.py to keep app factory slim.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitment_hub.core.exceptions import (
    AuthenticationError,
    FitmentHubException,
    FitmentSetNotFoundError,
    PersistenceError,
    RateLimitError,
    RetryableError,
    StoreNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first
_STATUS_BY_EXCEPTION = (
    (ValidationError, 422, "VALIDATION_ERROR"),
    (FitmentSetNotFoundError, 404, "NOT_FOUND"),
    (StoreNotFoundError, 404, "STORE_NOT_FOUND"),
    (AuthenticationError, 401, "UNAUTHORIZED"),
    (PersistenceError, 500, "PERSISTENCE_ERROR"),
    (RateLimitError, 429, "RATE_LIMITED"),
    (RetryableError, 502, "UPSTREAM_ERROR"),
)


def status_for(exc: FitmentHubException) -> tuple[int, str]:
    for exc_type, status_code, code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code, code
    return 500, "INTERNAL_ERROR"


async def fitment_hub_exception_handler(request: Request, exc: FitmentHubException) -> JSONResponse:
    status_code, code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"code": code, "message": str(exc)}},
    )


def apply_cors(app: FastAPI) -> None:
    """Apply CORS middleware with permissive defaults (embedded admin iframe)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FitmentHubException, fitment_hub_exception_handler)
