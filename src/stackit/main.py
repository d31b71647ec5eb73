"""Main entry point for the StackIt application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from stackit.api.v1 import (
    answers_router,
    questions_router,
    system_router,
    users_router,
)
from stackit.core.errors import StackItError
from stackit.core.logging import configure_logging
from stackit.core.settings import settings
from stackit.db.bootstrap import verify_schema
from stackit.db.session import engine

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="StackIt API",
    description="Question and answer platform API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(questions_router, prefix="/api/v1")
app.include_router(answers_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.exception_handler(StackItError)
async def handle_domain_error(request: Request, exc: StackItError) -> JSONResponse:
    """Render a domain error as ``{"reason", "detail"}`` with its HTTP status."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"reason": exc.reason, "detail": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 ``invalid_argument`` with the field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "reason": "invalid_argument",
            "detail": "Validation failed",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Render any unhandled failure as 500 ``server_error``."""
    logger.error(
        "%s %s raised %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=StackItError.status_code,
        content={"reason": StackItError.reason, "detail": StackItError.default_message},
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    verify_schema(engine)
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "StackIt API",
        "version": settings.app_version,
        "description": "Question and answer platform API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("stackit.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
