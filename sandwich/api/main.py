"""FastAPI application for the sandwich planner."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sandwich.api.endpoints import router
from sandwich.api.schemas import ErrorResponse
from sandwich.errors import CoordinationError, PlanError, SandwichError, SandwichNotFound

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SANDWICH_HOST", "0.0.0.0")
PORT = int(os.environ.get("SANDWICH_PORT", "8000"))
DEBUG = os.environ.get("SANDWICH_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="Sandwich Planner",
    description="Front-run / back-run planning and two-phase coordination",
    version="0.1.0",
)


def status_for(err: SandwichError) -> int:
    if isinstance(err, SandwichNotFound):
        return 404
    if isinstance(err, CoordinationError):
        return 409
    if isinstance(err, PlanError):
        return 422
    return 400


@app.exception_handler(SandwichError)
async def sandwich_error_handler(request: Request, exc: SandwichError) -> JSONResponse:
    """Map typed errors to {"error": code, "detail": message}."""
    logger.info("request_failed", path=request.url.path, error=exc.code, detail=str(exc))
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(error=exc.code, detail=str(exc)).model_dump(),
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Domain values that pass schema checks but violate a constructor invariant."""
    logger.info("request_invalid", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="invalid_request", detail=str(exc)).model_dump(),
    )


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the sandwich planner API server.

    Configuration via environment variables:
    - SANDWICH_HOST: Host to bind to (default: 0.0.0.0)
    - SANDWICH_PORT: Port to bind to (default: 8000)
    - SANDWICH_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "sandwich.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
