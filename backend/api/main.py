"""
Main FastAPI application entry point.

Responsibilities:
- Initialize FastAPI app
- Configure logging
- Include routers
- Setup startup events
"""
from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from access_control import SafeOutputPermissionError
from api.routes import safe_outputs
from config import log_missing_env_vars, settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
)

app = FastAPI(title="Safe Output Guard API", version="1.0.0")


@app.exception_handler(SafeOutputPermissionError)
async def permission_error_handler(request: Request, exc: SafeOutputPermissionError) -> JSONResponse:
    """Surface blocked safe outputs with their remediation report."""
    return JSONResponse(
        status_code=403,
        content={"detail": exc.report},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions."""
    logging.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routes
app.include_router(safe_outputs.router, prefix="/api/safe-outputs", tags=["safe-outputs"])


@app.on_event("startup")
async def startup() -> None:
    log_missing_env_vars(logging.getLogger("config"))
    logging.info("Safe output guard ready (environment=%s)", settings.ENVIRONMENT)


@app.get("/")
async def root_health_check() -> dict[str, str]:
    """Root endpoint exposing the health check payload."""
    logging.info("Root health check requested")
    return await health_check()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    logging.info("Health check requested")
    return {"status": "ok"}
