"""FastAPI application for the FloorLink API.

Provides the main application instance with routers, middleware,
and exception handlers configured.
"""

import logging
import os
import sys
import time as _time
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from fastapi import FastAPI, Request

# Configure logging to stdout for uvicorn to capture
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
# uvicorn's "trace" level has no stdlib counterpart
_log_level = os.environ.get("FLOORLINK_SERVER_LOG_LEVEL", "info").upper()
logging.getLogger("src").setLevel("DEBUG" if _log_level == "TRACE" else _log_level)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import edi, odoo, shipping
from src.api.schemas import ErrorResponse
from src.errors import FloorLinkError
from src.odoo.client import OdooError
from src.odoo.provider import reset_odoo_client

logger = logging.getLogger(__name__)

_startup_time: float = 0.0


def _parse_allowed_origins() -> list[str]:
    """Parse comma-separated CORS allowlist from ALLOWED_ORIGINS env var."""
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _error_content(exc: FloorLinkError) -> dict:
    body = ErrorResponse(
        error_code=exc.code,
        message=exc.message,
        remediation=exc.remediation,
        details=exc.details or None,
        fields=exc.fields or None,
    )
    # "fields" appears only when the error names document fields.
    return body.model_dump(exclude={"fields"} if body.fields is None else None)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async lifespan: record start time, close the Odoo client on shutdown."""
    global _startup_time

    _startup_time = _time.time()
    logger.info("FloorLink API started")

    yield

    await reset_odoo_client()


app = FastAPI(
    title="FloorLink API",
    description="EDI 850/810/856/997 generation and transmission for the flooring storefront",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS allowlist is env-driven. If unset, CORS is disabled (same-origin only).
allowed_origins = _parse_allowed_origins()
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )


@app.exception_handler(OdooError)
async def odoo_error_handler(request: Request, exc: OdooError) -> JSONResponse:
    """Render failures of the Odoo server as 502 Bad Gateway."""
    logger.warning("Odoo error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content=_error_content(exc))


@app.exception_handler(FloorLinkError)
async def floorlink_error_handler(
    request: Request, exc: FloorLinkError
) -> JSONResponse:
    """Handle FloorLinkError exceptions with consistent format.

    Args:
        request: The incoming request.
        exc: The FloorLinkError exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(status_code=400, content=_error_content(exc))


# Include routers
app.include_router(edi.router, prefix="/api/v1")
app.include_router(shipping.router, prefix="/api/v1")
app.include_router(odoo.router, prefix="/api/v1")


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status, version and uptime.
    """
    uptime = int(_time.time() - _startup_time) if _startup_time else 0
    try:
        version = _pkg_version("floorlink")
    except PackageNotFoundError:
        version = "unknown"
    return {
        "status": "healthy",
        "version": version,
        "uptime_seconds": uptime,
    }


@app.get("/api")
def api_root() -> dict:
    """API root with links to docs."""
    return {
        "name": "FloorLink API",
        "version": "0.1.0",
        "docs": "/docs",
        "redoc": "/redoc",
    }
