"""
Medida - Main Application.

FastAPI application exposing measurement tables, product search and user
administration, with feature flags and role guards.
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from uuid import UUID, uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medida import __version__
from medida.config import get_settings
from medida.exceptions import MedidaException
from medida.schemas import ErrorDetail, ErrorResponse, HealthResponse

# Import module routers
from medida.modules import search_router, tables_router, users_router

# Configure standard logging
logging.basicConfig(
    level=get_settings().app_log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("medida")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(
        f"Starting Medida API v{__version__} "
        f"[env={settings.app_env}] "
        f"[features={settings.features.to_dict()}]"
    )
    yield
    logger.info("Shutting down Medida API")


# Create FastAPI application
app = FastAPI(
    title="Medida API",
    description="Measurement tables with role-gated editing and cross-table product search.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.info(f"[{request_id}] {request.method} {request.url.path}")

    response = await call_next(request)

    logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}")

    return response


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests."""
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


def _request_uuid(request: Request) -> UUID | None:
    """Request id set by the middleware, if it is a valid UUID."""
    try:
        return UUID(getattr(request.state, "request_id", None))
    except (ValueError, TypeError):
        return None


@app.exception_handler(MedidaException)
async def medida_exception_handler(request: Request, exc: MedidaException):
    """Handle Medida custom exceptions."""
    request_id = _request_uuid(request)

    logger.warning(f"MedidaException: {exc.code} - {exc.message}")

    body = ErrorResponse(
        error=ErrorDetail(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            request_id=request_id,
        )
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = _request_uuid(request)

    logger.error(f"Unhandled exception on {request.url.path}")
    logger.error(f"Exception type: {type(exc).__name__}")
    logger.error(f"Traceback:\n{traceback.format_exc()}")

    body = ErrorResponse(
        error=ErrorDetail(
            code="INTERNAL_ERROR",
            message=str(exc) if get_settings().app_debug else "An unexpected error occurred",
            request_id=request_id,
        )
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=__version__,
        features=settings.features.to_dict(),
        app_env=settings.app_env,
        is_production=settings.is_production,
    )


# =============================================================================
# Register Module Routers
# =============================================================================

app.include_router(tables_router)
app.include_router(search_router)
app.include_router(users_router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint redirect to docs."""
    return {"message": "Welcome to Medida API", "docs": "/docs"}
