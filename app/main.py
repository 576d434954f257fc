"""
Employee API - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import httpx
import logging

from app.api import employees
from app.config import settings
from app.domain.entities import InvalidArgumentError, RateLimitedError, UpstreamError
from app.version import __version__

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Fixed user-facing messages - no internal detail leaks into responses
INVALID_REQUEST_MESSAGE = "Invalid employee ID or request data"
RATE_LIMITED_MESSAGE = "Service temporarily unavailable due to rate limiting"
UPSTREAM_ERROR_MESSAGE = "External service error"
INTERNAL_ERROR_MESSAGE = "Internal server error"
NOT_FOUND_MESSAGE = "Endpoint not found"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - owns the shared upstream HTTP client"""
    # Startup
    logger.info("🚀 Starting Employee API")
    logger.info(f"📦 Version: {__version__}")
    logger.info(f"📝 Environment: {settings.environment}")
    logger.info(f"🔗 Upstream: {settings.upstream_base_url}")

    app.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(
            settings.upstream_read_timeout,
            connect=settings.upstream_connect_timeout
        ),
        headers={"Content-Type": "application/json"}
    )
    logger.info("✅ Upstream HTTP client ready")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.http_client.aclose()


app = FastAPI(
    title="Employee API",
    description="Employee queries and mutations proxied to the mock employee service",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


# ============================================
# Exception Handlers
# ============================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid request bodies answer 400 like invalid ids"""
    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_REQUEST_MESSAGE}
    )


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.warning(f"Bad request: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_REQUEST_MESSAGE}
    )


@app.exception_handler(RateLimitedError)
async def rate_limited_handler(request: Request, exc: RateLimitedError):
    logger.warning(f"Service temporarily unavailable due to rate limiting: {exc}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": RATE_LIMITED_MESSAGE}
    )


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error(f"Upstream error: {exc.status_code} - {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": UPSTREAM_ERROR_MESSAGE}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning(f"Invalid endpoint requested: {request.method} {request.url.path}")
        return JSONResponse(status_code=exc.status_code, content={"detail": NOT_FOUND_MESSAGE})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unexpected error for {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_MESSAGE}
    )


# Register employee routes
app.include_router(employees.router, tags=["employees"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": "Employee API",
        "version": __version__,
        "status": "running",
        "environment": settings.environment
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Does not call upstream - a throttled upstream should not mark this
    service unhealthy.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
