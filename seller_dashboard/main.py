"""
FastAPI Production Application

Main entry point for the Seller Dashboard API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from seller_dashboard.config import get_settings
from seller_dashboard.config.logging import configure_logging
from seller_dashboard.database.connection import init_database, close_database
from seller_dashboard.reporting.errors import ReportingError
from seller_dashboard.serving.cache import init_redis, close_redis
from seller_dashboard.serving.api.middleware import (
    RequestLoggingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from seller_dashboard.serving.api.routes import health_router, sellers_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Seller Dashboard API", environment=settings.app_env)

    try:
        await init_database()
    except Exception as e:
        logger.warning("Database init failed", error=str(e))

    if settings.redis.enabled:
        try:
            await init_redis()
        except Exception as e:
            logger.warning("Redis init failed, dashboard caching disabled", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_database()
    await close_redis()


app = FastAPI(
    title="Seller Dashboard API",
    description="Seller analytics and reporting for the auto-parts marketplace",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(ReportingError)
async def reporting_error_handler(request: Request, exc: ReportingError) -> JSONResponse:
    """Render reporting errors as the bilingual error envelope."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log("Request rejected", code=exc.code, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "messageAr": "طلب غير صالح",
                "details": {"errors": jsonable_encoder(exc.errors())},
            },
        },
    )


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Compression
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    RateLimitMiddleware,
    max_requests=settings.security.rate_limit_requests,
    window_seconds=settings.security.rate_limit_window_seconds,
)

# API routes
app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(sellers_router, prefix="/api/v1/sellers", tags=["Sellers"])


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Seller Dashboard API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
