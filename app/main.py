"""
Africure Pharma API - FastAPI Application
Main application entry point
"""
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time
from typing import Callable, Optional

import httpx

from app.config import Settings, settings as default_settings
from app.api import auth, careers, contact
from app.core.dependencies import rate_limit
from app.core.exceptions import PayloadTooLargeError
from app.core.errors import error_response, register_exception_handlers
from app.schemas.common import utc_now_iso
from app.services import (
    CareerService, ContactService, HealthService, PersistenceGateway,
    RateLimiter, ResumeStorage, SupabaseClient
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; img-src 'self' data: https:"
    ),
}


def build_rate_limiters(settings: Settings, clock: Callable[[], float] = time.monotonic) -> dict:
    """One limiter per scope, all owned by the app instance"""
    enabled = settings.ENABLE_RATE_LIMITING
    return {
        "api": RateLimiter(
            settings.RATE_LIMIT_WINDOW_SECONDS,
            settings.RATE_LIMIT_MAX_REQUESTS,
            clock=clock,
            enabled=enabled
        ),
        "contact": RateLimiter(
            settings.CONTACT_RATE_LIMIT_WINDOW_SECONDS,
            settings.CONTACT_RATE_LIMIT_MAX_REQUESTS,
            message="Too many contact form submissions from this IP, please try again later.",
            clock=clock,
            enabled=enabled
        ),
        "career": RateLimiter(
            settings.CAREER_RATE_LIMIT_WINDOW_SECONDS,
            settings.CAREER_RATE_LIMIT_MAX_REQUESTS,
            message="Too many career applications from this IP. Please try again later.",
            clock=clock,
            enabled=enabled
        ),
    }


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable[[], float] = time.monotonic
) -> FastAPI:
    """
    Build the application

    Args:
        settings: Configuration, defaults to the environment-loaded settings
        transport: Optional httpx transport for the Supabase client
        clock: Time source for the rate limiters
    """
    settings = settings or default_settings

    supabase = SupabaseClient(
        settings.SUPABASE_URL,
        settings.supabase_key,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        transport=transport
    )
    gateway = PersistenceGateway(supabase)
    storage = ResumeStorage(supabase, settings.RESUME_BUCKET)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler
        Runs on startup and shutdown
        """
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})...")

        status_code, report = await app.state.health_service.check()
        if status_code == 200:
            logger.info("Supabase connection established successfully")
        else:
            logger.warning("Supabase connection failed, but server will start anyway")

        yield

        logger.info(f"Shutting down {settings.PROJECT_NAME}...")
        await supabase.aclose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Contact form and career application API for the Africure Pharma website",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.rate_limiters = build_rate_limiters(settings, clock)
    app.state.contact_service = ContactService(gateway)
    app.state.career_service = CareerService(gateway, storage, settings)
    app.state.health_service = HealthService(gateway, settings)

    # CORS: any origin while developing, the configured list otherwise
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def guard_and_log(request: Request, call_next):
        """Body size ceiling, security headers and access logging"""
        started = time.perf_counter()

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_BODY_SIZE:
            # Rendered here: errors raised in middleware skip the app's handlers
            too_large = PayloadTooLargeError(
                f"Request body exceeds {settings.MAX_BODY_SIZE // (1024 * 1024)}MB",
                detail=f"Content-Length {content_length} over limit {settings.MAX_BODY_SIZE}"
            )
            response = error_response(too_large.status_code, too_large.message, settings, detail=too_large.detail)
        else:
            response = await call_next(request)

        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)

        if settings.request_logging_enabled:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response

    register_exception_handlers(app, settings)

    # Include routers
    api_limit = [Depends(rate_limit("api"))]
    app.include_router(contact.router, prefix=settings.API_PREFIX, dependencies=api_limit)
    app.include_router(careers.router, prefix=settings.API_PREFIX, dependencies=api_limit)

    # Admin routes always sit behind the bearer-token check
    if settings.ADMIN_ROUTES_ENABLED:
        app.include_router(auth.router, prefix=settings.API_PREFIX, dependencies=api_limit)
        app.include_router(contact.admin_router, prefix=settings.API_PREFIX)
        app.include_router(careers.admin_router, prefix=settings.API_PREFIX)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint - API information"""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "running",
            "endpoints": {
                "contact": f"{settings.API_PREFIX}/contact",
                "careers": f"{settings.API_PREFIX}/careers",
                "health": "/health"
            }
        }

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Liveness check; does not touch the database"""
        return {
            "status": "OK",
            "message": f"{settings.PROJECT_NAME} is running",
            "timestamp": utc_now_iso(),
            "environment": settings.ENVIRONMENT,
            "version": settings.VERSION
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.is_development
    )
