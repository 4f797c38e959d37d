"""
HVAC Dispatch API - Main Application

SECURITY FEATURES:
- Conditional API docs (disabled in production by default)
- Structured logging without sensitive data
- Production-hardened configuration
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.api.router import api_router
from app.config import settings
from app.database import init_db
from app.exceptions import register_exception_handlers
from app.middleware.correlation import CorrelationIdMiddleware, CorrelationLogFilter
from app.middleware.timeout import RequestTimeoutMiddleware
from app.services.supabase_auth import SupabaseAuthClient

APP_VERSION = "1.0.0"

# Configure secure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(CorrelationLogFilter())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting HVAC Dispatch API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    # SECURITY: Don't log full database URL, just the driver
    logger.info(f"Database driver: {settings.DATABASE_URL.split('://', 1)[0]}")

    try:
        await init_db()
    except Exception as e:
        # SECURITY: Don't log full exception details which may contain credentials
        logger.error(f"Database initialization failed: {type(e).__name__}")
        raise
    logger.info("Database initialized successfully")

    app.state.auth_client = SupabaseAuthClient.from_settings(settings)
    if app.state.auth_client is None:
        logger.warning("Supabase is not configured; authenticated endpoints will return 503")
    elif not settings.SUPABASE_JWT_SECRET:
        logger.info("No JWT secret configured; tokens are verified against the provider")

    yield

    # Shutdown
    logger.info("Shutting down HVAC Dispatch API...")
    if app.state.auth_client is not None:
        await app.state.auth_client.aclose()


# SECURITY: Conditionally enable docs based on settings
docs_url = "/docs" if settings.DOCS_ENABLED else None
redoc_url = "/redoc" if settings.DOCS_ENABLED else None

app = FastAPI(
    title="HVAC Dispatch API",
    description="Field-service management for HVAC contractors",
    version=APP_VERSION,
    docs_url=docs_url,
    redoc_url=redoc_url,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Middleware: the last one added runs first
app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS)
app.add_middleware(CorrelationIdMiddleware)

# CORS middleware
# SECURITY: Restrict origins to known frontend URLs
allowed_origins = [settings.FRONTEND_URL]
if not settings.is_production:
    allowed_origins.extend([
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "X-Request-ID"],
)

# Include routers
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    response = {
        "name": "HVAC Dispatch API",
        "version": APP_VERSION,
        "health": "/health",
    }
    # Only include docs link if enabled
    if settings.DOCS_ENABLED:
        response["docs"] = "/docs"
    return response


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# For running with uvicorn directly (development only)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5001,
        reload=settings.DEBUG,
    )
