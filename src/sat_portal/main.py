"""
SAT Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- Identity event listeners
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from sat_portal import __version__
from sat_portal.api import api_router
from sat_portal.core.auth import CurrentUser
from sat_portal.core.config import settings
from sat_portal.core.database import async_session_maker, close_db, init_db
from sat_portal.core.redis import close_redis, init_redis, is_redis_available
from sat_portal.modules.auth.provider import IdentityEvent

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

audit_logger = logging.getLogger("sat_portal.audit")


def log_identity_event(event: IdentityEvent, user: CurrentUser | None) -> None:
    """Audit trail of sign-ins and sign-outs."""
    if user is None:
        audit_logger.info(f"{event.value}: anonymous session")
    else:
        audit_logger.info(f"{event.value}: {user.id} ({user.role.value})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection (optional cache)
    - Database connection
    """
    # Startup
    print(f"Starting SAT Portal API in {settings.python_env} mode...")

    app.state.identity_listeners = [log_identity_event]

    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        # Redis only backs the requirements cache
        print(f"[WARN] Redis unavailable, continuing without cache: {e}")

    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down SAT Portal API...")
    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="SAT Portal API",
    description="Thesis and internship administration portal API",
    version=__version__,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to SAT Portal API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check: the database must answer, Redis is reported but optional."""
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logging.getLogger(__name__).error(f"Readiness check failed: {e}")
        database = "error"
    return {
        "status": "ready" if database == "connected" else "not_ready",
        "database": database,
        "redis": "connected" if is_redis_available() else "unavailable",
    }
