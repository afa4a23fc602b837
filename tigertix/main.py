"""
TigerTix Booking API - Main Application Entry Point

One FastAPI app serving the client booking, admin event and authentication
routers, plus the chat assistant. Ticket inventory is protected by the
booking service's exclusive transaction; see services/booking_service.py.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.api.middleware import RequestLoggingMiddleware
from tigertix.api.router import api_router
from tigertix.core.config import get_settings
from tigertix.core.exceptions import register_exception_handlers
from tigertix.core.logging import get_logger, setup_logging
from tigertix.core.metrics import metrics_endpoint
from tigertix.db.init_db import init_db
from tigertix.db.session import engine, get_db
from tigertix.services.cache_service import close_redis, get_cache_stats, get_redis

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    await init_db(engine, seed=settings.DB_SEED_EVENTS)

    if await get_redis():
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event ticket booking API with oversell-safe booking confirmation",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a database round trip; the cache is optional and never fails the check."""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        get_logger(__name__).error("health_database_error", error=str(e))
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database,
        "cache": await get_cache_stats(),
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
