"""
Desk Booking API - Main Application Entry Point

An office seat-booking service:
- One ACTIVE reservation per seat per day, one desk per person per day
- Expiry sweep moving past bookings to COMPLETED (on read, cron, interval)
- Admin seat inventory and occupancy statistics
- Structured logging with request correlation and Prometheus metrics
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deskbook.core.config import get_settings
from deskbook.core.logging import setup_logging, get_logger
from deskbook.core.metrics import metrics_endpoint
from deskbook.api.router import api_router
from deskbook.api.middleware import RequestLoggingMiddleware
from deskbook.api.exception_handlers import register_exception_handlers
from deskbook.db.session import AsyncSessionLocal, engine
from deskbook.services.sweep_service import run_sweep_loop

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

    sweep_task = None
    if settings.SWEEP_INTERVAL_SECONDS > 0:
        sweep_task = asyncio.create_task(
            run_sweep_loop(AsyncSessionLocal, settings.SWEEP_INTERVAL_SECONDS)
        )

    yield

    if sweep_task:
        sweep_task.cancel()
        with suppress(asyncio.CancelledError):
            await sweep_task
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Office desk booking API with per-day seat reservations",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
