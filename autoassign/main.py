"""Enquiry auto-assignment — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from autoassign.adapters.persistence.database import engine
from autoassign.config import settings
from autoassign.infrastructure.api.routes_assignments import router as assignments_router
from autoassign.infrastructure.api.routes_health import router as health_router
from autoassign.infrastructure.api.routes_rules import router as rules_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Enquiry Auto-Assignment",
        description="Rule-based staff assignment for inbound travel enquiries",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the back-office dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(rules_router, prefix="/api")

    return app


app = create_app()
