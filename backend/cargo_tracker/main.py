"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from cargo_tracker.api import shipments
from cargo_tracker.api.errors import register_error_handlers
from cargo_tracker.config import settings
from cargo_tracker.db.session import engine
from cargo_tracker.models.base import Base
from cargo_tracker.models import tables  # noqa: F401

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    # Create tables if they don't exist; waypoint geometry needs PostGIS
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Cargo Tracker started (%s)", settings.environment)

    yield

    await engine.dispose()
    logger.info("Cargo Tracker shut down")


app = FastAPI(
    title="Cargo Tracker API",
    description="Cargo shipment tracking with route-based ETA estimation",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api-docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(shipments.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
