"""Main FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fifa_tracker.api.routes import router
from fifa_tracker.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Log startup information and shutdown."""
    logger.info("Starting FIFA Tracker Stats Backend")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Team names: {settings.home_team_name} vs {settings.away_team_name}")
    yield
    logger.info("Shutting down FIFA Tracker Stats Backend")


# Create FastAPI app
app = FastAPI(
    title="FIFA Tracker Stats Backend",
    description="Derived match, player, ban and alcohol statistics for the FIFA tracker",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}

