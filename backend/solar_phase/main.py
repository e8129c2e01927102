"""FastAPI application factory and lifespan for the solar phase service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models.database import init_database, SessionLocal
from .services.recent_song import RecentSongService
from .services.sunrise_api import SunriseSunsetClient
from .services.time_of_day import TimeOfDayCalculator
from .services.transients import DatabaseTransientCache
from .api.router import api_router
from .api.dependencies import set_services

# Configure logging for our app (uvicorn only configures its own loggers)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:     %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: set up the transient store and services."""

    logger.info("Database: %s", settings.db_path)
    init_database()
    logger.info("Database initialized")

    cache = DatabaseTransientCache(SessionLocal)
    purged = cache.purge_expired()
    logger.info("Transient store ready (%d expired entries purged)", purged)

    client = SunriseSunsetClient()
    set_services(
        TimeOfDayCalculator(client, cache),
        RecentSongService(cache),
    )
    logger.info(
        "Solar time configured for (%s, %s), displayed in %s",
        settings.latitude, settings.longitude, settings.local_timezone,
    )

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Solar Phase",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=settings.host, port=settings.port)
