from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from sportsm3u import __version__
from sportsm3u.config import setup_logging
from sportsm3u.dependencies import create_events_cache

from sportsm3u.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Sports M3U Playlist Service...")

    app.state.events_cache = create_events_cache()
    logger.info(
        "Events cache initialized (TTL: %ss)",
        app.state.events_cache.ttl_seconds,
    )

    logger.info("Sports M3U Playlist Service started successfully")

    yield

    logger.info("Shutting down Sports M3U Playlist Service...")
    logger.info("Sports M3U Playlist Service stopped")


app = FastAPI(
    title="Sports M3U Playlist Service",
    version=__version__,
    lifespan=lifespan
)

app.include_router(main_router)

