"""
FastAPI dependency providers

The events cache is created once per application in the lifespan and stored
on app.state; routes receive it (and a per-request HTTP client) through these
providers, so tests can swap either one with dependency_overrides.
"""
from collections.abc import AsyncIterator
import logging

import httpx
from fastapi import Request

from sportsm3u.config import settings
from sportsm3u.services.events_cache import EventsCache


logger = logging.getLogger(__name__)


def create_events_cache() -> EventsCache:
    """Build the application's events cache from settings."""
    return EventsCache(ttl_seconds=settings.cache_ttl_sec)


def get_events_cache(request: Request) -> EventsCache:
    """Get the events cache created by the application lifespan."""
    return request.app.state.events_cache


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client for upstream requests, closed when the request ends."""
    async with httpx.AsyncClient(timeout=settings.fetch_timeout_sec) as client:
        yield client
