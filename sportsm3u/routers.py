from typing import Annotated
import logging

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from sportsm3u import __version__
from sportsm3u.config import settings
from sportsm3u.dependencies import get_events_cache, get_http_client
from sportsm3u.schemas import CacheStatus, HealthResponse, PlaylistRequest
from sportsm3u.services import (
    EMPTY_PLAYLIST,
    EventsCache,
    UpstreamError,
    build_playlist,
    fetch_events,
)
from sportsm3u.utils.logging_helpers import log_playlist_request, log_playlist_summary


logger = logging.getLogger(__name__)

PLAYLIST_MEDIA_TYPE = "application/vnd.apple.mpegurl"

main_router = APIRouter()


@main_router.get("/")
async def root() -> dict:
    """Root endpoint with service information"""
    return {
        "service": "Sports M3U Playlist Service",
        "version": __version__,
        "endpoints": {
            "playlist": "/playlist - M3U playlist (query params: tz, type, nocache)",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health", response_model=HealthResponse)
async def health_check(
    cache: Annotated[EventsCache, Depends(get_events_cache)]
) -> HealthResponse:
    """Health check endpoint"""
    return HealthResponse(
        cache=CacheStatus(
            has_snapshot=cache.snapshot is not None,
            age_minutes=cache.age_minutes(),
            ttl_seconds=int(cache.ttl_seconds),
        )
    )


def _playlist_headers(cache_age_minutes: int, player_type: str) -> dict[str, str]:
    return {
        "Content-Disposition": f'attachment; filename="{settings.playlist_filename}"',
        "Cache-Control": f"public, max-age={settings.playlist_max_age_sec}",
        "X-Cache-Age": str(cache_age_minutes),
        "X-Player-Type": player_type,
    }


def _error_response(message: str) -> PlainTextResponse:
    return PlainTextResponse(f"Error generating playlist: {message}", status_code=500)


@main_router.get("/playlist")
@main_router.get("/api/playlist")
async def get_playlist(
    cache: Annotated[EventsCache, Depends(get_events_cache)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    tz: Annotated[str | None, Query(description="Timezone offset in hours, -12 to 14 (default -5, ET)")] = None,
    type: Annotated[str | None, Query(description="Player type: vlc (default), kodi or tivimate")] = None,
    nocache: Annotated[str | None, Query(description="Set to '1' to bypass the events cache")] = None,
) -> Response:
    """
    Generate the live events playlist

    Invalid tz or type values fall back to the defaults. Upstream failures
    are reported as a plain-text 500 response.
    """
    params = PlaylistRequest.from_query(tz, type, nocache)
    player_type = params.player_type.value

    try:
        log_playlist_request(logger, params.timezone_offset, player_type)

        events = await fetch_events(client, cache, bypass_cache=params.bypass_cache)
        cache_age = cache.age_minutes()
        headers = _playlist_headers(cache_age, player_type)

        if not events:
            logger.info("No live events found")
            return Response(content=EMPTY_PLAYLIST, media_type=PLAYLIST_MEDIA_TYPE, headers=headers)

        playlist = build_playlist(events, params.timezone_offset, params.player_type)
        log_playlist_summary(logger, len(events), cache_age, player_type)

        return Response(content=playlist, media_type=PLAYLIST_MEDIA_TYPE, headers=headers)

    except UpstreamError as e:
        logger.error(f"Upstream error: {e}")
        return _error_response(str(e))
    except Exception as e:
        logger.error(f"Unexpected error generating playlist: {e}", exc_info=True)
        return _error_response(str(e))
