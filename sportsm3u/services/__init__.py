"""
Services package for the playlist service

This package contains all business logic and service layer components.
"""
from sportsm3u.services.events_cache import EventsCache, CachedSnapshot
from sportsm3u.services.events_fetch_service import fetch_events
from sportsm3u.services.fetch_types import UpstreamError, PlaylistEntry, StreamHeaders
from sportsm3u.services.playlist_service import build_playlist, EMPTY_PLAYLIST

__all__ = [
    'EventsCache',
    'CachedSnapshot',
    'fetch_events',
    'UpstreamError',
    'PlaylistEntry',
    'StreamHeaders',
    'build_playlist',
    'EMPTY_PLAYLIST',
]
