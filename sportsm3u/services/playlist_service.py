"""
Playlist Service

Renders live events as an M3U playlist with the request headers each
supported player needs to open the streams. Stream URLs are emitted as-is,
never proxied.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator
from urllib.parse import quote

from sportsm3u.config import settings
from sportsm3u.schemas import Event, EventChannel, PlayerType
from sportsm3u.services.fetch_types import PlaylistEntry, StreamHeaders
from sportsm3u.utils.timezone import EASTERN_STANDARD_OFFSET, format_event_time


logger = logging.getLogger(__name__)

PLAYLIST_HEADER = "#EXTM3U"
EMPTY_PLAYLIST = f"{PLAYLIST_HEADER}\n# No live events currently available"

DEFAULT_TITLE = "Unknown Event"
DEFAULT_GROUP = "LIVE"
LINK_FIELDS = ("server1URL", "server2URL", "server3URL")

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def default_stream_headers() -> StreamHeaders:
    """Stream headers from application settings"""
    return StreamHeaders(
        user_agent=settings.stream_user_agent,
        referer=settings.stream_referer,
        icy_metadata=settings.vlc_icy_metadata,
    )


def extract_link(channel: EventChannel | None, field: str) -> str | None:
    """
    Read one stream URL from an event channel

    Returns:
        The URL, or None when the field is missing, empty, not a string,
        or the literal 'null'
    """
    if channel is None:
        return None

    link = getattr(channel, field, None)
    if not isinstance(link, str) or not link:
        return None
    if link.lower() == "null":
        return None
    return link


def collect_links(event: Event) -> list[str]:
    """Valid stream URLs of an event, in server order"""
    links = (extract_link(event.channel, field) for field in LINK_FIELDS)
    return [link for link in links if link is not None]


def event_title(event: Event, timezone_offset: float) -> str:
    """Event name with the formatted start time appended when available"""
    title = (event.match_name or "").strip() or DEFAULT_TITLE

    time_formatted = format_event_time(event.date, timezone_offset)
    if time_formatted:
        title = f"{title} - {time_formatted}"
    return title


def event_group(event: Event) -> str:
    """League name used as the playlist group"""
    category = event.channel.tv_category if event.channel else None
    if category and category.name:
        return category.name
    return DEFAULT_GROUP


def build_entries(event: Event, timezone_offset: float = EASTERN_STANDARD_OFFSET) -> list[PlaylistEntry]:
    """One playlist entry per valid stream URL of the event"""
    title = event_title(event, timezone_offset)
    group = event_group(event)
    logo = event.competitors1_logo or ""

    links = collect_links(event)
    if not links:
        logger.debug(f"No stream links for event: {title}")

    return [PlaylistEntry(title=title, group=group, url=link, logo=logo) for link in links]


def _player_lines(entry: PlaylistEntry, player_type: PlayerType, headers: StreamHeaders) -> list[str]:
    if player_type is PlayerType.KODI:
        user_agent = quote(headers.user_agent, safe=_URI_COMPONENT_SAFE)
        referer = quote(headers.referer, safe=_URI_COMPONENT_SAFE)
        return [
            "#KODIPROP:inputstream=inputstream.adaptive",
            "#KODIPROP:inputstream.adaptive.manifest_type=hls",
            f"#KODIPROP:inputstream.adaptive.stream_headers=User-Agent={user_agent}&Referer={referer}",
            entry.url,
        ]

    if player_type is PlayerType.TIVIMATE:
        return [f"{entry.url}|User-Agent={headers.user_agent}|Referer={headers.referer}"]

    return [
        f"#EXTVLCOPT:http-user-agent={headers.user_agent}",
        f"#EXTVLCOPT:http-referrer={headers.referer}",
        f"#EXTVLCOPT:http-icy-metadata={headers.icy_metadata}",
        entry.url,
    ]


def render_entry(entry: PlaylistEntry, player_type: PlayerType, headers: StreamHeaders) -> list[str]:
    """Metadata line followed by the player-specific lines"""
    extinf = f'#EXTINF:-1 tvg-logo="{entry.logo}" group-title="{entry.group}",{entry.title}'
    return [extinf, *_player_lines(entry, player_type, headers)]


def iter_playlist_lines(
    events: Iterable[Event],
    timezone_offset: float = EASTERN_STANDARD_OFFSET,
    player_type: PlayerType = PlayerType.VLC,
    headers: StreamHeaders | None = None
) -> Iterator[str]:
    player_type = PlayerType.resolve(player_type)
    headers = headers or default_stream_headers()

    yield PLAYLIST_HEADER
    for event in events:
        for entry in build_entries(event, timezone_offset):
            yield from render_entry(entry, player_type, headers)


def build_playlist(
    events: Iterable[Event],
    timezone_offset: float = EASTERN_STANDARD_OFFSET,
    player_type: PlayerType = PlayerType.VLC,
    headers: StreamHeaders | None = None
) -> str:
    """
    Render events as M3U playlist text

    Args:
        events: Events in the order they should appear
        timezone_offset: Display offset in hours for event times
        player_type: Player whose directives are emitted
        headers: Stream request headers (defaults to settings)

    Returns:
        Playlist text starting with '#EXTM3U', lines joined by newlines
    """
    return "\n".join(iter_playlist_lines(events, timezone_offset, player_type, headers))
