from enum import Enum
from typing import Any
import logging
import math
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE_OFFSET = -5.0
MIN_TIMEZONE_OFFSET = -12.0
MAX_TIMEZONE_OFFSET = 14.0
CACHE_BYPASS_VALUE = "1"

# Leading float literal, as read by JavaScript parseFloat
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class PlayerType(str, Enum):
    """Media players with dedicated playlist directives"""
    VLC = "vlc"
    KODI = "kodi"
    TIVIMATE = "tivimate"

    @classmethod
    def resolve(cls, value: Any) -> "PlayerType":
        """Case-insensitive lookup; unknown or missing values resolve to VLC"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        return cls.VLC


def _string_or_none(value: Any) -> str | None:
    """Coerce anything that is not a string to None"""
    return value if isinstance(value, str) else None


def _mapping_or_none(value: Any) -> Any:
    """Drop nested objects that are not JSON objects"""
    return value if isinstance(value, (dict, BaseModel)) else None


class UpstreamModel(BaseModel):
    """Base for records owned by the events API: immutable, unknown fields ignored"""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Category(UpstreamModel):
    """League/category attached to an event channel"""
    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str | None:
        return _string_or_none(v)


class EventChannel(UpstreamModel):
    """Stream servers and category of an event"""
    server1URL: str | None = None
    server2URL: str | None = None
    server3URL: str | None = None
    tv_category: Category | None = Field(None, alias="TVCategory")

    @field_validator("server1URL", "server2URL", "server3URL", mode="before")
    @classmethod
    def coerce_links(cls, v: Any) -> str | None:
        return _string_or_none(v)

    @field_validator("tv_category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Any:
        return _mapping_or_none(v)


class Event(UpstreamModel):
    """Live event as returned by the events API"""
    match_name: str | None = Field(None, description="Event title, e.g. 'Team A vs Team B'")
    date: str | None = Field(None, description="ISO8601 UTC start time")
    competitors1_logo: str | None = Field(None, description="Logo URL")
    channel: EventChannel | None = None

    @field_validator("match_name", "date", "competitors1_logo", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str | None:
        return _string_or_none(v)

    @field_validator("channel", mode="before")
    @classmethod
    def coerce_channel(cls, v: Any) -> Any:
        return _mapping_or_none(v)


class EventsPayload(UpstreamModel):
    """Inner payload of the events API response"""
    events: list[Event] = Field(default_factory=list)

    @field_validator("events", mode="before")
    @classmethod
    def drop_malformed_events(cls, v: Any) -> Any:
        """Treat null as empty and skip entries that are not objects"""
        if v is None:
            return []
        if not isinstance(v, list):
            return v

        events = [item for item in v if isinstance(item, (dict, BaseModel))]
        if len(events) != len(v):
            logger.warning(f"Skipped {len(v) - len(events)} malformed event entries")
        return events


class PlaylistRequest(BaseModel):
    """Resolved playlist query parameters

    Invalid values never raise: they fall back to the defaults.
    """
    timezone_offset: float = Field(DEFAULT_TIMEZONE_OFFSET, description="Display offset in hours")
    player_type: PlayerType = Field(PlayerType.VLC, description="Target player")
    bypass_cache: bool = Field(False, description="Discard the cached events before fetching")

    @field_validator("timezone_offset", mode="before")
    @classmethod
    def resolve_timezone_offset(cls, v: Any) -> float:
        """Accept numbers within [-12, 14], otherwise use the default

        Strings are read up to the end of their leading number, so '5abc' is 5.
        """
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            offset = float(v)
        elif isinstance(v, str):
            match = _FLOAT_PREFIX.match(v)
            if match is None:
                return DEFAULT_TIMEZONE_OFFSET
            offset = float(match.group(1))
        else:
            return DEFAULT_TIMEZONE_OFFSET

        if not math.isfinite(offset) or not MIN_TIMEZONE_OFFSET <= offset <= MAX_TIMEZONE_OFFSET:
            return DEFAULT_TIMEZONE_OFFSET
        return offset

    @field_validator("player_type", mode="before")
    @classmethod
    def resolve_player_type(cls, v: Any) -> PlayerType:
        """Case-insensitive match against the known players, otherwise VLC"""
        return PlayerType.resolve(v)

    @classmethod
    def from_query(cls, tz: str | None, type: str | None, nocache: str | None) -> "PlaylistRequest":
        """Build from raw query string values"""
        return cls(
            timezone_offset=tz,
            player_type=type,
            bypass_cache=nocache == CACHE_BYPASS_VALUE,
        )


class CacheStatus(BaseModel):
    """Events cache state reported by the health endpoint"""
    has_snapshot: bool
    age_minutes: int
    ttl_seconds: int


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "ok"
    cache: CacheStatus
