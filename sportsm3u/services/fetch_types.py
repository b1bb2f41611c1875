"""
Shared types used across the events fetch and playlist pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass


class UpstreamError(Exception):
    """Raised when the events API cannot be reached or returns unusable data."""


@dataclass(slots=True, frozen=True)
class StreamHeaders:
    """HTTP headers players must send to the stream hosts."""
    user_agent: str
    referer: str
    icy_metadata: str = "1"


@dataclass(slots=True, frozen=True)
class PlaylistEntry:
    """One playable stream of an event, rendered as a single playlist item."""
    title: str
    group: str
    url: str
    logo: str = ""


__all__ = ["UpstreamError", "StreamHeaders", "PlaylistEntry"]
