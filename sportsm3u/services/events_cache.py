"""
Events Cache

Holds the most recently fetched events payload for the life of the process.
Replaces module-level cache variables with an object owned by the application
and injected into the fetch routine.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from sportsm3u.schemas import EventsPayload


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CachedSnapshot:
    """A full events payload and the moment it was fetched."""
    payload: EventsPayload
    fetched_at: float


class EventsCache:
    """
    Single-snapshot cache with a fixed time-to-live.

    The snapshot is only ever replaced as a whole. There is no lock: two
    requests missing the cache at the same time may both fetch and both
    store, and the last write wins. Equally fresh payloads are
    interchangeable, so this race is accepted.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_seconds: Maximum snapshot age before it is considered stale
            clock: Monotonic time source in seconds (overridable in tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: CachedSnapshot | None = None

    @property
    def snapshot(self) -> CachedSnapshot | None:
        return self._snapshot

    def age_seconds(self) -> float | None:
        """Seconds since the last successful fetch, None when empty."""
        if self._snapshot is None:
            return None
        return max(0.0, self._clock() - self._snapshot.fetched_at)

    def age_minutes(self) -> int:
        """Whole minutes since the last successful fetch (rounded half up), 0 when empty."""
        age = self.age_seconds()
        if age is None:
            return 0
        return int(age / 60 + 0.5)

    def get_fresh(self) -> EventsPayload | None:
        """Return the cached payload if its age is strictly below the TTL."""
        age = self.age_seconds()
        if age is None or age >= self.ttl_seconds:
            return None
        return self._snapshot.payload

    def store(self, payload: EventsPayload) -> CachedSnapshot:
        """Replace the snapshot with a freshly fetched payload."""
        self._snapshot = CachedSnapshot(payload=payload, fetched_at=self._clock())
        logger.debug("Events cache updated with %s events", len(payload.events))
        return self._snapshot

    def invalidate(self) -> None:
        """Discard the snapshot so the next read goes to the network."""
        self._snapshot = None
