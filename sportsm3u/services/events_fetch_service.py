"""
Events Fetch Service

Retrieves the live events list through the fetch proxy, serving it from the
in-process cache while the last snapshot is fresh.
"""
from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from sportsm3u.config import settings
from sportsm3u.schemas import Event, EventsPayload
from sportsm3u.services.events_cache import EventsCache
from sportsm3u.services.fetch_types import UpstreamError
from sportsm3u.utils.logging_helpers import log_cache_bypass, log_cache_hit, log_cache_miss


logger = logging.getLogger(__name__)

# Field of the proxy envelope holding the original response body
PROXY_CONTENTS_FIELD = "contents"


async def fetch_events(
    client: httpx.AsyncClient,
    cache: EventsCache,
    *,
    bypass_cache: bool = False
) -> list[Event]:
    """
    Get the live events, from cache when fresh, otherwise from upstream

    Args:
        client: HTTP client used for the upstream request
        cache: Events cache owned by the application
        bypass_cache: Discard the cached snapshot before reading

    Returns:
        Events in upstream order

    Raises:
        UpstreamError: If the request, the proxy, or payload parsing fails
    """
    if bypass_cache:
        log_cache_bypass(logger)
        cache.invalidate()

    cached = cache.get_fresh()
    if cached is not None:
        log_cache_hit(logger, cache.age_minutes())
        return list(cached.events)

    log_cache_miss(logger)
    payload = await request_events_payload(client)

    cache.store(payload)
    logger.info(f"Cache updated with {len(payload.events)} events")

    return list(payload.events)


async def request_events_payload(
    client: httpx.AsyncClient,
    api_url: str | None = None,
    proxy_url: str | None = None
) -> EventsPayload:
    """
    Perform a single proxied request to the events API

    The proxy answers with a JSON envelope whose 'contents' field carries the
    original response body as a string. No retries are made.

    Args:
        client: HTTP client used for the request
        api_url: Events endpoint (defaults to settings)
        proxy_url: Fetch proxy endpoint (defaults to settings)

    Returns:
        Validated events payload

    Raises:
        UpstreamError: On transport errors, non-success status, or malformed payloads
    """
    api_url = api_url or settings.events_api_url
    proxy_url = proxy_url or settings.fetch_proxy_url

    logger.debug(f"Requesting {api_url} via {proxy_url}")

    try:
        response = await client.get(
            proxy_url,
            params={"url": api_url},
            headers={"Accept": "application/json"},
            timeout=settings.fetch_timeout_sec,
        )
    except httpx.TimeoutException as e:
        raise UpstreamError(
            f"Request to events API timed out after {settings.fetch_timeout_sec:g}s"
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamError(f"Request to events API failed: {type(e).__name__}: {e}") from e

    if not response.is_success:
        raise UpstreamError(f"HTTP error! status: {response.status_code}")

    try:
        envelope = response.json()
    except ValueError as e:
        raise UpstreamError("Invalid JSON from proxy") from e

    if not isinstance(envelope, dict):
        raise UpstreamError("Invalid JSON from proxy")

    contents = envelope.get(PROXY_CONTENTS_FIELD)
    if not contents:
        raise UpstreamError("No content returned from proxy")

    try:
        data = json.loads(contents)
    except (TypeError, ValueError) as e:
        raise UpstreamError("Invalid JSON in proxy contents") from e

    if not isinstance(data, dict):
        raise UpstreamError("Unexpected events payload: expected a JSON object")

    try:
        payload = EventsPayload.model_validate(data)
    except ValidationError as e:
        raise UpstreamError(f"Unexpected events payload: {e.error_count()} validation error(s)") from e

    logger.debug(f"Received {len(payload.events)} events from upstream")
    return payload
