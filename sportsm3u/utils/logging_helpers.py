"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_cache_hit(logger: logging.Logger, age_minutes: int) -> None:
    """Log that cached events are being served."""
    logger.info(f"Using cached events (age: {age_minutes} minutes)")


def log_cache_miss(logger: logging.Logger) -> None:
    """Log that the events must be fetched from upstream."""
    logger.info("Cache miss or expired, fetching fresh events...")


def log_cache_bypass(logger: logging.Logger) -> None:
    """Log an explicit cache bypass request."""
    logger.info("Cache bypass requested")


def log_playlist_request(
    logger: logging.Logger,
    timezone_offset: float,
    player_type: str
) -> None:
    """
    Log the resolved parameters of a playlist request.

    Args:
        logger: Logger instance
        timezone_offset: Display offset in hours
        player_type: Resolved player type
    """
    logger.info(f"Fetching live events (timezone: {timezone_offset:g}, player: {player_type})")


def log_playlist_summary(
    logger: logging.Logger,
    events_count: int,
    cache_age_minutes: int,
    player_type: str
) -> None:
    """
    Log playlist generation summary.

    Args:
        logger: Logger instance
        events_count: Number of events rendered
        cache_age_minutes: Age of the events snapshot
        player_type: Resolved player type
    """
    logger.info(
        f"Generated playlist with {events_count} events "
        f"(cache age: {cache_age_minutes} min, type: {player_type})"
    )
