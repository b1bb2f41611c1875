import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:144.0) "
    "Gecko/20100101 Firefox/144.0"
)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    events_api_url: str = "https://pixelsport.tv/backend/liveTV/events"
    fetch_proxy_url: str = "https://api.allorigins.win/get"
    fetch_timeout_sec: float = 15.0
    cache_ttl_sec: int = 2 * 60 * 60  # 2 hours

    stream_user_agent: str = DEFAULT_USER_AGENT
    stream_referer: str = "https://pixelsport.tv/"
    vlc_icy_metadata: str = "1"

    playlist_filename: str = "pixelsport.m3u8"
    playlist_max_age_sec: int = 60  # Client-side caching hint
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("events_api_url", "fetch_proxy_url", "stream_referer")
    @classmethod
    def validate_http_urls(cls, value: str, info) -> str:
        """Validate URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be HTTP/HTTPS: {value}")
        return value

    @field_validator("fetch_timeout_sec")
    @classmethod
    def validate_fetch_timeout(cls, value: float) -> float:
        """Validate upstream request timeout (seconds)."""
        if value <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        return value

    @field_validator("cache_ttl_sec")
    @classmethod
    def validate_cache_ttl(cls, value: int) -> int:
        """Validate cache time-to-live (seconds)."""
        if value <= 0:
            raise ValueError("cache_ttl_sec must be > 0")
        return value

    @field_validator("playlist_max_age_sec")
    @classmethod
    def validate_max_age(cls, value: int) -> int:
        """Validate Cache-Control max-age is non-negative."""
        if value < 0:
            raise ValueError("playlist_max_age_sec must be >= 0")
        return value

    @field_validator("stream_user_agent", "playlist_filename")
    @classmethod
    def validate_not_blank(cls, value: str, info) -> str:
        """Ensure string settings are not blank."""
        if not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Events API: %s", self.events_api_url)
        logger.info("  Fetch Proxy: %s", self.fetch_proxy_url)
        logger.info("  Fetch Timeout: %ss", self.fetch_timeout_sec)
        logger.info("  Cache TTL: %ss", self.cache_ttl_sec)
        logger.info("  Stream Referer: %s", self.stream_referer)
        logger.info("  Playlist Filename: %s", self.playlist_filename)
        logger.info("  Playlist Max Age: %ss", self.playlist_max_age_sec)
        logger.info("  Log Level: %s", self.log_level)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
