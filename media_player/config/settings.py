"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a .env file) with
sensible defaults, and the entry point may override a handful of fields
from command-line flags.

Storage credentials are looked up in several conventional environment
variables; the first one set to a non-empty value wins:
- access key: ACCESS_KEY, AWS_ACCESS_KEY, AWS_ACCESS_KEY_ID
- secret key: SECRET_KEY, AWS_SECRET_KEY, AWS_SECRET_ACCESS_KEY

Mock mode enables local development without an object storage server.
"""

from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Longest expiry accepted by SigV4 presigned URLs.
MAX_PRESIGN_TTL_SECONDS = 7 * 24 * 3600

DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "web"


class ConfigError(Exception):
    """Raised when required configuration is missing. The process must not start."""
    pass


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # Object storage
    bucket_name: str = Field(
        default="",
        description="Bucket holding the media assets. Required."
    )
    storage_endpoint: str = Field(
        default="https://play.minio.io:9000",
        description="S3-compatible endpoint URL. The scheme selects plain or TLS transport."
    )
    storage_region: str = Field(
        default="us-east-1",
        description="Region used for request signing. MinIO accepts us-east-1."
    )
    access_key: str = Field(
        default="",
        validation_alias=AliasChoices("ACCESS_KEY", "AWS_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
        description="Storage access key. Required unless in mock mode."
    )
    secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("SECRET_KEY", "AWS_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
        description="Storage secret key. Required unless in mock mode."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory bucket instead of a real storage server."
    )
    storage_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single listing request against storage."
    )

    # Playlist behaviour
    presign_ttl_seconds: int = Field(
        default=MAX_PRESIGN_TTL_SECONDS,
        ge=1,
        le=MAX_PRESIGN_TTL_SECONDS,
        description="Lifetime of presigned download URLs. Defaults to 7 days."
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to listen on")
    port: int = Field(default=8080, description="Port to serve")
    static_dir: str = Field(
        default=str(DEFAULT_STATIC_DIR),
        description="Directory served under /player"
    )

    # Logging
    log_file: str = Field(
        default="./media-player.log",
        description="Log file path. Falls back to stdout if it cannot be opened."
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def storage_secure(self) -> bool:
        """True when the endpoint uses https."""
        return urlparse(self.storage_endpoint).scheme == "https"

    @property
    def storage_host(self) -> str:
        """Host (and port) part of the endpoint URL."""
        return urlparse(self.storage_endpoint).netloc

    def validate_required_fields(self) -> list[str]:
        """
        Return the list of missing required settings.

        Credentials are only required when talking to a real server.
        """
        missing = []

        if not self.bucket_name:
            missing.append("BUCKET_NAME")

        if not self.storage_mock_mode:
            if not self.access_key:
                missing.append("ACCESS_KEY, AWS_ACCESS_KEY or AWS_ACCESS_KEY_ID")
            if not self.secret_key:
                missing.append("SECRET_KEY, AWS_SECRET_KEY or AWS_SECRET_ACCESS_KEY")
            if not self.storage_host:
                missing.append("STORAGE_ENDPOINT")

        return missing

    def require_valid(self) -> None:
        """Raise ConfigError if any required setting is missing."""
        missing = self.validate_required_fields()
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
