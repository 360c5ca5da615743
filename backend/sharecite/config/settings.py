"""Configuration settings for the sharecite citation pipeline."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShareciteSettings(BaseSettings):
    """Core citation pipeline settings."""

    model_config = SettingsConfigDict(
        env_prefix="SHARECITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend API settings
    api_base_url: str = Field(
        default="http://localhost:4000",
        description="Base URL of the backend that serves share link documents",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Optional bearer token sent to the backend",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Timeout for backend HTTP calls in seconds",
    )

    # Lookup cache settings
    document_cache_ttl_seconds: int = Field(
        default=300,
        ge=1,
        le=86400,
        description="How long a share link's document index stays fresh",
    )

    # Rendering settings
    citation_mode: str = Field(
        default="numbered",
        pattern="^(inline|numbered)$",
        description="Default citation rendering mode",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="API server port",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Strip trailing slashes so endpoints can be appended directly."""
        if not v or not v.strip():
            raise ValueError("API base URL cannot be empty")
        return v.strip().rstrip("/")

    @field_validator("citation_mode", mode="before")
    @classmethod
    def normalize_citation_mode(cls, v: str) -> str:
        """Normalize citation mode."""
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level."""
        return v.strip().upper() if isinstance(v, str) else v


class ViewerSettings(BaseSettings):
    """Document viewer scroll and highlight timing."""

    model_config = SettingsConfigDict(
        env_prefix="SHARECITE_VIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mount_delay_ms: int = Field(
        default=150,
        ge=0,
        le=5000,
        description="Delay before locating the section element",
    )
    highlight_delay_ms: int = Field(
        default=300,
        ge=0,
        le=5000,
        description="Delay between starting the scroll and applying the highlight",
    )
    highlight_duration_ms: int = Field(
        default=3000,
        ge=100,
        le=60000,
        description="How long the highlight class stays applied",
    )
    highlight_class: str = Field(
        default="citation-highlight",
        description="CSS class applied to the highlighted section",
    )
    section_element_prefix: str = Field(
        default="section-",
        description="Prefix of the element id that holds a section",
    )


@lru_cache()
def get_settings() -> ShareciteSettings:
    """Get cached settings instance.

    Returns:
        ShareciteSettings instance
    """
    return ShareciteSettings()


@lru_cache()
def get_viewer_settings() -> ViewerSettings:
    """Get cached viewer settings instance.

    Returns:
        ViewerSettings instance
    """
    return ViewerSettings()
