"""Process-wide settings using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmitterSettings(BaseSettings):
    """Settings for serializing trimmed documents."""

    model_config = SettingsConfigDict(
        env_prefix="EMITTER_",
    )

    indent: int = Field(
        default=2,
        ge=2,
        le=9,
        description="Number of spaces per indentation level",
    )

    line_width: int = Field(
        default=0,
        ge=0,
        description="Preferred line width before long scalars are folded (0 disables folding)",
    )

    allow_unicode: bool = Field(
        default=True,
        description="Emit non-ASCII characters as-is instead of escaping them",
    )


class CacheSettings(BaseSettings):
    """Settings for the HTTP content cache."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
    )

    default_dir: Path = Field(
        default_factory=lambda: Path.home() / ".yamltrimmer-cache",
        description="Cache directory used when the configuration enables caching without a path",
    )


class FetchSettings(BaseSettings):
    """Settings for downloading remote inputs."""

    model_config = SettingsConfigDict(
        env_prefix="FETCH_",
    )

    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for HTTP requests",
    )

    user_agent: str = Field(
        default="yamltrimmer",
        description="User-Agent header sent with HTTP requests",
    )


class PipelineSettings(BaseSettings):
    """Global settings for the entire pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="YAMLTRIMMER_",
    )

    emitter: EmitterSettings = Field(default_factory=EmitterSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)


# Global settings instance that can be accessed throughout the application
_settings: PipelineSettings | None = None


def get_settings() -> PipelineSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = PipelineSettings()
    return _settings


def set_settings(settings: PipelineSettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings
