"""Models for the run configuration file."""

from pydantic import BaseModel, ConfigDict, Field

from yamltrimmer.pipeline.rules import IncludeRule


class CacheConfig(BaseModel):
    """HTTP cache options for remote inputs."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Cache remote inputs on disk")
    path: str = Field(
        default="", description="Cache directory (empty uses the default cache directory)"
    )


class Configuration(BaseModel):
    """A trimming job: where to read, where to write, and which keys to keep."""

    model_config = ConfigDict(frozen=True)

    input: str = Field(description="Input locator: a local file path or an http(s) URL")
    output: str = Field(description="Path of the file to write the trimmed document to")
    cache: CacheConfig = Field(default_factory=CacheConfig, description="HTTP cache options")
    include: tuple[IncludeRule, ...] = Field(description="Top-level include rules")
