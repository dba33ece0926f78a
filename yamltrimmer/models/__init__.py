"""Data models for yamltrimmer."""

from .configuration import CacheConfig, Configuration
from .result import TrimResult

__all__ = [
    "CacheConfig",
    "Configuration",
    "TrimResult",
]
