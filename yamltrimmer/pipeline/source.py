"""Resolution of input locators to document bytes."""

import logging
from pathlib import Path
from typing import Optional

import requests

from yamltrimmer.config import FetchSettings, PipelineSettings, get_settings
from yamltrimmer.errors import SourceError
from yamltrimmer.models import Configuration

from .cache import EtagCache, resolve_cache_dir

logger = logging.getLogger(__name__)


def is_url(value: str) -> bool:
    """Check if a locator is an http(s) URL."""
    return value.startswith("http://") or value.startswith("https://")


def is_file(value: str) -> bool:
    """Check if a locator is an existing local file."""
    return bool(value) and not is_url(value) and Path(value).is_file()


def download(url: str, settings: FetchSettings) -> bytes:
    """Download a URL without caching."""
    headers = {"User-Agent": settings.user_agent}
    try:
        response = requests.get(url, headers=headers, timeout=settings.timeout)
    except requests.RequestException as e:
        raise SourceError(f"Error downloading file: {e}", source=url) from e

    if not 200 <= response.status_code < 300:
        raise SourceError(f"Unexpected status code {response.status_code} for {url}", source=url)
    return response.content


def read_file(path: Path) -> bytes:
    """Read a local input file."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise SourceError(f"Failed to read input file: {e}", source=str(path)) from e


def read_source(
    configuration: Configuration, settings: Optional[PipelineSettings] = None
) -> bytes:
    """
    Read the input document named by a configuration.

    URLs are fetched through the ETag cache when caching is enabled and
    downloaded directly otherwise. Anything else must be an existing file;
    relative paths are resolved against the working directory.

    Raises:
        SourceError: If the locator is neither a URL nor a file, or reading fails
    """
    settings = settings or get_settings()
    locator = configuration.input

    if is_url(locator):
        logger.debug(f"Input is a URL: {locator}")
        if configuration.cache.enabled:
            logger.debug("Going to try to read the input file from cache")
            cache_dir = resolve_cache_dir(configuration.cache.path, settings.cache)
            return EtagCache(cache_dir, settings.fetch).fetch(locator)
        logger.debug("Going to download the input file")
        return download(locator, settings.fetch)

    if is_file(locator):
        logger.debug(f"Input is a file: {locator}")
        return read_file(Path(locator))

    raise SourceError(f"Invalid input '{locator}': not a URL or a valid file path", source=locator)
