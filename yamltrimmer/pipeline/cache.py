"""ETag-validated on-disk cache for remote inputs."""

import hashlib
import logging
from pathlib import Path
from typing import Optional

import requests

from yamltrimmer.config import CacheSettings, FetchSettings
from yamltrimmer.errors import SourceError

logger = logging.getLogger(__name__)

ETAG_EXTENSION = "etag"


def cache_file_name(url: str, extension: str = "") -> str:
    """Name of the cache file for a URL: the URL's MD5 digest plus an optional extension."""
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()
    if not extension:
        return digest
    return f"{digest}.{extension}"


def resolve_cache_dir(path: str, settings: CacheSettings) -> Path:
    """Resolve the configured cache path to an absolute directory."""
    if not path:
        logger.debug("Cache enabled but no path specified, using the default cache path")
        directory = settings.default_dir
    else:
        directory = Path(path)
    resolved = directory.expanduser().resolve()
    logger.debug(f"Resolved cache path: {resolved}")
    return resolved


class EtagCache:
    """Keeps a local copy of each downloaded URL along with its ETag.

    A fetch revalidates the local copy with ``If-None-Match``; the body is
    only downloaded again when the server reports a change.
    """

    def __init__(self, directory: Path, settings: Optional[FetchSettings] = None):
        self.directory = directory
        self.settings = settings or FetchSettings()

    def content_path(self, url: str) -> Path:
        return self.directory / cache_file_name(url)

    def etag_path(self, url: str) -> Path:
        return self.directory / cache_file_name(url, ETAG_EXTENSION)

    def ensure_directory(self) -> None:
        """Create the cache directory if it does not exist."""
        if self.directory.is_dir():
            return
        logger.debug(f"Creating cache directory: {self.directory}")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SourceError(f"Failed to create cache directory {self.directory}: {e}") from e

    def stored_etag(self, url: str) -> Optional[str]:
        """Get the stored ETag for a URL, if a cached copy exists."""
        etag_path = self.etag_path(url)
        if not (etag_path.is_file() and self.content_path(url).is_file()):
            return None
        try:
            etag = etag_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Failed to read ETag from cache: {e}", source=url) from e
        return etag or None

    def _request(self, url: str, etag: Optional[str]) -> requests.Response:
        headers = {"User-Agent": self.settings.user_agent}
        if etag:
            headers["If-None-Match"] = etag
        try:
            return requests.get(url, headers=headers, timeout=self.settings.timeout)
        except requests.RequestException as e:
            raise SourceError(f"Failed to make HTTP request to {url}: {e}", source=url) from e

    def _read_cached(self, url: str) -> bytes:
        content_path = self.content_path(url)
        try:
            return content_path.read_bytes()
        except OSError as e:
            raise SourceError(f"Failed to read input file from cache: {e}", source=url) from e

    def _store(self, url: str, content: bytes, etag: Optional[str]) -> None:
        content_path = self.content_path(url)
        etag_path = self.etag_path(url)
        try:
            content_path.write_bytes(content)
            logger.debug(f"File downloaded successfully: {content_path}")
            if etag:
                etag_path.write_text(etag, encoding="utf-8")
                logger.debug(f"ETag updated: {etag}")
            else:
                logger.debug("No ETag found in response")
                etag_path.unlink(missing_ok=True)
        except OSError as e:
            raise SourceError(f"Failed to write content to cache: {e}", source=url) from e

    def fetch(self, url: str) -> bytes:
        """
        Get the content of a URL, downloading it only if the cached copy is stale.

        Raises:
            SourceError: If the request fails, the server answers with an
                unexpected status, or the cache cannot be read or written
        """
        self.ensure_directory()
        logger.debug(f"Local file path: {self.content_path(url)}")
        logger.debug(f"ETag file path: {self.etag_path(url)}")

        response = self._request(url, self.stored_etag(url))

        if response.status_code == requests.codes.not_modified:
            logger.debug("Resource not modified. Skipping download.")
            return self._read_cached(url)

        if response.status_code != requests.codes.ok:
            raise SourceError(
                f"Unexpected status code {response.status_code} for {url}", source=url
            )

        content = response.content
        self._store(url, content, response.headers.get("ETag"))
        return content
