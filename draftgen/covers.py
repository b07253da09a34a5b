"""Cover-image lookup against the Google Books volume search API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

BOOKS_API_URL = "https://www.googleapis.com/books/v1/volumes"
COVER_URL_TEMPLATE = "https://books.google.com/books/content?id={volume_id}&printsec=frontcover&img=1&zoom=1"


def google_cover_url(volume_id: str) -> str:
    return COVER_URL_TEMPLATE.format(volume_id=volume_id)


def extract_isbn(volume: dict) -> str | None:
    identifiers = (volume.get("volumeInfo") or {}).get("industryIdentifiers") or []
    by_type = {item.get("type"): item.get("identifier") for item in identifiers if isinstance(item, dict)}
    return by_type.get("ISBN_13") or by_type.get("ISBN_10")


@dataclass(frozen=True)
class CoverResult:
    """Outcome of a single cover lookup.

    A lookup never raises; ``error`` carries the reason when no volume
    was found and ``ok`` tells the caller whether ``cover_url`` is usable.
    """

    query_url: str
    volume_id: str | None = None
    isbn: str | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.volume_id)

    @property
    def cover_url(self) -> str:
        return google_cover_url(self.volume_id) if self.volume_id else ""


class CoverClient:
    """Client for looking up book covers by title.

    Provides a lazy-initialized httpx.Client with context manager support.

    Example:
        with CoverClient(timeout=5) as client:
            result = client.search("The Left Hand of Darkness")
            if result.ok:
                print(result.cover_url)
    """

    def __init__(self, timeout: float = 5.0, base_url: str = BOOKS_API_URL, transport: httpx.BaseTransport | None = None):
        self.timeout = timeout
        self.base_url = base_url
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, transport=self._transport)
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def query_url(self, title: str) -> str:
        return str(httpx.URL(self.base_url, params={"q": title, "maxResults": 1}))

    def search(self, title: str) -> CoverResult:
        """Search for the first volume matching ``title``.

        Args:
            title: Free-text title used as the search query

        Returns:
            CoverResult with the volume id on success, or an error message
            for timeouts, HTTP errors, unreadable responses and empty results
        """
        url = self.query_url(title)
        try:
            response = self.client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            return CoverResult(query_url=url, error=f"Request timed out: {e}")
        except httpx.HTTPStatusError as e:
            return CoverResult(query_url=url, error=f"HTTP {e.response.status_code} for {url}")
        except httpx.HTTPError as e:
            return CoverResult(query_url=url, error=f"Request failed: {e}")
        except ValueError as e:
            return CoverResult(query_url=url, error=f"Invalid JSON response: {e}")

        items = data.get("items") if isinstance(data, dict) else None
        volume = items[0] if items else None
        if not isinstance(volume, dict) or not volume.get("id"):
            return CoverResult(query_url=url, error="No volume found")
        logger.debug(f"Volume {volume['id']} matched {title!r}")
        return CoverResult(query_url=url, volume_id=str(volume["id"]), isbn=extract_isbn(volume))
