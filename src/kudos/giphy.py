"""GIF search/trending client with a fixed local palette as fallback."""

import json
import logging
from dataclasses import dataclass
from urllib import error, request
from urllib.parse import urlencode
from urllib.request import urlopen

from kudos.config import DEFAULT_GIPHY_API_URL
from kudos.placeholders import FALLBACK_GIFS

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 12


@dataclass(frozen=True)
class Gif:
    id: str
    title: str
    url: str
    original_url: str

    def to_payload(self):
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "originalUrl": self.original_url,
        }


def fallback_gifs():
    """Return the fixed palette formatted as GIF candidates."""
    return [
        Gif(id=f"fallback-{i}", title=f"Fallback GIF {i + 1}", url=url, original_url=url)
        for i, url in enumerate(FALLBACK_GIFS)
    ]


def format_gif_data(payload):
    """Convert a Giphy response body into :class:`Gif` candidates.

    :param payload: Decoded JSON body with a ``data`` list.
    :type payload: dict
    :returns: Parsed candidates.
    :rtype: list[Gif]
    :raises ValueError: If an item is missing its image URLs.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise ValueError("Giphy response has no data list")
    gifs = []
    for item in payload["data"]:
        try:
            images = item["images"]
            gifs.append(
                Gif(
                    id=str(item["id"]),
                    title=item.get("title") or "",
                    url=images["fixed_height"]["url"],
                    original_url=images["original"]["url"],
                )
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed Giphy item: {exc}") from exc
    return gifs


class GifProvider:
    """Search and trending lookups against the Giphy HTTP API.

    Failures never propagate: callers always receive a usable list.
    """

    def __init__(self, api_key, base_url=DEFAULT_GIPHY_API_URL, timeout=10):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _fetch(self, endpoint, params):
        query = urlencode({"api_key": self.api_key, **params, "rating": "g"})
        url = f"{self.base_url}/{endpoint}?{query}"
        try:
            with urlopen(request.Request(url), timeout=self.timeout) as response:
                return format_gif_data(json.loads(response.read()))
        except error.HTTPError as exc:
            logger.warning("Giphy API error: %s", exc.code)
        except (error.URLError, TimeoutError, OSError, ValueError) as exc:
            logger.warning("Error fetching GIFs: %s", exc)
        return fallback_gifs()

    def search(self, query, limit=DEFAULT_LIMIT):
        if not query or not query.strip():
            return []
        return self._fetch("search", {"q": query.strip(), "limit": limit})

    def trending(self, limit=DEFAULT_LIMIT):
        return self._fetch("trending", {"limit": limit})
