"""Prowlarr client: indexer search and conversion into featured items."""
from __future__ import annotations

import logging
import re

import requests

from featured import MEDIA_MOVIE, MEDIA_TV
from media_utils import clean_title, extract_quality, extract_year, human_size

logger = logging.getLogger("videoclub.prowlarr")

MOVIE_CATEGORIES = [2000]
TV_CATEGORIES = [5000]
_TV_CATEGORY_HINTS = ("tv", "series", "show")


class ProviderError(Exception):
    """Raised when an upstream provider cannot be reached or answers badly."""


class ProwlarrError(ProviderError):
    pass


class ProwlarrClient:
    def __init__(self, base_url, api_key, *, requests_module=requests, timeout=30):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.requests = requests_module
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, requests_module=requests):
        """Build a client from config, or None when credentials are missing."""
        if not config.has_prowlarr():
            logger.warning("Prowlarr URL/API key not configured; featured content will use placeholders")
            return None
        return cls(
            config.PROWLARR_URL,
            config.PROWLARR_API_KEY,
            requests_module=requests_module,
            timeout=config.HTTP_TIMEOUT_SEC,
        )

    def search(self, query="*", *, media_type=None, categories=None, limit=100, offset=0, min_seeders=0):
        """Run an indexer search and return the raw result dicts."""
        params = {
            "query": query or "*",
            "limit": int(limit or 100),
            "offset": int(offset or 0),
            "type": "search",
        }
        if categories:
            params["categories"] = list(categories)
        if media_type == MEDIA_MOVIE:
            params["type"] = "movie"
            params.setdefault("categories", MOVIE_CATEGORIES)
        elif media_type == MEDIA_TV:
            params["type"] = "tvsearch"
            params.setdefault("categories", TV_CATEGORIES)
        try:
            resp = self.requests.get(
                f"{self.base_url}/api/v1/search",
                params=params,
                headers={"X-Api-Key": self.api_key},
                timeout=self.timeout,
            )
        except self.requests.RequestException as e:
            raise ProwlarrError(f"Prowlarr search failed: {e}") from e
        if resp.status_code != 200:
            raise ProwlarrError(f"Prowlarr search returned HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise ProwlarrError(f"Prowlarr returned invalid JSON: {e}") from e
        if not isinstance(data, list):
            logger.warning("Unexpected Prowlarr response shape for query %r", query)
            return []
        if min_seeders:
            data = [r for r in data if (r.get("seeders") or 0) >= min_seeders]
        logger.debug("Prowlarr search %r returned %s results", query, len(data))
        return data


def is_tv_result(result):
    for cat in result.get("categories") or []:
        name = cat.get("name", "") if isinstance(cat, dict) else str(cat)
        lowered = str(name).lower()
        if any(hint in lowered for hint in _TV_CATEGORY_HINTS):
            return True
    return False


def convert_to_featured_item(result):
    """Map a raw Prowlarr result onto a FeaturedItem dict (no enrichment yet)."""
    title = result.get("title") or ""
    guid = result.get("guid") or "prowlarr-" + re.sub(r"[^a-zA-Z0-9]", "", title)
    size = result.get("size") or 0
    return {
        "guid": guid,
        "indexer_id": str(result.get("indexerId") or result.get("indexer") or ""),
        "indexer": result.get("indexer", ""),
        "title": title,
        "clean_title": clean_title(title),
        "year": extract_year(title),
        "quality": extract_quality(title),
        "size": size,
        "size_human": human_size(size),
        "protocol": result.get("protocol") or "torrent",
        "media_type": MEDIA_TV if is_tv_result(result) else MEDIA_MOVIE,
        "seeders": result.get("seeders", 0),
        "leechers": result.get("leechers", 0),
        "publish_date": result.get("publishDate"),
        "download_url": result.get("downloadUrl", ""),
        "info_url": result.get("infoUrl", ""),
        "tmdb_id": result.get("tmdbId") or None,
        "in_library": False,
        "is_downloading": False,
        "is_processing": False,
    }
