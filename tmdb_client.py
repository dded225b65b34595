"""TMDb client: title search and details lookups for enrichment."""
from __future__ import annotations

import logging

import requests

from featured import MEDIA_TV
from prowlarr_client import ProviderError

logger = logging.getLogger("videoclub.tmdb")


class TmdbError(ProviderError):
    pass


class TmdbClient:
    def __init__(self, api_key, *, base_url="https://api.themoviedb.org/3", requests_module=requests, timeout=15):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.requests = requests_module
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, requests_module=requests):
        if not config.has_tmdb():
            logger.warning("TMDb API key not configured; metadata enrichment is disabled")
            return None
        return cls(
            config.TMDB_API_KEY,
            base_url=config.TMDB_BASE_URL,
            requests_module=requests_module,
            timeout=config.HTTP_TIMEOUT_SEC,
        )

    def _get(self, path, **params):
        params = {"api_key": self.api_key, "language": "en-US", **params}
        try:
            resp = self.requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except self.requests.RequestException as e:
            raise TmdbError(f"TMDb request {path} failed: {e}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise TmdbError(f"TMDb request {path} returned HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise TmdbError(f"TMDb returned invalid JSON for {path}: {e}") from e

    def search(self, query, media_type):
        kind = "tv" if media_type == MEDIA_TV else "movie"
        data = self._get(f"/search/{kind}", query=query, include_adult="false")
        return (data or {}).get("results") or []

    def get_details(self, tmdb_id, media_type):
        if media_type == MEDIA_TV:
            return self._get(f"/tv/{int(tmdb_id)}", append_to_response="external_ids")
        return self._get(f"/movie/{int(tmdb_id)}")

    def get_movie_details(self, tmdb_id):
        return self.get_details(tmdb_id, "movie")

    def get_tv_details(self, tmdb_id):
        return self.get_details(tmdb_id, MEDIA_TV)
