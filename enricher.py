"""TMDb metadata enrichment for featured content.

Enrichment is best-effort: lookups that fail or find nothing leave the item
with its fallback display fields, and a missing TMDb client skips the
lookups entirely.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from featured import (
    DEFAULT_IMAGE_BASE_URL,
    MEDIA_MOVIE,
    MEDIA_TV,
    apply_display_fields,
    dedupe_items,
    iter_items,
    year_from_date,
)
from media_utils import extract_tmdb_id

logger = logging.getLogger("videoclub.enricher")

DEFAULT_BATCH_SIZE = 10


def map_details(details, media_type):
    """Map a TMDb movie/tv details payload onto a tmdb_info block."""
    if not details or not details.get("id"):
        return None
    genre_ids = [g["id"] for g in details.get("genres") or [] if isinstance(g, dict) and "id" in g]
    if not genre_ids:
        genre_ids = list(details.get("genre_ids") or [])
    info = {
        "tmdb_id": details["id"],
        "overview": details.get("overview") or "",
        "poster_path": details.get("poster_path"),
        "backdrop_path": details.get("backdrop_path"),
        "vote_average": details.get("vote_average"),
        "genre_ids": genre_ids,
    }
    if media_type == MEDIA_TV:
        info["title"] = details.get("name") or details.get("original_name")
        info["first_air_date"] = details.get("first_air_date")
        info["year"] = year_from_date(details.get("first_air_date"))
        info["seasons"] = details.get("number_of_seasons")
        runtimes = details.get("episode_run_time") or []
        info["runtime"] = runtimes[0] if runtimes else None
    else:
        info["title"] = details.get("title") or details.get("original_title")
        info["release_date"] = details.get("release_date")
        info["year"] = year_from_date(details.get("release_date"))
        info["runtime"] = details.get("runtime")
    return info


class MetadataEnricher:
    def __init__(self, tmdb, *, batch_size=DEFAULT_BATCH_SIZE, image_base_url=DEFAULT_IMAGE_BASE_URL, telemetry=None):
        self.tmdb = tmdb
        self.batch_size = max(1, int(batch_size))
        self.image_base_url = image_base_url
        self.telemetry = telemetry
        if tmdb is None:
            logger.warning("TMDb client not available; featured content will not be enriched")

    @property
    def enabled(self):
        return self.tmdb is not None

    def enrich(self, content):
        """Attach tmdb_info + display fields to every item of `content` in place."""
        if not self.enabled:
            self._apply_display(content)
            return content

        pending = dedupe_items(item for item in iter_items(content) if not item.get("tmdb_info"))
        logger.info("Enriching %s unique items with TMDb metadata", len(pending))

        found = {}
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(pending), self.batch_size):
                batch = pending[start:start + self.batch_size]
                # consume the whole batch before submitting the next one
                for item, info in zip(batch, list(pool.map(self._lookup_safe, batch))):
                    if info:
                        found[item["guid"]] = info

        for item in iter_items(content):
            info = found.get(item.get("guid"))
            if info and not item.get("tmdb_info"):
                item["tmdb_info"] = dict(info)
        self._apply_display(content)
        logger.info("TMDb enrichment completed: %s/%s items matched", len(found), len(pending))
        return content

    def _apply_display(self, content):
        for item in iter_items(content):
            apply_display_fields(item, self.image_base_url)

    def _lookup_safe(self, item):
        try:
            info = self.lookup(item)
        except Exception as e:
            logger.error("Error enriching item %r: %s", item.get("title"), e)
            self._count("error")
            return None
        self._count("matched" if info else "unmatched")
        return info

    def lookup(self, item):
        """Resolve one item to a tmdb_info block, or None when nothing matches."""
        media_type = item.get("media_type") or MEDIA_MOVIE
        tmdb_id = item.get("tmdb_id") or extract_tmdb_id(item.get("title"))
        if not tmdb_id:
            query = item.get("clean_title") or item.get("title")
            if not query:
                return None
            results = self.tmdb.search(query, media_type)
            if not results:
                logger.debug("No TMDb match found by search for %r", query)
                return None
            tmdb_id = results[0].get("id")
            if not isinstance(tmdb_id, int):
                logger.warning("TMDb search match for %r has no valid id", query)
                return None
        details = self.tmdb.get_details(tmdb_id, media_type)
        if not details:
            logger.debug("No TMDb details for %s id %s", media_type, tmdb_id)
            return None
        return map_details(details, media_type)

    def get_enriched_item(self, tmdb_id, media_type):
        """Build a standalone FeaturedItem straight from TMDb details."""
        if not self.enabled:
            return None
        try:
            info = map_details(self.tmdb.get_details(tmdb_id, media_type), media_type)
        except Exception as e:
            logger.error("Failed to fetch TMDb %s %s: %s", media_type, tmdb_id, e)
            return None
        if not info:
            return None
        item = {
            "guid": f"tmdb-{media_type}-{info['tmdb_id']}",
            "indexer_id": "",
            "title": info.get("title") or "",
            "size": 0,
            "protocol": "torrent",
            "media_type": media_type,
            "tmdb_info": info,
        }
        return apply_display_fields(item, self.image_base_url)

    def _count(self, result):
        if self.telemetry is not None:
            self.telemetry.metrics.inc("videoclub_enrichment_lookups_total", result=result)
