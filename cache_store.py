"""Featured content cache: one singleton document with TTL bookkeeping."""
from __future__ import annotations

import logging
import math
import time

from content_store import CURATED_LISTS_COLLECTION

logger = logging.getLogger("videoclub.cache")

FEATURED_CONTENT_DOC_ID = "main_featured_content_v1"
DEFAULT_TTL_SECONDS = 3600

STATE_EMPTY = "EMPTY"
STATE_VALID = "VALID"
STATE_STALE = "STALE"


class FeaturedCacheStore:
    """Reads and replaces the cached FeaturedContent snapshot.

    Validity is derived from `last_refreshed_at` + `ttl_seconds` stored on the
    record, so an expired snapshot stays readable until it is replaced.
    """

    def __init__(self, store, ttl_seconds=DEFAULT_TTL_SECONDS, *, clock=time.time, telemetry=None):
        self._store = store
        self.ttl_seconds = int(ttl_seconds or DEFAULT_TTL_SECONDS)
        self._clock = clock
        self._telemetry = telemetry

    def _collection(self):
        return self._store.collection(CURATED_LISTS_COLLECTION)

    def _record(self):
        return self._collection().find_one(FEATURED_CONTENT_DOC_ID)

    def write(self, content):
        """Replace the cached snapshot. Store errors propagate."""
        now = self._clock()
        record = {
            "title": "Main Featured Content",
            "type": "featured_section",
            "is_enabled": True,
            "content_blob": content,
            "last_refreshed_at": now,
            "ttl_seconds": self.ttl_seconds,
        }
        try:
            self._collection().replace_one(FEATURED_CONTENT_DOC_ID, record, upsert=True)
        except Exception as e:
            logger.error("Failed to cache featured content (%s): %s", FEATURED_CONTENT_DOC_ID, e)
            raise
        logger.info("Featured content cached (ttl=%ss)", self.ttl_seconds)

    def read(self):
        try:
            record = self._record()
        except Exception as e:
            logger.error("Failed to read cached featured content: %s", e)
            self._count("error")
            return None
        if record and record.get("content_blob"):
            self._count("hit")
            return record["content_blob"]
        self._count("miss")
        return None

    def _expires_at(self, record):
        if not record:
            return None
        refreshed = record.get("last_refreshed_at")
        ttl = record.get("ttl_seconds")
        if not isinstance(refreshed, (int, float)) or not isinstance(ttl, (int, float)):
            return None
        return refreshed + ttl

    def is_valid(self):
        try:
            expires_at = self._expires_at(self._record())
        except Exception as e:
            logger.error("Error checking featured content cache validity: %s", e)
            return False
        if expires_at is None:
            return False
        return expires_at > self._clock()

    def time_remaining(self):
        try:
            expires_at = self._expires_at(self._record())
        except Exception as e:
            logger.error("Error calculating featured content cache time remaining: %s", e)
            return 0
        if expires_at is None:
            return 0
        return max(0, math.floor(expires_at - self._clock()))

    def state(self):
        try:
            record = self._record()
        except Exception:
            return STATE_EMPTY
        if not record or not record.get("content_blob"):
            return STATE_EMPTY
        expires_at = self._expires_at(record)
        if expires_at is not None and expires_at > self._clock():
            return STATE_VALID
        return STATE_STALE

    def clear(self):
        """Delete the cached snapshot. Deleting an absent record is a no-op."""
        deleted = self._collection().delete_one(FEATURED_CONTENT_DOC_ID)
        if deleted:
            logger.info("Featured content cache cleared")
        else:
            logger.info("No featured content cache to clear")
        return deleted

    def _count(self, result):
        if self._telemetry is not None:
            self._telemetry.metrics.inc("videoclub_cache_reads_total", result=result)
