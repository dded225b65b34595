"""Featured content orchestration: cache first, fresh fetch on miss, mock last."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from cache_store import STATE_VALID
from mock_content import get_mock_featured_content

logger = logging.getLogger("videoclub.curator")


def _utc_timestamp():
    return datetime.now(timezone.utc).isoformat()


class FeaturedContentService:
    """Serves the featured page and regenerates the cached snapshot.

    `get()` never raises: a cached snapshot is served while valid, otherwise
    fresh content is fetched and cached, and when that fails too the static
    mock content is returned. In dry-run mode `get()` only ever returns the
    mock content and `refresh()` does not touch the store or the network.
    """

    def __init__(self, cache_store, fetcher, *, provider=None, dry_run=False, telemetry=None):
        self.cache = cache_store
        self.fetcher = fetcher
        self.provider = provider
        self.dry_run = bool(dry_run)
        self.telemetry = telemetry
        if self.dry_run:
            logger.info("Featured content service running in dry-run mode")

    def _provider(self, provider):
        return self.provider if provider is None else provider

    def get(self, provider=None):
        if self.dry_run:
            return get_mock_featured_content()
        provider = self._provider(provider)
        try:
            if self.cache.state() == STATE_VALID:
                content = self.cache.read()
                if content:
                    logger.debug("Serving featured content from cache")
                    return content
            logger.info("Featured content cache empty or expired, fetching fresh content")
            content = self.fetcher.fetch_fresh(provider)
            self.cache.write(content)
            return content
        except Exception as e:
            logger.error("Error getting featured content: %s", e)
            return self._fallback(provider)

    def _fallback(self, provider):
        try:
            content = self.fetcher.fetch_fresh(provider)
        except Exception as e:
            logger.error("Fallback fetch failed, serving mock featured content: %s", e)
            self._count("videoclub_mock_fallback_total")
            return get_mock_featured_content()
        try:
            self.cache.write(content)
        except Exception as e:
            logger.warning("Could not cache fallback featured content: %s", e)
        return content

    def refresh(self, provider=None):
        """Regenerate and cache the snapshot regardless of cache validity."""
        timestamp = _utc_timestamp()
        if self.dry_run:
            logger.info("[dry-run] skipping featured content refresh")
            return {"success": True, "timestamp": timestamp, "refreshed_categories": [], "dry_run": True}

        logger.info("Refreshing featured content cache")
        try:
            content, outcomes = self.fetcher.collect(self._provider(provider))
            self.cache.write(content)
        except Exception as e:
            logger.error("Featured content refresh failed: %s", e)
            summary = {"success": False, "timestamp": timestamp, "refreshed_categories": [], "error": str(e)}
            self._record_refresh(summary)
            return summary

        failed = [o["category"] for o in outcomes if not o.get("success")]
        if failed:
            logger.warning("Featured content refreshed with failed categories: %s", ", ".join(failed))
        else:
            logger.info("Featured content refreshed (%s categories)", len(outcomes))
        summary = {"success": True, "timestamp": timestamp, "refreshed_categories": outcomes}
        self._record_refresh(summary)
        return summary

    def clear_cache(self):
        return self.cache.clear()

    def status(self):
        return {
            "valid": self.cache.is_valid(),
            "ttl_seconds_remaining": self.cache.time_remaining(),
            "state": self.cache.state(),
            "content": self.cache.read(),
        }

    def get_category(self, category_id, provider=None):
        content = self.get(provider)
        for category in content.get("categories") or []:
            if category.get("id") == category_id:
                return category
        return None

    def _count(self, name, **labels):
        if self.telemetry is not None:
            self.telemetry.metrics.inc(name, **labels)

    def _record_refresh(self, summary):
        if self.telemetry is None:
            return
        result = "success" if summary["success"] else "error"
        self.telemetry.metrics.inc("videoclub_refresh_total", result=result)
        for outcome in summary["refreshed_categories"]:
            if not outcome.get("success"):
                self.telemetry.metrics.inc("videoclub_category_failures_total", category=outcome["category"])
        self.telemetry.emit_event(
            "featured_refresh_completed" if summary["success"] else "featured_refresh_failed",
            {
                "timestamp": summary["timestamp"],
                "categories": len(summary["refreshed_categories"]),
                "error": summary.get("error"),
            },
        )
