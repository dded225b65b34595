"""Featured category definitions stored in the document store."""
from __future__ import annotations

import logging
import threading

from content_store import FEATURED_CATEGORIES_COLLECTION
from featured import MEDIA_TYPES
import trending

logger = logging.getLogger("videoclub.categories")

DEFAULT_CATEGORIES = [
    {"id": "trending-now", "title": "Trending Now", "type": "movie",
     "source_params": {"source": "trendingMovies"}, "order": 1, "enabled": True},
    {"id": "popular-tv", "title": "Popular TV Shows", "type": "tv",
     "source_params": {"source": "popularTV"}, "order": 2, "enabled": True},
    {"id": "new-releases", "title": "New Releases", "type": "movie",
     "source_params": {"source": "newReleases"}, "order": 3, "enabled": True},
    {"id": "top-4k", "title": "Top 4K Content", "type": "movie",
     "source_params": {"source": "top4KContent"}, "order": 4, "enabled": True},
    {"id": "documentaries", "title": "Documentaries", "type": "movie",
     "source_params": {"source": "documentaries"}, "order": 5, "enabled": True},
]


class CategoryConfigError(ValueError):
    pass


def normalize_category(data):
    """Validate an admin-supplied category definition and fill defaults."""
    if not isinstance(data, dict):
        raise CategoryConfigError("Category must be an object")
    category_id = str(data.get("id") or "").strip()
    title = str(data.get("title") or "").strip()
    if not category_id:
        raise CategoryConfigError("Category id is required")
    if not title:
        raise CategoryConfigError("Category title is required")
    media_type = data.get("type") or "movie"
    if media_type not in MEDIA_TYPES:
        raise CategoryConfigError(f"Category type must be one of {', '.join(MEDIA_TYPES)}")
    source_params = data.get("source_params") or {}
    if not isinstance(source_params, dict):
        raise CategoryConfigError("source_params must be an object")
    source = source_params.get("source")
    if trending.get_strategy(source) is None:
        raise CategoryConfigError(f"Unknown category source: {source!r}")
    try:
        order = int(data.get("order", 0))
    except (TypeError, ValueError):
        raise CategoryConfigError("Category order must be an integer")
    normalized = {
        "id": category_id,
        "title": title,
        "type": media_type,
        "source_params": dict(source_params),
        "order": order,
        "enabled": bool(data.get("enabled", True)),
    }
    if data.get("limit") is not None:
        try:
            normalized["limit"] = max(1, int(data["limit"]))
        except (TypeError, ValueError):
            raise CategoryConfigError("Category limit must be an integer")
    return normalized


class CategoryConfigService:
    def __init__(self, store, defaults=None):
        self._store = store
        self._defaults = DEFAULT_CATEGORIES if defaults is None else defaults
        self._lock = threading.Lock()
        self._initialized = False

    def _collection(self):
        return self._store.collection(FEATURED_CATEGORIES_COLLECTION)

    def initialize(self):
        """Seed the default categories when the collection is empty."""
        with self._lock:
            if self._initialized:
                return
            collection = self._collection()
            if collection.count_documents() == 0 and self._defaults:
                collection.insert_many([dict(c) for c in self._defaults])
                logger.info("Seeded %s default featured categories", len(self._defaults))
            self._initialized = True

    def get_all_categories(self):
        self.initialize()
        return self._collection().find(sort_key="order")

    def get_enabled_categories(self):
        enabled = [c for c in self.get_all_categories() if c.get("enabled", True)]
        return sorted(enabled, key=lambda c: c.get("order", 0))

    def upsert_category(self, data):
        category = normalize_category(data)
        self.initialize()
        self._collection().update_one(category["id"], category, upsert=True)
        logger.info("Saved featured category %s", category["id"])
        return category

    def delete_category(self, category_id):
        self.initialize()
        deleted = self._collection().delete_one(category_id)
        if deleted:
            logger.info("Deleted featured category %s", category_id)
        return bool(deleted)
