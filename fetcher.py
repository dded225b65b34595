"""Fresh featured content: category rows from Prowlarr, then enrichment."""
from __future__ import annotations

import copy
import logging
import random
from concurrent.futures import ThreadPoolExecutor

from featured import make_category
from mock_content import get_mock_featured_content
import trending

logger = logging.getLogger("videoclub.fetcher")

DEFAULT_CATEGORY_LIMIT = 15


class ContentFetcher:
    def __init__(self, category_config, enricher, *, default_limit=DEFAULT_CATEGORY_LIMIT, rng=random, telemetry=None):
        self.category_config = category_config
        self.enricher = enricher
        self.default_limit = default_limit
        self.rng = rng
        self.telemetry = telemetry

    def fetch_fresh(self, provider):
        content, _outcomes = self.collect(provider)
        return content

    def collect(self, provider):
        """Build a FeaturedContent snapshot and the per-category outcomes.

        A failing or empty category yields an empty row; the other rows are
        unaffected. Without a provider the static placeholder content is
        returned instead.
        """
        if provider is None:
            logger.warning("Prowlarr client not available; using placeholder featured content")
            return get_mock_featured_content(), []

        categories = self.category_config.get_enabled_categories()
        logger.info("Fetching %s featured categories", len(categories))

        results = []
        if categories:
            with ThreadPoolExecutor(max_workers=len(categories)) as pool:
                futures = [pool.submit(self._fetch_category, provider, c) for c in categories]
                results = [f.result() for f in futures]

        rows = []
        outcomes = []
        for category, (items, outcome) in zip(categories, results):
            rows.append(make_category(category["id"], category["title"], items))
            outcomes.append(outcome)

        all_items = [item for row in rows for item in row["items"]]
        hero = copy.deepcopy(self.rng.choice(all_items)) if all_items else None
        content = {"featured_item": hero, "categories": rows, "source": "live"}

        self.enricher.enrich(content)
        return content, outcomes

    def _fetch_category(self, provider, category):
        category_id = category["id"]
        params = dict(category.get("source_params") or {})
        source = params.pop("source", None)
        limit = category.get("limit") or self.default_limit
        strategy = trending.get_strategy(source)
        try:
            if strategy is None:
                raise ValueError(f"Unknown category source: {source!r}")
            items = list(strategy(provider, limit, **params))[:limit]
        except Exception as e:
            logger.error("Error fetching category %s: %s", category_id, e)
            self._count("error")
            return [], {"category": category_id, "success": False, "error": str(e)}
        if not items:
            logger.info("Category %s returned no items", category_id)
        self._count("success" if items else "empty")
        return items, {"category": category_id, "success": True, "item_count": len(items)}

    def _count(self, result):
        if self.telemetry is not None:
            self.telemetry.metrics.inc("videoclub_category_fetch_total", result=result)
