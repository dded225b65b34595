"""Service wiring and Flask application construction."""
from __future__ import annotations

import logging

import requests
from flask import Flask

import blueprint_registry
import config
import diagnostics
import telemetry
from cache_store import FeaturedCacheStore
from category_config import CategoryConfigService
from content_store import ContentStore
from curator import FeaturedContentService
from db_migrations import get_migration_status
from enricher import MetadataEnricher
from fetcher import ContentFetcher
from prowlarr_client import ProwlarrClient
from scheduler import CacheScheduler, select_trigger
from tmdb_client import TmdbClient

logger = logging.getLogger("videoclub")


def build_services(config_module=config, *, requests_module=requests, telemetry_module=telemetry, trigger=None):
    """Construct the service graph from configuration.

    Nothing here touches the network or the database; missing credentials
    leave the matching client as None.
    """
    store = ContentStore(config_module.DB_PATH)
    cache_store = FeaturedCacheStore(
        store,
        config_module.FEATURED_CONTENT_TTL_SECONDS,
        telemetry=telemetry_module,
    )
    category_config = CategoryConfigService(store)
    enricher = MetadataEnricher(
        TmdbClient.from_config(config_module, requests_module=requests_module),
        batch_size=config_module.ENRICH_BATCH_SIZE,
        image_base_url=config_module.TMDB_IMAGE_BASE_URL,
        telemetry=telemetry_module,
    )
    fetcher = ContentFetcher(
        category_config,
        enricher,
        default_limit=config_module.CATEGORY_ITEM_LIMIT,
        telemetry=telemetry_module,
    )
    curator = FeaturedContentService(
        cache_store,
        fetcher,
        provider=ProwlarrClient.from_config(config_module, requests_module=requests_module),
        dry_run=config_module.DRY_RUN,
        telemetry=telemetry_module,
    )
    scheduler = CacheScheduler(
        curator.refresh,
        trigger if trigger is not None else select_trigger(config_module.SCHEDULER_MODE),
    )

    def reload_providers():
        curator.provider = ProwlarrClient.from_config(config_module, requests_module=requests_module)
        enricher.tmdb = TmdbClient.from_config(config_module, requests_module=requests_module)
        logger.info(
            "Providers reloaded (prowlarr=%s, tmdb=%s)",
            curator.provider is not None,
            enricher.tmdb is not None,
        )

    def runtime_config_validation(run_network_tests=False):
        return diagnostics.runtime_config_validation(
            config_module,
            run_network_tests=run_network_tests,
            requests_module=requests_module,
        )

    return {
        "config": config_module,
        "logger": logger,
        "telemetry": telemetry_module,
        "store": store,
        "cache_store": cache_store,
        "category_config": category_config,
        "enricher": enricher,
        "fetcher": fetcher,
        "curator": curator,
        "scheduler": scheduler,
        "reload_providers": reload_providers,
        "runtime_config_validation": runtime_config_validation,
        "get_migration_status": get_migration_status,
        "test_prowlarr_connection": lambda url, api_key: diagnostics.test_prowlarr_connection(
            url, api_key, requests_module=requests_module
        ),
        "test_tmdb_connection": lambda api_key, base_url: diagnostics.test_tmdb_connection(
            api_key, base_url, requests_module=requests_module
        ),
    }


def create_app(services=None):
    services = services if services is not None else build_services()
    app = Flask(__name__)
    app.extensions["videoclub"] = services
    blueprint_registry.register_blueprints(app, services)
    return app
