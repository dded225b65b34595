from __future__ import annotations

from routes.admin import create_blueprint as create_admin_blueprint
from routes.cache import create_blueprint as create_cache_blueprint
from routes.featured import create_blueprint as create_featured_blueprint
from routes.settings import create_blueprint as create_settings_blueprint
from routes.system import create_blueprint as create_system_blueprint


def register_blueprints(app, deps):
    app.register_blueprint(create_system_blueprint({
        "config": deps["config"],
        "store": deps["store"],
        "cache_store": deps["cache_store"],
        "curator": deps["curator"],
        "scheduler": deps["scheduler"],
        "telemetry": deps["telemetry"],
        "get_migration_status": deps["get_migration_status"],
        "runtime_config_validation": deps["runtime_config_validation"],
    }))
    app.register_blueprint(create_settings_blueprint({
        "config": deps["config"],
        "logger": deps["logger"],
        "reload_providers": deps["reload_providers"],
        "runtime_config_validation": deps["runtime_config_validation"],
        "test_prowlarr_connection": deps["test_prowlarr_connection"],
        "test_tmdb_connection": deps["test_tmdb_connection"],
    }))
    app.register_blueprint(create_featured_blueprint({
        "curator": deps["curator"],
        "enricher": deps["enricher"],
    }))
    app.register_blueprint(create_cache_blueprint({
        "curator": deps["curator"],
        "scheduler": deps["scheduler"],
        "logger": deps["logger"],
    }))
    app.register_blueprint(create_admin_blueprint({
        "category_config": deps["category_config"],
        "logger": deps["logger"],
    }))
