from __future__ import annotations

from flask import Blueprint, Response, jsonify, request


def create_blueprint(ctx):
    bp = Blueprint("system_routes", __name__)
    store = ctx["store"]

    @bp.route("/api/health")
    def api_health():
        return jsonify({"status": "ok", "version": ctx.get("version", "1.0.0")})

    @bp.route("/readyz")
    def readyz():
        deep = request.args.get("deep", "0").lower() in ("1", "true", "yes")
        strict = request.args.get("strict", "0").lower() in ("1", "true", "yes")

        db_ok = True
        db_error = None
        try:
            store.ping()
        except Exception as e:
            db_ok = False
            db_error = str(e)

        runtime_diag = ctx["runtime_config_validation"](run_network_tests=deep)

        local_failures = []
        if not db_ok:
            local_failures.append({"component": "database", "error": db_error})
        for path_check in runtime_diag.get("paths", []):
            if path_check.get("ok") is False:
                local_failures.append({
                    "component": "path",
                    "name": path_check.get("name"),
                    "error": path_check.get("error", "path check failed"),
                })

        service_failures = []
        if deep:
            for name, check in (runtime_diag.get("services") or {}).items():
                if check.get("success") is False:
                    service_failures.append({
                        "component": name,
                        "error": check.get("error"),
                        "error_class": check.get("error_class"),
                    })

        failures = list(local_failures)
        if strict:
            failures.extend(service_failures)

        return jsonify({
            "status": "ready" if not failures else "not_ready",
            "strict": strict,
            "deep": deep,
            "checks": {
                "database": {"ok": db_ok, "error": db_error},
                "cache": {"state": ctx["cache_store"].state() if db_ok else None},
                "runtime": runtime_diag,
            },
            "failures": failures,
            "warnings": [] if strict else service_failures,
        }), (200 if not failures else 503)

    @bp.route("/api/schema")
    def api_schema_status():
        migrations = ctx["get_migration_status"](store.connect())
        return jsonify({"migrations": migrations, "count": len(migrations)})

    @bp.route("/metrics")
    def metrics_endpoint():
        cache_store = ctx["cache_store"]
        lines = [
            "# HELP videoclub_cache_valid Whether the featured content cache is valid (1=valid).",
            "# TYPE videoclub_cache_valid gauge",
            f"videoclub_cache_valid {1 if cache_store.is_valid() else 0}",
            "# HELP videoclub_cache_ttl_seconds_remaining Seconds until the featured content cache expires.",
            "# TYPE videoclub_cache_ttl_seconds_remaining gauge",
            f"videoclub_cache_ttl_seconds_remaining {cache_store.time_remaining()}",
        ]
        return Response(
            ctx["telemetry"].metrics.render(lines),
            mimetype="text/plain; version=0.0.4",
        )

    @bp.route("/api/config")
    def api_config():
        config = ctx["config"]
        return jsonify({
            "prowlarr": config.has_prowlarr(),
            "tmdb": config.has_tmdb(),
            "dry_run": ctx["curator"].dry_run,
            "scheduler_mode": ctx["scheduler"].trigger.mode,
            "featured_content_ttl_seconds": ctx["cache_store"].ttl_seconds,
            "category_item_limit": config.CATEGORY_ITEM_LIMIT,
        })

    return bp
