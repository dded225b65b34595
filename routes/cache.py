from __future__ import annotations

from flask import Blueprint, jsonify


def create_blueprint(ctx):
    bp = Blueprint("cache_routes", __name__)
    curator = ctx["curator"]
    scheduler = ctx["scheduler"]
    logger = ctx["logger"]

    @bp.route("/api/cache")
    def api_cache_status():
        return jsonify(curator.status())

    @bp.route("/api/cache/refresh", methods=["POST"])
    def api_cache_refresh():
        summary = scheduler.run_now()
        return jsonify(summary), (200 if summary.get("success") else 500)

    @bp.route("/api/cache/clear", methods=["POST"])
    def api_cache_clear():
        try:
            deleted = curator.clear_cache()
        except Exception as e:
            logger.error("Failed to clear featured content cache: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "deleted": deleted})

    @bp.route("/api/scheduler")
    def api_scheduler_status():
        return jsonify(scheduler.status())

    return bp
