from __future__ import annotations

from flask import Blueprint, jsonify, request


def create_blueprint(ctx):
    bp = Blueprint("settings_routes", __name__)
    config = ctx["config"]
    logger = ctx["logger"]

    @bp.route("/api/settings")
    def api_get_settings():
        return jsonify(config.get_all_settings())

    @bp.route("/api/settings", methods=["POST"])
    def api_save_settings():
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"success": False, "error": "No data provided"}), 400
        try:
            data = dict(data)
            for key in config.SECRET_KEYS:
                if data.get(key) == config.MASKED_SECRET:
                    del data[key]
            config.save_settings(data)
            ctx["reload_providers"]()
            return jsonify({"success": True})
        except Exception as e:
            logger.error("Failed to save settings: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500

    @bp.route("/api/validate/config")
    def api_validate_config():
        include_network = request.args.get("network", "0").lower() in ("1", "true", "yes")
        return jsonify(ctx["runtime_config_validation"](run_network_tests=include_network))

    @bp.route("/api/test/prowlarr", methods=["POST"])
    def api_test_prowlarr():
        data = request.get_json(silent=True) or {}
        url = (data.get("url") or config.PROWLARR_URL).rstrip("/")
        api_key = data.get("api_key") or ""
        if not api_key or api_key == config.MASKED_SECRET:
            api_key = config.PROWLARR_API_KEY
        return jsonify(ctx["test_prowlarr_connection"](url, api_key))

    @bp.route("/api/test/tmdb", methods=["POST"])
    def api_test_tmdb():
        data = request.get_json(silent=True) or {}
        api_key = data.get("api_key") or ""
        if not api_key or api_key == config.MASKED_SECRET:
            api_key = config.TMDB_API_KEY
        return jsonify(ctx["test_tmdb_connection"](api_key, config.TMDB_BASE_URL))

    return bp
