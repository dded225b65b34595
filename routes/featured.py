from __future__ import annotations

from flask import Blueprint, jsonify

from featured import MEDIA_TYPES


def create_blueprint(ctx):
    bp = Blueprint("featured_routes", __name__)
    curator = ctx["curator"]
    enricher = ctx["enricher"]

    @bp.route("/api/featured")
    def api_featured():
        return jsonify(curator.get())

    @bp.route("/api/featured/category/<category_id>")
    def api_featured_category(category_id):
        category = curator.get_category(category_id)
        if category is None:
            return jsonify({"error": f"Unknown category: {category_id}"}), 404
        return jsonify(category)

    @bp.route("/api/featured/item/<media_type>/<int:tmdb_id>")
    def api_featured_item(media_type, tmdb_id):
        if media_type not in MEDIA_TYPES:
            return jsonify({"error": f"media_type must be one of {', '.join(MEDIA_TYPES)}"}), 400
        if not enricher.enabled:
            return jsonify({"error": "TMDb is not configured"}), 503
        item = enricher.get_enriched_item(tmdb_id, media_type)
        if item is None:
            return jsonify({"error": "Item not found"}), 404
        return jsonify(item)

    return bp
