from __future__ import annotations

from flask import Blueprint, jsonify, request

from category_config import CategoryConfigError


def create_blueprint(ctx):
    bp = Blueprint("admin_routes", __name__)
    categories = ctx["category_config"]
    logger = ctx["logger"]

    @bp.route("/api/admin/categories")
    def api_list_categories():
        return jsonify({"categories": categories.get_all_categories()})

    @bp.route("/api/admin/categories", methods=["POST"])
    def api_save_category():
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"success": False, "error": "No data provided"}), 400
        try:
            category = categories.upsert_category(data)
        except CategoryConfigError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception as e:
            logger.error("Failed to save category: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "category": category})

    @bp.route("/api/admin/categories/<category_id>", methods=["DELETE"])
    def api_delete_category(category_id):
        try:
            deleted = categories.delete_category(category_id)
        except Exception as e:
            logger.error("Failed to delete category %s: %s", category_id, e)
            return jsonify({"success": False, "error": str(e)}), 500
        if not deleted:
            return jsonify({"success": False, "error": f"Unknown category: {category_id}"}), 404
        return jsonify({"success": True})

    return bp
