from flask import Blueprint, jsonify

from charity_api.services.admin_service import platform_stats, all_donations
from charity_api.utils.authz import require_role

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/stats")
@require_role("admin")
def stats():
    return jsonify({"success": True, "data": platform_stats()}), 200


@admin_bp.get("/donations")
@require_role("admin")
def donations():
    return jsonify({"success": True, "data": all_donations()}), 200
