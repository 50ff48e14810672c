from flask import Blueprint, request, jsonify
from charity_api.services.campaign_service import (
    search_campaigns,
    categories,
    find_campaign,
    add_campaign,
    edit_campaign,
    remove_campaign,
)
from charity_api.utils.authz import require_role
from charity_api.utils.validators import json_object

campaigns = Blueprint("campaigns", __name__)


# GET /campaigns?search=&category=&page=&limit=
@campaigns.get("/")
def list_all():
    page = search_campaigns(request.args)
    return (
        jsonify(
            {
                "success": True,
                "message": "Campaigns retrieved successfully.",
                "data": page["campaigns"],
                "total": page["total"],
                "totalPages": page["totalPages"],
                "currentPage": page["currentPage"],
            }
        ),
        200,
    )


@campaigns.get("/categories")
def list_categories():
    return jsonify({"success": True, "data": categories()}), 200


@campaigns.get("/<campaign_id>")
def get_one(campaign_id):
    camp = find_campaign(campaign_id)
    return (
        jsonify(
            {"success": True, "message": "Campaign retrieved successfully.", "data": camp}
        ),
        200,
    )


# POST /campaigns  { title, goal_amount, description?, image_url?, category? }
@campaigns.post("/")
@require_role("admin")
def create():
    body = json_object(request.get_json(force=True, silent=True))
    camp = add_campaign(body)
    return (
        jsonify(
            {"success": True, "message": "Campaign created successfully.", "data": camp}
        ),
        201,
    )


# PUT /campaigns/<id>  partial: only the keys present are changed
@campaigns.put("/<campaign_id>")
@require_role("admin")
def update(campaign_id):
    body = json_object(request.get_json(force=True, silent=True))
    camp = edit_campaign(campaign_id, body)
    return (
        jsonify(
            {"success": True, "message": "Campaign updated successfully.", "data": camp}
        ),
        200,
    )


@campaigns.delete("/<campaign_id>")
@require_role("admin")
def delete(campaign_id):
    remove_campaign(campaign_id)
    return jsonify({"success": True, "message": "Campaign deleted successfully."}), 200
