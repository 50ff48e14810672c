from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from charity_api.services.donation_service import donate, donations_for_user
from charity_api.utils.authz import current_claim
from charity_api.utils.validators import json_object

donations_bp = Blueprint("donations", __name__)


# POST /donations  { campaign_id, amount }  [Idempotency-Key header]
@donations_bp.post("/")
@jwt_required()
def create():
    body = json_object(request.get_json(force=True, silent=True))
    key = (request.headers.get("Idempotency-Key") or "").strip() or None
    receipt, created = donate(
        user_id=current_claim()["id"], body=body, idempotency_key=key
    )
    if not created:
        return (
            jsonify(
                {"success": True, "message": "Donation already recorded.", "data": receipt}
            ),
            200,
        )
    return (
        jsonify(
            {
                "success": True,
                "message": "Donation processed successfully.",
                "data": receipt,
            }
        ),
        201,
    )


@donations_bp.get("/my-donations")
@jwt_required()
def mine():
    items = donations_for_user(current_claim()["id"])
    return (
        jsonify(
            {
                "success": True,
                "message": "Donations retrieved successfully.",
                "data": items,
            }
        ),
        200,
    )
