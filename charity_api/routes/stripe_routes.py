from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from charity_api.services.payment_service import (
    create_checkout_session,
    verify_donation,
)
from charity_api.utils.authz import current_claim
from charity_api.utils.validators import json_object

stripe_bp = Blueprint("stripe", __name__)


# POST /stripe/create-checkout-session  { amount, campaignId, campaignTitle? }
@stripe_bp.post("/create-checkout-session")
@jwt_required()
def checkout_session():
    body = json_object(request.get_json(force=True, silent=True))
    data = create_checkout_session(user_id=current_claim()["id"], body=body)
    return jsonify({"success": True, "data": data}), 200


# POST /stripe/verify-donation  { sessionId }
@stripe_bp.post("/verify-donation")
@jwt_required()
def verify():
    body = json_object(request.get_json(force=True, silent=True))
    donation, created = verify_donation(body)
    message = (
        "Donation verified and recorded successfully"
        if created
        else "Donation already recorded"
    )
    return jsonify({"success": True, "message": message, "data": donation}), 200
