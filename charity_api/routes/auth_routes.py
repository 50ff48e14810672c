from flask import Blueprint, request, jsonify
from charity_api.services.auth_service import login_user, register_user
from charity_api.utils.validators import json_object

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    data = json_object(request.get_json(force=True, silent=True))
    resp = register_user(data)
    return (
        jsonify(
            {"success": True, "message": "User registered successfully.", "data": resp}
        ),
        201,
    )


@auth_bp.post("/login")
def login():
    data = json_object(request.get_json(force=True, silent=True))
    resp = login_user(data)
    return jsonify({"success": True, "message": "Login successful.", "data": resp}), 200
