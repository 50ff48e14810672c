from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from charity_api.services.upload_service import save_image

upload_bp = Blueprint("upload", __name__)


# POST /upload  multipart/form-data, field "image"
@upload_bp.post("/")
@jwt_required()
def upload_image():
    data = save_image(request.files.get("image"))
    return (
        jsonify(
            {"success": True, "message": "Image uploaded successfully", "data": data}
        ),
        200,
    )
