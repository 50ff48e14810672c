from flask import Blueprint, jsonify, current_app, send_from_directory

core = Blueprint("core", __name__)


@core.get("/")
def root():
    return jsonify(
        {
            "success": True,
            "message": "Charity Crowdfunding API is running!",
            "version": "1.0.0",
            "endpoints": {
                "auth": "/auth",
                "campaigns": "/campaigns",
                "donations": "/donations",
                "admin": "/admin",
                "upload": "/upload",
                "stripe": "/stripe",
            },
        }
    )


@core.get("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
