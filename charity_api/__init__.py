# charity_api/__init__.py
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from charity_api.routes import (
    auth_bp,
    core,
    campaigns,
    donations_bp,
    stripe_bp,
    upload_bp,
    admin_bp,
)
from charity_api.utils.authz import register_jwt_callbacks
from charity_api.utils.errors import register_error_handlers
from charity_api.utils.logging_config import configure_logging

load_dotenv(dotenv_path=".env")


def create_app(test_config=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    max_upload_mb = int(os.getenv("MAX_UPLOAD_MB", "5"))
    app.config.update(
        # JWT
        JWT_SECRET_KEY=os.getenv("JWT_SECRET", "dev-secret"),
        JWT_TOKEN_LOCATION=["headers"],
        JWT_HEADER_NAME="Authorization",
        JWT_HEADER_TYPE="Bearer",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(
            hours=int(os.getenv("JWT_EXPIRES_HOURS", "24"))
        ),
        # Stripe
        STRIPE_SECRET_KEY=os.getenv("STRIPE_SECRET_KEY", ""),
        STRIPE_CURRENCY=os.getenv("STRIPE_CURRENCY", "usd"),
        FRONTEND_URL=os.getenv("FRONTEND_URL", "http://localhost:3000"),
        # Uploads
        UPLOAD_FOLDER=os.getenv(
            "UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads")
        ),
        MAX_UPLOAD_BYTES=max_upload_mb * 1024 * 1024,
        # multipart framing on top of the file itself
        MAX_CONTENT_LENGTH=(max_upload_mb + 1) * 1024 * 1024,
        # Logging / CORS
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        LOG_FORMAT=os.getenv("LOG_FORMAT", "text"),
        CORS_ORIGINS=os.getenv("CORS_ORIGINS", "*"),
    )
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    jwt = JWTManager(app)
    register_jwt_callbacks(jwt)
    register_error_handlers(app)

    origins = app.config["CORS_ORIGINS"].strip()
    CORS(
        app,
        origins="*"
        if origins == "*"
        else [o.strip() for o in origins.split(",") if o.strip()],
    )

    app.register_blueprint(core)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(campaigns, url_prefix="/campaigns")
    app.register_blueprint(donations_bp, url_prefix="/donations")
    app.register_blueprint(stripe_bp, url_prefix="/stripe")
    app.register_blueprint(upload_bp, url_prefix="/upload")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    app.logger.debug(
        "routes: %s", sorted(str(rule) for rule in app.url_map.iter_rules())
    )
    return app
