from .auth_routes import auth_bp
from .core_routes import core
from .campaign_routes import campaigns
from .donation_routes import donations_bp
from .stripe_routes import stripe_bp
from .upload_routes import upload_bp
from .admin_routes import admin_bp

__all__ = [
    "auth_bp",
    "core",
    "campaigns",
    "donations_bp",
    "stripe_bp",
    "upload_bp",
    "admin_bp",
]
