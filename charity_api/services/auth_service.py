import bcrypt
import psycopg2.errors
from typing import Dict, Any
from flask import current_app
from flask_jwt_extended import create_access_token

from charity_api.models.user import get_user_by_email, create_user
from charity_api.utils.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ValidationError,
)
from charity_api.utils.serializers import serialize_user
from charity_api.utils.validators import is_valid_email

MIN_PASSWORD_LENGTH = 6
# Registration can only mint donors; admins are promoted out-of-band.
REGISTRATION_ROLE = "donor"


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def make_token(user: Dict[str, Any]) -> str:
    """Signed access token carrying the {id, email, role} claim."""
    return create_access_token(
        identity=str(user["id"]),
        additional_claims={
            "id": user["id"],
            "email": user["email"],
            "role": user["role"],
        },
    )


def register_user(data: dict) -> dict:
    name = data.get("name")
    email = data.get("email")
    password = data.get("password")

    if not all(isinstance(v, str) and v.strip() for v in (name, email, password)):
        raise ValidationError("Name, email, and password are required.")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if get_user_by_email(email):
        raise DuplicateEmailError("A user with this email already exists.")

    if data.get("role") not in (None, REGISTRATION_ROLE):
        current_app.logger.warning(
            "register: role %r requested for %s, storing %r",
            data.get("role"),
            email,
            REGISTRATION_ROLE,
        )

    try:
        user = create_user(
            name=name.strip(),
            email=email,
            password_hash=_hash_password(password),
            role=REGISTRATION_ROLE,
        )
    except psycopg2.errors.UniqueViolation:
        # lost a race with a concurrent registration for the same email
        raise DuplicateEmailError("A user with this email already exists.")

    current_app.logger.info("register: user %s created", user["id"])
    return {"user": serialize_user(user), "token": make_token(user)}


def login_user(data: dict) -> dict:
    email = data.get("email")
    password = data.get("password")
    if not (isinstance(email, str) and email and isinstance(password, str) and password):
        raise ValidationError("Email and password are required.")

    user = get_user_by_email(email)
    if not user or not _verify_password(password, user["password_hash"]):
        current_app.logger.warning("login: rejected credentials for %s", email)
        raise InvalidCredentialsError("Invalid email or password.")

    profile = serialize_user(user)
    profile.pop("created_at", None)
    return {"user": profile, "token": make_token(user)}
