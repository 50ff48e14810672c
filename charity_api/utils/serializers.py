from typing import Any, Dict
from decimal import Decimal


def money(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(value))


def iso(value):
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def serialize_user(row: Dict[str, Any]) -> Dict[str, Any]:
    out = {
        "id": row["id"],
        "name": row.get("name"),
        "email": row["email"],
        "role": row["role"],
    }
    if row.get("created_at") is not None:
        out["created_at"] = iso(row["created_at"])
    return out


def serialize_campaign(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row.get("description"),
        "goal_amount": money(row["goal_amount"]),
        "raised_amount": money(row.get("raised_amount")),
        "image_url": row.get("image_url"),
        "category": row.get("category"),
        "created_at": iso(row.get("created_at")),
    }


def serialize_donation(row: Dict[str, Any]) -> Dict[str, Any]:
    """Donation rows come in several shapes (plain, joined); keep whatever keys exist."""
    out = dict(row)
    out["amount"] = money(row.get("amount"))
    if "created_at" in out:
        out["created_at"] = iso(out["created_at"])
    return out
