import math
from typing import Any, Dict

import psycopg2.errors
from flask import current_app

from charity_api.models.campaign import (
    list_campaigns,
    list_categories,
    get_campaign,
    create_campaign,
    update_campaign,
    delete_campaign,
)
from charity_api.utils.errors import ConflictError, NotFoundError, ValidationError
from charity_api.utils.serializers import serialize_campaign
from charity_api.utils.validators import parse_amount, parse_id, positive_int

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 6
MAX_LIMIT = 100
# keeps (page - 1) * limit far inside a BIGINT offset
MAX_PAGE = 10_000_000


def _optional_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _campaign_id(raw) -> int:
    campaign_id = parse_id(raw)
    if campaign_id is None:
        raise ValidationError("Valid campaign ID is required.")
    return campaign_id


def search_campaigns(args) -> Dict[str, Any]:
    page = positive_int(args.get("page"), DEFAULT_PAGE, MAX_PAGE)
    limit = positive_int(args.get("limit"), DEFAULT_LIMIT, MAX_LIMIT)
    rows, total = list_campaigns(
        search=args.get("search") or "",
        category=args.get("category") or "",
        limit=limit,
        offset=(page - 1) * limit,
    )
    return {
        "campaigns": [serialize_campaign(r) for r in rows],
        "total": total,
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
    }


def categories() -> list[str]:
    return list_categories()


def find_campaign(raw_id) -> Dict[str, Any]:
    camp = get_campaign(_campaign_id(raw_id))
    if not camp:
        raise NotFoundError("Campaign not found.")
    return serialize_campaign(camp)


def add_campaign(body: dict) -> Dict[str, Any]:
    title = _optional_text(body.get("title"))
    if not title or body.get("goal_amount") in (None, ""):
        raise ValidationError("Title and goal_amount are required.")
    goal = parse_amount(body.get("goal_amount"))
    if goal is None:
        raise ValidationError("Goal amount must be a positive number.")

    camp = create_campaign(
        title=title,
        goal_amount=goal,
        description=_optional_text(body.get("description")),
        image_url=_optional_text(body.get("image_url")),
        category=_optional_text(body.get("category")),
    )
    current_app.logger.info("campaign %s created", camp["id"])
    return serialize_campaign(camp)


def edit_campaign(raw_id, body: dict) -> Dict[str, Any]:
    """Partial update: keys absent from the body are left unchanged."""
    campaign_id = _campaign_id(raw_id)
    updates = {}
    if "title" in body:
        title = _optional_text(body["title"])
        if not title:
            raise ValidationError("Title cannot be empty.")
        updates["title"] = title
    if "goal_amount" in body:
        goal = parse_amount(body["goal_amount"])
        if goal is None:
            raise ValidationError("Goal amount must be a positive number.")
        updates["goal_amount"] = goal
    for key in ("description", "image_url", "category"):
        if key in body:
            updates[key] = _optional_text(body[key])

    camp = update_campaign(campaign_id, **updates)
    if camp is None:
        raise NotFoundError("Campaign not found.")
    current_app.logger.info("campaign %s updated: %s", campaign_id, sorted(updates))
    return serialize_campaign(camp)


def remove_campaign(raw_id) -> None:
    campaign_id = _campaign_id(raw_id)
    try:
        deleted = delete_campaign(campaign_id)
    except psycopg2.errors.ForeignKeyViolation:
        raise ConflictError("Campaign has donations and cannot be deleted.")
    if not deleted:
        raise NotFoundError("Campaign not found.")
    current_app.logger.info("campaign %s deleted", campaign_id)
