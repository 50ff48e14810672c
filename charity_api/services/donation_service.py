from typing import Any, Dict, List, Tuple

import psycopg2.errors
from flask import current_app

from charity_api.models.campaign import get_campaign
from charity_api.models.donation import (
    create_pending_donation,
    complete_donation,
    get_donation_by_idempotency_key,
    list_donations_for_user,
    set_payment_status,
)
from charity_api.utils.errors import NotFoundError, ValidationError
from charity_api.utils.serializers import money, iso, serialize_donation
from charity_api.utils.validators import parse_amount, parse_id


def _receipt(donation: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "donation_id": donation["id"],
        "amount": money(donation["amount"]),
        "campaign_id": donation["campaign_id"],
        "payment_status": donation["payment_status"],
        "created_at": iso(donation["created_at"]),
    }


def donate(
    *, user_id: int, body: dict, idempotency_key: str | None = None
) -> Tuple[Dict[str, Any], bool]:
    """
    Direct (non-hosted) donation: record pending, then complete it and bump the
    campaign total atomically. Returns (receipt, created).

    With an idempotency key, a replay of the same (user, key) returns the
    donation recorded the first time instead of charging the campaign again.
    """
    if body.get("campaign_id") in (None, "") or body.get("amount") in (None, ""):
        raise ValidationError("Campaign ID and amount are required.")
    campaign_id = parse_id(body.get("campaign_id"))
    if campaign_id is None:
        raise ValidationError("Valid campaign ID is required.")
    amount = parse_amount(body.get("amount"))
    if amount is None:
        raise ValidationError("Donation amount must be a positive number.")

    if idempotency_key:
        existing = get_donation_by_idempotency_key(user_id, idempotency_key)
        if existing:
            current_app.logger.info(
                "donation replay for key %s -> %s", idempotency_key, existing["id"]
            )
            return _receipt(existing), False

    if not get_campaign(campaign_id):
        raise NotFoundError("Campaign not found.")

    try:
        donation = create_pending_donation(
            user_id, campaign_id, amount, idempotency_key=idempotency_key
        )
    except psycopg2.errors.UniqueViolation:
        # a concurrent request with the same key got there first
        return _receipt(get_donation_by_idempotency_key(user_id, idempotency_key)), False

    try:
        completed = complete_donation(donation["id"])
    except Exception:
        current_app.logger.exception("donation %s failed to complete", donation["id"])
        set_payment_status(donation["id"], "failed")
        raise

    current_app.logger.info(
        "donation %s: user %s gave %s to campaign %s",
        donation["id"],
        user_id,
        amount,
        campaign_id,
    )
    return _receipt(completed or donation), True


def donations_for_user(user_id: int) -> List[Dict[str, Any]]:
    return [serialize_donation(r) for r in list_donations_for_user(user_id)]
