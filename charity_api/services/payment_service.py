"""
Hosted checkout (Stripe Checkout Sessions) and reconciliation of paid sessions
into the donation ledger.
"""

from typing import Any, Dict, Tuple

import psycopg2.errors
import stripe
from flask import current_app

from charity_api.models.campaign import get_campaign
from charity_api.models.donation import (
    get_donation_by_session_id,
    record_session_donation,
)
from charity_api.utils.errors import (
    NotFoundError,
    PaymentNotCompletedError,
    PaymentSetupError,
    ValidationError,
)
from charity_api.utils.serializers import serialize_donation
from charity_api.utils.validators import parse_amount, parse_id, to_minor_units


def _configure_stripe() -> None:
    key = current_app.config.get("STRIPE_SECRET_KEY")
    if not key:
        raise PaymentSetupError("Payment provider is not configured.")
    stripe.api_key = key


def _provider_message(e: Exception) -> str:
    return getattr(e, "user_message", None) or str(e) or "Payment provider error."


def _metadata_value(session, key: str):
    # StripeObject supports subscripting but not the dict API (.get) in recent releases
    try:
        return session["metadata"][key]
    except (KeyError, TypeError):
        return None


def create_checkout_session(*, user_id: int, body: dict) -> Dict[str, Any]:
    amount = parse_amount(body.get("amount"))
    if amount is None:
        raise ValidationError("Invalid donation amount")
    if body.get("campaignId") in (None, ""):
        raise ValidationError("Campaign ID is required")
    campaign_id = parse_id(body.get("campaignId"))
    if campaign_id is None:
        raise ValidationError("Valid campaign ID is required.")

    camp = get_campaign(campaign_id)
    if not camp:
        raise NotFoundError("Campaign not found.")
    raw_title = body.get("campaignTitle")
    title = (
        (str(raw_title).strip() if raw_title is not None else "")
        or camp["title"]
        or "Campaign"
    )

    frontend = current_app.config["FRONTEND_URL"].rstrip("/")
    _configure_stripe()
    try:
        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            mode="payment",
            line_items=[
                {
                    "price_data": {
                        "currency": current_app.config["STRIPE_CURRENCY"],
                        "product_data": {
                            "name": f"Donation: {title}",
                            "description": f"Supporting {title}",
                        },
                        "unit_amount": to_minor_units(amount),
                    },
                    "quantity": 1,
                }
            ],
            metadata={
                "campaignId": str(campaign_id),
                "userId": str(user_id),
                "amount": str(amount),
            },
            success_url=f"{frontend}/donation/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{frontend}/?cancelled=true",
        )
    except stripe.StripeError as e:
        current_app.logger.error("stripe: checkout session failed: %s", e)
        raise PaymentSetupError(_provider_message(e))

    current_app.logger.info(
        "stripe: session %s created for campaign %s (user %s, %s)",
        session["id"],
        campaign_id,
        user_id,
        amount,
    )
    return {"sessionId": session["id"], "url": session["url"]}


def verify_donation(body: dict) -> Tuple[Dict[str, Any], bool]:
    """
    Confirm a checkout session was paid and commit it to the ledger exactly once.
    Returns (donation, created); replays of a session return the first record.
    """
    session_id = body.get("sessionId")
    if not isinstance(session_id, str) or not session_id.strip():
        raise ValidationError("Session ID is required")
    session_id = session_id.strip()

    _configure_stripe()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as e:
        current_app.logger.error("stripe: retrieve %s failed: %s", session_id, e)
        raise PaymentSetupError(_provider_message(e))

    if session["payment_status"] != "paid":
        raise PaymentNotCompletedError(
            "Payment not completed", extra={"status": session["payment_status"]}
        )

    existing = get_donation_by_session_id(session_id)
    if existing:
        current_app.logger.info("stripe: session %s already recorded", session_id)
        return serialize_donation(existing), False

    campaign_id = parse_id(_metadata_value(session, "campaignId"))
    user_id = parse_id(_metadata_value(session, "userId"))
    amount = parse_amount(_metadata_value(session, "amount"))
    if campaign_id is None or user_id is None or amount is None:
        current_app.logger.error("stripe: session %s has unusable metadata", session_id)
        raise ValidationError("Checkout session is missing donation details.")

    try:
        donation, created = record_session_donation(
            user_id, campaign_id, amount, session_id
        )
    except psycopg2.errors.ForeignKeyViolation:
        raise NotFoundError("Campaign not found.")

    if created:
        current_app.logger.info(
            "stripe: session %s recorded as donation %s (%s to campaign %s)",
            session_id,
            donation["id"],
            amount,
            campaign_id,
        )
    return serialize_donation(donation), created
