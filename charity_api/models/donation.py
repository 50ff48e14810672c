from decimal import Decimal
from typing import Any, Dict, List, Tuple

from charity_api.models.campaign import increment_raised_amount
from charity_api.utils.db import db_transaction

DONATION_COLS = [
    "id",
    "user_id",
    "campaign_id",
    "amount",
    "payment_status",
    "stripe_session_id",
    "created_at",
]
_SELECT = ", ".join(DONATION_COLS)


def _row(row) -> Dict[str, Any] | None:
    return dict(zip(DONATION_COLS, row)) if row else None


def create_pending_donation(
    user_id: int,
    campaign_id: int,
    amount: Decimal,
    idempotency_key: str | None = None,
) -> Dict[str, Any]:
    sql = f"""
    INSERT INTO donations (user_id, campaign_id, amount, payment_status, idempotency_key)
    VALUES (%s, %s, %s, 'pending', %s)
    RETURNING {_SELECT}
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (user_id, campaign_id, amount, idempotency_key))
        return _row(cur.fetchone())


def get_donation_by_idempotency_key(user_id: int, key: str) -> Dict[str, Any] | None:
    sql = f"SELECT {_SELECT} FROM donations WHERE user_id = %s AND idempotency_key = %s"
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (user_id, key))
        return _row(cur.fetchone())


def set_payment_status(donation_id: int, status: str) -> Dict[str, Any] | None:
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(
            f"UPDATE donations SET payment_status = %s WHERE id = %s RETURNING {_SELECT}",
            (status, donation_id),
        )
        return _row(cur.fetchone())


def complete_donation(donation_id: int) -> Dict[str, Any] | None:
    """
    pending -> completed plus the campaign increment, in one transaction.
    Returns None when the donation is not pending (nothing is applied).
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(
            f"""
            UPDATE donations
            SET payment_status = 'completed'
            WHERE id = %s AND payment_status = 'pending'
            RETURNING {_SELECT}
            """,
            (donation_id,),
        )
        donation = _row(cur.fetchone())
        if donation is None:
            return None
        increment_raised_amount(cur, donation["campaign_id"], donation["amount"])
        return donation


def get_donation_by_session_id(session_id: str) -> Dict[str, Any] | None:
    sql = f"SELECT {_SELECT} FROM donations WHERE stripe_session_id = %s"
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (session_id,))
        return _row(cur.fetchone())


def record_session_donation(
    user_id: int,
    campaign_id: int,
    amount: Decimal,
    session_id: str,
    status: str = "completed",
) -> Tuple[Dict[str, Any], bool]:
    """
    Insert a terminal donation keyed by the checkout session id.
    Returns (donation, created). The increment is applied only when this call
    inserted the row, so concurrent replays of one session count once.
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(
            f"""
            INSERT INTO donations (user_id, campaign_id, amount, payment_status, stripe_session_id)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (stripe_session_id) DO NOTHING
            RETURNING {_SELECT}
            """,
            (user_id, campaign_id, amount, status, session_id),
        )
        donation = _row(cur.fetchone())
        if donation is None:
            cur.execute(
                f"SELECT {_SELECT} FROM donations WHERE stripe_session_id = %s",
                (session_id,),
            )
            return _row(cur.fetchone()), False
        if status == "completed":
            increment_raised_amount(cur, campaign_id, amount)
        return donation, True


def list_donations_for_user(user_id: int) -> List[Dict[str, Any]]:
    sql = """
    SELECT d.id, d.amount, d.payment_status, d.created_at,
           c.id AS campaign_id, c.title AS campaign_title
    FROM donations d
    JOIN campaigns c ON d.campaign_id = c.id
    WHERE d.user_id = %s
    ORDER BY d.created_at DESC, d.id DESC
    """
    cols = ["id", "amount", "payment_status", "created_at", "campaign_id", "campaign_title"]
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (user_id,))
        return [dict(zip(cols, r)) for r in cur.fetchall()]
