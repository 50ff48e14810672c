"""
Read-only reporting queries. Each function opens its own connection so the
platform counters can be fetched in parallel.
"""

from decimal import Decimal
from typing import Any, Dict, List

from charity_api.utils.db import db_transaction


def _scalar(sql: str):
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql)
        return cur.fetchone()[0]


def total_raised() -> Decimal:
    return _scalar(
        "SELECT COALESCE(SUM(amount), 0) FROM donations WHERE payment_status = 'completed'"
    )


def total_donors() -> int:
    return int(
        _scalar(
            "SELECT COUNT(DISTINCT user_id) FROM donations WHERE payment_status = 'completed'"
        )
    )


def total_campaigns() -> int:
    return int(_scalar("SELECT COUNT(*) FROM campaigns"))


def total_donations() -> int:
    return int(_scalar("SELECT COUNT(*) FROM donations"))


def list_all_donations() -> List[Dict[str, Any]]:
    sql = """
    SELECT
        d.id, d.amount, d.payment_status, d.created_at,
        u.id AS user_id, u.name AS donor_name, u.email AS donor_email,
        c.id AS campaign_id, c.title AS campaign_title
    FROM donations d
    JOIN users u ON d.user_id = u.id
    JOIN campaigns c ON d.campaign_id = c.id
    ORDER BY d.created_at DESC, d.id DESC
    """
    cols = [
        "id",
        "amount",
        "payment_status",
        "created_at",
        "user_id",
        "donor_name",
        "donor_email",
        "campaign_id",
        "campaign_title",
    ]
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql)
        return [dict(zip(cols, r)) for r in cur.fetchall()]
