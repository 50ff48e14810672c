from decimal import Decimal
from typing import Any, Tuple

from charity_api.utils.db import db_transaction

CAMPAIGN_COLS = [
    "id",
    "title",
    "description",
    "goal_amount",
    "raised_amount",
    "image_url",
    "category",
    "created_at",
]
_SELECT = ", ".join(CAMPAIGN_COLS)

# Columns an update may touch; anything else in the payload is ignored.
UPDATABLE = ("title", "description", "goal_amount", "image_url", "category")


def _filters(search: str | None, category: str | None) -> Tuple[str, list]:
    where, params = [], []
    if search and search.strip():
        where.append("(title ILIKE %s OR description ILIKE %s)")
        pattern = f"%{search.strip()}%"
        params.extend([pattern, pattern])
    if category and category.strip() and category.strip() != "all":
        where.append("category = %s")
        params.append(category.strip())
    clause = f"WHERE {' AND '.join(where)}" if where else ""
    return clause, params


def list_campaigns(
    *, search: str | None, category: str | None, limit: int, offset: int
) -> Tuple[list[dict[str, Any]], int]:
    """Return (page of campaigns newest first, total matching count)."""
    clause, params = _filters(search, category)
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(f"SELECT COUNT(*) FROM campaigns {clause}", tuple(params))
        total = int(cur.fetchone()[0])
        cur.execute(
            f"""
            SELECT {_SELECT}
            FROM campaigns
            {clause}
            ORDER BY created_at DESC, id DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params + [limit, offset]),
        )
        rows = [dict(zip(CAMPAIGN_COLS, r)) for r in cur.fetchall()]
        return rows, total


def list_categories() -> list[str]:
    sql = """
    SELECT DISTINCT category
    FROM campaigns
    WHERE category IS NOT NULL AND category <> ''
    ORDER BY category
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql)
        return [r[0] for r in cur.fetchall()]


def get_campaign(campaign_id: int) -> dict[str, Any] | None:
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(f"SELECT {_SELECT} FROM campaigns WHERE id = %s", (campaign_id,))
        row = cur.fetchone()
        return dict(zip(CAMPAIGN_COLS, row)) if row else None


def create_campaign(
    *,
    title: str,
    goal_amount: Decimal,
    description: str | None = None,
    image_url: str | None = None,
    category: str | None = None,
) -> dict[str, Any]:
    sql = f"""
    INSERT INTO campaigns (title, description, goal_amount, image_url, category)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING {_SELECT}
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (title, description, goal_amount, image_url, category))
        return dict(zip(CAMPAIGN_COLS, cur.fetchone()))


def update_campaign(campaign_id: int, **fields) -> dict[str, Any] | None:
    sets, params = [], []
    for col in UPDATABLE:
        if col in fields:
            sets.append(f"{col} = %s")
            params.append(fields[col])
    if not sets:
        return get_campaign(campaign_id)
    params.append(campaign_id)
    sql = f"UPDATE campaigns SET {', '.join(sets)} WHERE id = %s RETURNING {_SELECT}"
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, tuple(params))
        row = cur.fetchone()
        return dict(zip(CAMPAIGN_COLS, row)) if row else None


def delete_campaign(campaign_id: int) -> bool:
    """Hard delete. Raises psycopg2.errors.ForeignKeyViolation if donations exist."""
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute("DELETE FROM campaigns WHERE id = %s", (campaign_id,))
        return cur.rowcount > 0


def increment_raised_amount(cur, campaign_id: int, amount: Decimal) -> dict | None:
    """
    Additive update of the running total, executed on the caller's cursor so it
    shares the caller's transaction.
    """
    cur.execute(
        """
        UPDATE campaigns
        SET raised_amount = raised_amount + %s
        WHERE id = %s
        RETURNING id, raised_amount, goal_amount
        """,
        (amount, campaign_id),
    )
    row = cur.fetchone()
    if not row:
        return None
    return {"id": row[0], "raised_amount": row[1], "goal_amount": row[2]}
