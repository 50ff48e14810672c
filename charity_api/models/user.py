from typing import Optional, Dict, Any

from charity_api.utils.db import db_transaction

USER_COLS = ["id", "name", "email", "role", "created_at"]


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    sql = """
    SELECT id, name, email, role, created_at, password_hash
    FROM users WHERE email = %s
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (email,))
        row = cur.fetchone()
        if not row:
            return None
        return dict(zip(USER_COLS + ["password_hash"], row))


def create_user(
    name: str, email: str, password_hash: str, role: str = "donor"
) -> Dict[str, Any]:
    sql = """
    INSERT INTO users (name, email, password_hash, role)
    VALUES (%s, %s, %s, %s)
    RETURNING id, name, email, role, created_at
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (name, email, password_hash, role))
        return dict(zip(USER_COLS, cur.fetchone()))


def set_user_role(email: str, role: str) -> Optional[Dict[str, Any]]:
    """Operator-only: there is no HTTP path that reaches this."""
    sql = """
    UPDATE users SET role = %s WHERE email = %s
    RETURNING id, name, email, role, created_at
    """
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(sql, (role, email))
        row = cur.fetchone()
        return dict(zip(USER_COLS, row)) if row else None
