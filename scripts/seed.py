#!/usr/bin/env python3
"""
Seed database with demo data.

Usage: python scripts/seed.py [--force]
Requires: migrations applied (alembic upgrade head)
"""
import os
import sys

# Ensure the package is importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bcrypt
from charity_api.utils.db import db_transaction

ADMIN_EMAIL = "admin@example.com"
DONOR_EMAIL = "donor@example.com"
SEED_CATEGORIES = ("Education", "Environment", "Health")


def _hash(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed():
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM users WHERE email = %s", (ADMIN_EMAIL,))
        if cur.fetchone()[0] > 0:
            print(f"Already seeded ({ADMIN_EMAIL} exists). Use --force to re-seed.")
            return

        # 1. Users. The admin row is written directly: no API path mints admins.
        cur.execute(
            """
            INSERT INTO users (name, email, password_hash, role)
            VALUES ('Demo Admin', %s, %s, 'admin'),
                   ('Demo Donor', %s, %s, 'donor')
            RETURNING id
            """,
            (ADMIN_EMAIL, _hash("admin123"), DONOR_EMAIL, _hash("donor123")),
        )
        donor_id = cur.fetchall()[1][0]

        # 2. Campaigns
        cur.execute(
            """
            INSERT INTO campaigns (title, description, goal_amount, category)
            VALUES
                ('Help Build the School', 'Classrooms for 200 children.', 10000, 'Education'),
                ('Community Garden', 'Raised beds and tools for the neighbourhood.', 5000, 'Environment'),
                ('Emergency Relief Fund', 'Medical supplies for flood victims.', 25000, 'Health')
            RETURNING id
            """
        )
        camp_id = cur.fetchall()[0][0]

        # 3. Completed donations, with raised_amount kept in step
        cur.execute(
            """
            INSERT INTO donations (user_id, campaign_id, amount, payment_status)
            VALUES (%s, %s, 25, 'completed'), (%s, %s, 50, 'completed')
            """,
            (donor_id, camp_id, donor_id, camp_id),
        )
        cur.execute(
            "UPDATE campaigns SET raised_amount = raised_amount + 75 WHERE id = %s",
            (camp_id,),
        )

    print("Seeded successfully.")
    print(f"  Admin: {ADMIN_EMAIL} / admin123")
    print(f"  Donor: {DONOR_EMAIL} / donor123")
    print("  Campaigns: 3, donations: 2 on the first campaign")


def force_seed():
    """Clear demo data and re-seed. Use with caution."""
    with db_transaction() as conn, conn.cursor() as cur:
        cur.execute(
            """
            DELETE FROM donations WHERE user_id IN
              (SELECT id FROM users WHERE email IN (%s, %s))
            """,
            (ADMIN_EMAIL, DONOR_EMAIL),
        )
        cur.execute(
            """
            DELETE FROM campaigns c
            WHERE c.category IN %s
              AND NOT EXISTS (SELECT 1 FROM donations d WHERE d.campaign_id = c.id)
            """,
            (SEED_CATEGORIES,),
        )
        cur.execute(
            "DELETE FROM users WHERE email IN (%s, %s)", (ADMIN_EMAIL, DONOR_EMAIL)
        )
    print("Cleared demo data. Seeding...")
    seed()


if __name__ == "__main__":
    if "--force" in sys.argv:
        force_seed()
    else:
        seed()
