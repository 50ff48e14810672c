#!/usr/bin/env python3
"""
Grant (or revoke) the admin role. This is deliberately an operator script:
the HTTP API can only ever create donors.

Usage:
  python scripts/promote_admin.py user@example.com
  python scripts/promote_admin.py user@example.com --revoke
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from charity_api.models.user import set_user_role


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("email", help="email of an existing user (case-sensitive)")
    ap.add_argument("--revoke", action="store_true", help="demote back to donor")
    args = ap.parse_args()

    role = "donor" if args.revoke else "admin"
    user = set_user_role(args.email, role)
    if not user:
        print(f"No user with email {args.email!r}")
        sys.exit(1)
    print(f"User {user['id']} ({user['email']}) is now {user['role']}.")
    print("Existing tokens keep their old role claim until they expire.")


if __name__ == "__main__":
    main()
