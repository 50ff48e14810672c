"""
Test fixtures: the Flask app, a test client, token helpers, and an in-memory
store that stands in for the PostgreSQL model functions.
"""

import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import psycopg2.errors
import pytest
import stripe
from flask_jwt_extended import create_access_token

from charity_api import create_app

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


class FakeStore:
    """Mirrors the contracts of charity_api.models.* over plain dicts."""

    def __init__(self):
        self._lock = threading.Lock()
        self.users = {}
        self.campaigns = {}
        self.donations = {}
        self._ids = {"users": 0, "campaigns": 0, "donations": 0}
        self._clock = 0
        self.calls = []

    def _next(self, table):
        self._ids[table] += 1
        self._clock += 1
        return self._ids[table], BASE_TIME + timedelta(seconds=self._clock)

    # users
    def get_user_by_email(self, email):
        self.calls.append("get_user_by_email")
        for u in self.users.values():
            if u["email"] == email:
                return dict(u)
        return None

    def create_user(self, name, email, password_hash, role="donor"):
        with self._lock:
            if any(u["email"] == email for u in self.users.values()):
                raise psycopg2.errors.UniqueViolation("users_email_key")
            uid, ts = self._next("users")
            self.users[uid] = {
                "id": uid,
                "name": name,
                "email": email,
                "password_hash": password_hash,
                "role": role,
                "created_at": ts,
            }
        user = dict(self.users[uid])
        user.pop("password_hash")
        return user

    # campaigns
    def add_campaign(self, title, goal_amount, description=None, image_url=None, category=None):
        return self.create_campaign(
            title=title,
            goal_amount=Decimal(str(goal_amount)),
            description=description,
            image_url=image_url,
            category=category,
        )

    def create_campaign(self, *, title, goal_amount, description=None, image_url=None, category=None):
        with self._lock:
            cid, ts = self._next("campaigns")
            self.campaigns[cid] = {
                "id": cid,
                "title": title,
                "description": description,
                "goal_amount": goal_amount,
                "raised_amount": Decimal("0.00"),
                "image_url": image_url,
                "category": category,
                "created_at": ts,
            }
            return dict(self.campaigns[cid])

    def get_campaign(self, campaign_id):
        self.calls.append("get_campaign")
        camp = self.campaigns.get(campaign_id)
        return dict(camp) if camp else None

    def list_campaigns(self, *, search, category, limit, offset):
        rows = list(self.campaigns.values())
        if search and search.strip():
            needle = search.strip().lower()
            rows = [
                c
                for c in rows
                if needle in c["title"].lower()
                or needle in (c["description"] or "").lower()
            ]
        if category and category.strip() and category.strip() != "all":
            rows = [c for c in rows if c["category"] == category.strip()]
        rows.sort(key=lambda c: (c["created_at"], c["id"]), reverse=True)
        return [dict(c) for c in rows[offset : offset + limit]], len(rows)

    def list_categories(self):
        return sorted({c["category"] for c in self.campaigns.values() if c["category"]})

    def update_campaign(self, campaign_id, **fields):
        camp = self.campaigns.get(campaign_id)
        if camp is None:
            return None
        camp.update(fields)
        return dict(camp)

    def delete_campaign(self, campaign_id):
        if campaign_id not in self.campaigns:
            return False
        if any(d["campaign_id"] == campaign_id for d in self.donations.values()):
            raise psycopg2.errors.ForeignKeyViolation("donations_campaign_id_fkey")
        del self.campaigns[campaign_id]
        return True

    def _increment(self, campaign_id, amount):
        self.campaigns[campaign_id]["raised_amount"] += amount

    # donations
    def _insert_donation(self, user_id, campaign_id, amount, status, session_id=None, key=None):
        if campaign_id not in self.campaigns:
            raise psycopg2.errors.ForeignKeyViolation("donations_campaign_id_fkey")
        did, ts = self._next("donations")
        self.donations[did] = {
            "id": did,
            "user_id": user_id,
            "campaign_id": campaign_id,
            "amount": amount,
            "payment_status": status,
            "stripe_session_id": session_id,
            "idempotency_key": key,
            "created_at": ts,
        }
        return self._public(self.donations[did])

    @staticmethod
    def _public(d):
        out = dict(d)
        out.pop("idempotency_key", None)
        return out

    def create_pending_donation(self, user_id, campaign_id, amount, idempotency_key=None):
        with self._lock:
            if idempotency_key and any(
                d["user_id"] == user_id and d["idempotency_key"] == idempotency_key
                for d in self.donations.values()
            ):
                raise psycopg2.errors.UniqueViolation("uq_donations_user_idempotency")
            return self._insert_donation(
                user_id, campaign_id, amount, "pending", key=idempotency_key
            )

    def get_donation_by_idempotency_key(self, user_id, key):
        for d in self.donations.values():
            if d["user_id"] == user_id and d["idempotency_key"] == key:
                return self._public(d)
        return None

    def set_payment_status(self, donation_id, status):
        d = self.donations.get(donation_id)
        if d is None:
            return None
        d["payment_status"] = status
        return self._public(d)

    def complete_donation(self, donation_id):
        with self._lock:
            d = self.donations.get(donation_id)
            if d is None or d["payment_status"] != "pending":
                return None
            d["payment_status"] = "completed"
            self._increment(d["campaign_id"], d["amount"])
            return self._public(d)

    def get_donation_by_session_id(self, session_id):
        for d in self.donations.values():
            if d["stripe_session_id"] == session_id:
                return self._public(d)
        return None

    def record_session_donation(self, user_id, campaign_id, amount, session_id, status="completed"):
        with self._lock:
            existing = self.get_donation_by_session_id(session_id)
            if existing:
                return existing, False
            donation = self._insert_donation(
                user_id, campaign_id, amount, status, session_id=session_id
            )
            if status == "completed":
                self._increment(campaign_id, amount)
            return donation, True

    def list_donations_for_user(self, user_id):
        rows = [d for d in self.donations.values() if d["user_id"] == user_id]
        rows.sort(key=lambda d: (d["created_at"], d["id"]), reverse=True)
        return [
            {
                "id": d["id"],
                "amount": d["amount"],
                "payment_status": d["payment_status"],
                "created_at": d["created_at"],
                "campaign_id": d["campaign_id"],
                "campaign_title": self.campaigns[d["campaign_id"]]["title"],
            }
            for d in rows
        ]

    # reporting
    def _completed(self):
        return [d for d in self.donations.values() if d["payment_status"] == "completed"]

    def total_raised(self):
        return sum((d["amount"] for d in self._completed()), Decimal("0"))

    def total_donors(self):
        return len({d["user_id"] for d in self._completed()})

    def total_campaigns(self):
        return len(self.campaigns)

    def total_donations(self):
        return len(self.donations)

    def list_all_donations(self):
        rows = sorted(
            self.donations.values(), key=lambda d: (d["created_at"], d["id"]), reverse=True
        )
        out = []
        for d in rows:
            user = self.users.get(d["user_id"], {})
            out.append(
                {
                    "id": d["id"],
                    "amount": d["amount"],
                    "payment_status": d["payment_status"],
                    "created_at": d["created_at"],
                    "user_id": d["user_id"],
                    "donor_name": user.get("name"),
                    "donor_email": user.get("email"),
                    "campaign_id": d["campaign_id"],
                    "campaign_title": self.campaigns[d["campaign_id"]]["title"],
                }
            )
        return out


# (module, names) the services import from charity_api.models.*
PATCHED = {
    "charity_api.services.auth_service": ["get_user_by_email", "create_user"],
    "charity_api.services.campaign_service": [
        "list_campaigns",
        "list_categories",
        "get_campaign",
        "create_campaign",
        "update_campaign",
        "delete_campaign",
    ],
    "charity_api.services.donation_service": [
        "get_campaign",
        "create_pending_donation",
        "complete_donation",
        "get_donation_by_idempotency_key",
        "list_donations_for_user",
        "set_payment_status",
    ],
    "charity_api.services.payment_service": [
        "get_campaign",
        "get_donation_by_session_id",
        "record_session_donation",
    ],
    "charity_api.services.admin_service": [
        "total_raised",
        "total_donors",
        "total_campaigns",
        "total_donations",
        "list_all_donations",
    ],
}


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    for module, names in PATCHED.items():
        for name in names:
            monkeypatch.setattr(f"{module}.{name}", getattr(fake, name))
    return fake


@pytest.fixture
def app(store, tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "JWT_SECRET_KEY": "test-secret-key-for-testing",
            "STRIPE_SECRET_KEY": "sk_test_fake",
            "FRONTEND_URL": "http://frontend.test",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "MAX_UPLOAD_BYTES": 1024,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_token(app):
    def _make(user_id=2, role="donor", email=None, expires_delta=None):
        with app.app_context():
            return create_access_token(
                identity=str(user_id),
                additional_claims={
                    "id": user_id,
                    "email": email or f"user{user_id}@test.com",
                    "role": role,
                },
                expires_delta=expires_delta,
            )

    return _make


@pytest.fixture
def donor_headers(make_token):
    return {"Authorization": f"Bearer {make_token(2, 'donor')}"}


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token(1, 'admin')}"}


class FakeCheckout:
    """
    Replaces stripe.checkout.Session.create/retrieve. Sessions are handed out
    as real StripeObjects so code under test sees the library's access rules.
    """

    def __init__(self):
        self.sessions = {}
        self.created = []
        self.fail_with = None

    @staticmethod
    def _session(raw):
        return stripe.checkout.Session.construct_from(raw, "sk_test_fake")

    def create(self, **kwargs):
        if self.fail_with:
            raise self.fail_with
        sid = f"cs_test_{len(self.sessions) + 1}"
        self.created.append(kwargs)
        self.sessions[sid] = {
            "id": sid,
            "object": "checkout.session",
            "url": f"https://checkout.stripe.test/pay/{sid}",
            "payment_status": "unpaid",
            "metadata": dict(kwargs["metadata"]),
        }
        return self._session(self.sessions[sid])

    def retrieve(self, session_id):
        if self.fail_with:
            raise self.fail_with
        if session_id not in self.sessions:
            raise stripe.InvalidRequestError(
                f"No such checkout.session: '{session_id}'", "id"
            )
        return self._session(self.sessions[session_id])

    def mark_paid(self, session_id):
        self.sessions[session_id]["payment_status"] = "paid"


@pytest.fixture
def checkout(monkeypatch):
    fake = FakeCheckout()
    monkeypatch.setattr(stripe.checkout.Session, "create", fake.create)
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", fake.retrieve)
    return fake
