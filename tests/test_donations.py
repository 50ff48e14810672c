from decimal import Decimal

import pytest


@pytest.fixture
def campaign(store):
    return store.add_campaign("School Library", 1000, "Books", category="Education")


def _donate(client, headers, campaign_id=1, amount=25, key=None):
    if key:
        headers = {**headers, "Idempotency-Key": key}
    return client.post(
        "/donations", json={"campaign_id": campaign_id, "amount": amount}, headers=headers
    )


def test_direct_donation_completes_and_raises_total(client, store, campaign, donor_headers):
    res = _donate(client, donor_headers, amount="25.00")
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["amount"] == 25.0
    assert data["campaign_id"] == 1
    assert data["payment_status"] == "completed"
    assert store.donations[data["donation_id"]]["user_id"] == 2
    assert store.campaigns[1]["raised_amount"] == Decimal("25.00")


def test_raised_amount_is_sum_of_completed_donations(client, store, campaign, donor_headers):
    for amount in (10, "2.50", 7.25):
        assert _donate(client, donor_headers, amount=amount).status_code == 201
    assert store.campaigns[1]["raised_amount"] == Decimal("19.75")
    completed = [d["amount"] for d in store.donations.values() if d["payment_status"] == "completed"]
    assert sum(completed) == store.campaigns[1]["raised_amount"]


def test_amount_is_rounded_to_cents(client, store, campaign, donor_headers):
    _donate(client, donor_headers, amount="10.005")
    assert store.campaigns[1]["raised_amount"] == Decimal("10.01")


@pytest.mark.parametrize("amount", [0, -1, "abc", "NaN", "Infinity", True])
def test_invalid_amount(client, store, campaign, donor_headers, amount):
    res = _donate(client, donor_headers, amount=amount)
    assert res.status_code == 400
    assert store.donations == {}


def test_missing_fields(client, campaign, donor_headers):
    res = client.post("/donations", json={}, headers=donor_headers)
    assert res.status_code == 400
    assert res.get_json()["message"] == "Campaign ID and amount are required."


def test_non_numeric_campaign_id(client, campaign, donor_headers):
    assert _donate(client, donor_headers, campaign_id="abc").status_code == 400


def test_unknown_campaign(client, store, donor_headers):
    res = _donate(client, donor_headers, campaign_id=42)
    assert res.status_code == 404
    assert store.donations == {}


def test_requires_authentication(client, campaign):
    res = client.post("/donations", json={"campaign_id": 1, "amount": 5})
    assert res.status_code == 401


def test_replay_with_idempotency_key_counts_once(client, store, campaign, donor_headers):
    first = _donate(client, donor_headers, amount=40, key="order-123")
    second = _donate(client, donor_headers, amount=40, key="order-123")
    assert first.status_code == 201
    assert second.status_code == 200
    assert second.get_json()["message"] == "Donation already recorded."
    assert (
        first.get_json()["data"]["donation_id"]
        == second.get_json()["data"]["donation_id"]
    )
    assert len(store.donations) == 1
    assert store.campaigns[1]["raised_amount"] == Decimal("40")


def test_idempotency_keys_are_scoped_per_user(client, store, campaign, make_token):
    alice = {"Authorization": f"Bearer {make_token(2)}"}
    bob = {"Authorization": f"Bearer {make_token(3)}"}
    assert _donate(client, alice, amount=5, key="k1").status_code == 201
    assert _donate(client, bob, amount=5, key="k1").status_code == 201
    assert store.campaigns[1]["raised_amount"] == Decimal("10")


def test_without_key_repeated_requests_are_separate_donations(
    client, store, campaign, donor_headers
):
    _donate(client, donor_headers, amount=5)
    _donate(client, donor_headers, amount=5)
    assert len(store.donations) == 2
    assert store.campaigns[1]["raised_amount"] == Decimal("10")


def test_failed_completion_marks_donation_failed(
    client, store, campaign, donor_headers, monkeypatch
):
    def boom(donation_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr("charity_api.services.donation_service.complete_donation", boom)
    res = _donate(client, donor_headers, amount=5)
    assert res.status_code == 500
    assert res.get_json() == {"success": False, "message": "Internal server error."}
    assert [d["payment_status"] for d in store.donations.values()] == ["failed"]
    assert store.campaigns[1]["raised_amount"] == Decimal("0.00")


def test_my_donations_newest_first_with_campaign_title(
    client, store, campaign, donor_headers, make_token
):
    store.add_campaign("Clean River", 500)
    _donate(client, donor_headers, campaign_id=1, amount=5)
    _donate(client, donor_headers, campaign_id=2, amount=7)
    other = {"Authorization": f"Bearer {make_token(9)}"}
    _donate(client, other, campaign_id=1, amount=100)

    res = client.get("/donations/my-donations", headers=donor_headers)
    assert res.status_code == 200
    rows = res.get_json()["data"]
    assert [(r["campaign_title"], r["amount"]) for r in rows] == [
        ("Clean River", 7.0),
        ("School Library", 5.0),
    ]
    assert all(r["payment_status"] == "completed" for r in rows)
