"""Tests for API endpoints."""
from unittest.mock import AsyncMock

import pytest

from procvisual import main
from procvisual.adapters.mock import MockEmailAdapter
from procvisual.services.notifications import PASSWORD_RESET_SUBJECT, WELCOME_SUBJECT
from tests.conftest import signup_and_login


def _post_tx(client, headers, **overrides):
    payload = {
        "kind": "expense",
        "amount": "100",
        "category": "Food",
        "date": "2024-03-01",
        "description": "Market",
    }
    payload.update(overrides)
    return client.post("/api/transactions", json=payload, headers=headers)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_unknown_api_route(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "API route GET /api/does-not-exist not found"}


def test_categories(client):
    data = client.get("/api/categories").json()
    assert "Salary" in data["income"]
    assert "Food" in data["expense"]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

def test_signup_sends_welcome_email(client):
    """Sign-up answers success and queues the welcome email."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Maria", "contact": "+55 11 99999-0000", "email": "maria@example.com", "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User registered successfully"}
    assert [m["subject"] for m in MockEmailAdapter.outbox] == [WELCOME_SUBJECT]
    assert MockEmailAdapter.outbox[0]["to"] == "maria@example.com"


def test_signup_missing_fields(client):
    response = client.post("/api/auth/signup", json={"email": "maria@example.com"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}


def test_signup_duplicate_email(client):
    signup_and_login(client)

    response = client.post(
        "/api/auth/signup",
        json={"name": "Maria 2", "email": "MARIA@example.com", "password": "other"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


def test_login_returns_token_and_user(client):
    signup_and_login(client)

    response = client.post("/api/auth/login", json={"email": "maria@example.com", "password": "secret123"})

    data = response.json()
    assert data["success"] is True
    assert data["token"]
    assert data["user"] == {"name": "Maria", "email": "maria@example.com"}
    assert data["lifetime_access"] is False


def test_login_wrong_password(client):
    signup_and_login(client)

    response = client.post("/api/auth/login", json={"email": "maria@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/transactions").status_code == 401
    assert client.get("/api/dashboard", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_logout_invalidates_token(client, auth_headers):
    assert client.post("/api/auth/logout", headers=auth_headers).status_code == 200
    assert client.get("/api/transactions", headers=auth_headers).status_code == 401


def test_password_reset_only_emails_known_users(client):
    signup_and_login(client)
    MockEmailAdapter.clear()

    known = client.post("/api/auth/password-reset", json={"email": "Maria@example.com"})
    unknown = client.post("/api/auth/password-reset", json={"email": "nobody@example.com"})

    assert known.status_code == 200
    assert unknown.status_code == 200
    assert known.json() == unknown.json()
    assert [(m["to"], m["subject"]) for m in MockEmailAdapter.outbox] == [
        ("maria@example.com", PASSWORD_RESET_SUBJECT)
    ]


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def test_create_single_transaction(client, auth_headers):
    response = _post_tx(client, auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["count"] == 1
    assert data["duplicate"] is False
    tx = data["transactions"][0]
    assert tx["amount"] == 100.0
    assert tx["description"] == "Market"
    assert tx["owner_id"] == "maria@example.com"


def test_create_installments(client, auth_headers):
    """A 3-installment purchase on Jan 31 lands on the last day of Feb and Mar."""
    response = _post_tx(
        client, auth_headers, amount="1200", category="Housing", date="2024-01-31", description="Sofa", installments=3
    )

    data = response.json()
    assert data["count"] == 3
    assert [tx["date"] for tx in data["transactions"]] == ["2024-01-31", "2024-02-29", "2024-03-31"]
    assert [tx["description"] for tx in data["transactions"]] == ["Sofa (1/3)", "Sofa (2/3)", "Sofa (3/3)"]
    assert all(tx["amount"] == 1200.0 for tx in data["transactions"])
    assert len({tx["batch_id"] for tx in data["transactions"]}) == 1

    listed = client.get("/api/transactions", headers=auth_headers).json()
    assert [tx["date"] for tx in listed] == ["2024-03-31", "2024-02-29", "2024-01-31"]


def test_permissive_amount_parsing(client, auth_headers):
    response = _post_tx(client, auth_headers, amount="12.5abc")

    assert response.json()["transactions"][0]["amount"] == 12.5


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "transfer"},
        {"category": ""},
        {"date": "not a date"},
        {"installments": 0},
    ],
)
def test_invalid_transaction_rejected(client, auth_headers, payload):
    assert _post_tx(client, auth_headers, **payload).status_code == 422


def test_idempotency_key_prevents_double_submit(client, auth_headers):
    first = _post_tx(client, auth_headers, installments=2, idempotency_key="form-1")
    second = _post_tx(client, auth_headers, installments=2, idempotency_key="form-1")

    assert second.status_code == 200
    assert second.json()["duplicate"] is True
    assert second.json()["batch_id"] == first.json()["batch_id"]
    assert len(client.get("/api/transactions", headers=auth_headers).json()) == 2


def test_list_filters_by_period_and_search(client, auth_headers):
    _post_tx(client, auth_headers, date="2024-03-01", description="Market")
    _post_tx(client, auth_headers, date="2024-03-05", description="Bakery")
    _post_tx(client, auth_headers, date="2024-04-01", description="Market")

    march = client.get("/api/transactions", params={"month": 2, "year": 2024}, headers=auth_headers).json()
    search = client.get("/api/transactions", params={"search": "market"}, headers=auth_headers).json()

    assert len(march) == 2
    assert len(search) == 2


def test_invalid_month_rejected(client, auth_headers):
    response = client.get("/api/transactions", params={"month": 12}, headers=auth_headers)
    assert response.status_code == 422


def test_transactions_are_private(client, auth_headers):
    _post_tx(client, auth_headers)
    other = signup_and_login(client, email="joao@example.com", name="Joao")

    assert client.get("/api/transactions", headers=other).json() == []


def test_delete_one_installment_keeps_siblings(client, auth_headers):
    created = _post_tx(client, auth_headers, description="Sofa", installments=3).json()["transactions"]

    response = client.delete(f"/api/transactions/{created[1]['id']}", headers=auth_headers)

    assert response.status_code == 200
    remaining = client.get("/api/transactions", headers=auth_headers).json()
    assert sorted(tx["description"] for tx in remaining) == ["Sofa (1/3)", "Sofa (3/3)"]


def test_delete_unknown_or_foreign_transaction(client, auth_headers):
    created = _post_tx(client, auth_headers).json()["transactions"][0]
    other = signup_and_login(client, email="joao@example.com", name="Joao")

    assert client.delete("/api/transactions/missing", headers=auth_headers).status_code == 404
    response = client.delete(f"/api/transactions/{created['id']}", headers=other)
    assert response.status_code == 404
    assert response.json()["success"] is False


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def test_dashboard_for_new_user_shows_welcome(client, auth_headers):
    data = client.get("/api/dashboard", headers=auth_headers).json()

    assert [a["key"] for a in data["alerts"]] == ["welcome"]
    assert data["stats"]["percent_spent"] == 0
    assert data["goal"] is None


def test_dashboard_march_scenario(client, auth_headers):
    """Expense 100 and income 500 in March 2024."""
    _post_tx(client, auth_headers, kind="expense", amount="100", category="Food", date="2024-03-01")
    _post_tx(client, auth_headers, kind="income", amount="500", category="Salary", date="2024-03-02")

    response = client.get("/api/dashboard", params={"month": 2, "year": 2024}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {"income": 500.0, "expense": 100.0, "balance": 400.0, "percent_spent": 20}
    assert [(c["category"], c["total"]) for c in data["categories"]] == [("Food", 100.0)]
    assert len(data["time_series"]) == 31
    assert data["time_series"][-1]["cumulative_balance"] == 400.0
    assert [a["key"] for a in data["alerts"]] == ["category_concentration:Food", "positive_balance"]
    assert data["transaction_count"] == 2


def test_dismissed_alert_stays_hidden_for_session(client, auth_headers):
    _post_tx(client, auth_headers, kind="income", amount="500", category="Salary")
    params = {"month": 2, "year": 2024}

    client.post("/api/alerts/dismiss", json={"key": "positive_balance"}, headers=auth_headers)
    alerts = client.get("/api/dashboard", params=params, headers=auth_headers).json()["alerts"]
    assert "positive_balance" not in [a["key"] for a in alerts]

    # A new session starts with nothing dismissed
    login = client.post("/api/auth/login", json={"email": "maria@example.com", "password": "secret123"}).json()
    headers = {"Authorization": f"Bearer {login['token']}"}
    alerts = client.get("/api/dashboard", params=params, headers=headers).json()["alerts"]
    assert "positive_balance" in [a["key"] for a in alerts]


def test_goal_progress(client, auth_headers):
    _post_tx(client, auth_headers, kind="income", amount="500", category="Salary", date="2024-03-02")
    _post_tx(client, auth_headers, kind="expense", amount="100", category="Food", date="2024-03-01")

    response = client.put("/api/goal", params={"year": 2024}, json={"monthly_target": 300}, headers=auth_headers)

    assert response.status_code == 200
    goal = response.json()
    assert goal["realized"] == 300.0
    assert goal["target"] == 3600.0
    assert goal["percent"] == 8

    dashboard = client.get("/api/dashboard", params={"year": 2024}, headers=auth_headers).json()
    assert dashboard["goal"]["realized"] == 300.0


def test_kind_views(client, auth_headers):
    _post_tx(client, auth_headers, kind="expense", amount="100", category="Food", date="2024-03-01")
    _post_tx(client, auth_headers, kind="expense", amount="50", category="Food", date="2024-02-01")
    _post_tx(client, auth_headers, kind="income", amount="500", category="Salary", date="2024-03-02")

    expense = client.get("/api/views/expense", params={"month": 2, "year": 2024}, headers=auth_headers).json()
    income = client.get("/api/views/income", params={"month": 2, "year": 2024}, headers=auth_headers).json()

    assert expense["total"] == 100.0
    assert expense["previous_total"] == 50.0
    assert expense["variation"] == 100.0
    assert expense["burn_rate"] == 20.0
    assert income["total"] == 500.0
    assert client.get("/api/views/transfer", headers=auth_headers).status_code == 422


def test_projection_is_public(client):
    response = client.post("/api/projection", json={"monthly_saving": 500, "annual_rate_percent": 0, "months": 12})

    assert response.status_code == 200
    assert response.json()["final_total"] == 6000.0


# ---------------------------------------------------------------------------
# User data and payments
# ---------------------------------------------------------------------------

def test_user_data_round_trip(client, auth_headers):
    assert client.get("/api/user-data", headers=auth_headers).json() == {"success": True, "data": None}

    client.post("/api/user-data", json={"data": {"theme": "dark"}}, headers=auth_headers)

    assert client.get("/api/user-data", headers=auth_headers).json()["data"] == {"theme": "dark"}


def test_checkout_unavailable_without_keys(client, auth_headers, monkeypatch):
    monkeypatch.setattr(main.checkout_service, "secret_key", None)

    response = client.post("/api/create-checkout-session", headers=auth_headers)

    assert response.status_code == 503
    assert response.json()["success"] is False


def test_paywall_lifts_after_checkout(client, auth_headers, monkeypatch):
    monkeypatch.setattr(main.settings, "require_lifetime_access", True)

    assert client.get("/api/dashboard", headers=auth_headers).status_code == 402

    monkeypatch.setattr(main.checkout_service, "is_paid", AsyncMock(return_value=False))
    unpaid = client.post("/api/checkout/complete", params={"session_id": "cs_1"}, headers=auth_headers)
    assert unpaid.status_code == 402

    monkeypatch.setattr(main.checkout_service, "is_paid", AsyncMock(return_value=True))
    paid = client.post("/api/checkout/complete", params={"session_id": "cs_1"}, headers=auth_headers)
    assert paid.status_code == 200
    assert client.get("/api/dashboard", headers=auth_headers).status_code == 200

    login = client.post("/api/auth/login", json={"email": "maria@example.com", "password": "secret123"})
    assert login.json()["lifetime_access"] is True


@pytest.mark.parametrize("amount", ["1e26", "1e1000000", "-1e13"])
def test_out_of_range_amount_rejected(client, auth_headers, amount):
    response = _post_tx(client, auth_headers, amount=amount)

    assert response.status_code == 422
    assert client.get("/api/transactions", headers=auth_headers).json() == []


def test_largest_amount_keeps_dashboard_working(client, auth_headers):
    assert _post_tx(client, auth_headers, amount="1e12", date="2024-03-01").status_code == 200
    _post_tx(client, auth_headers, kind="income", amount="0.01", category="Salary", date="2024-03-02")

    response = client.get("/api/dashboard", params={"month": 2, "year": 2024}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["stats"]["percent_spent"] == 10 ** 16


def test_projection_rejects_huge_monthly_saving(client):
    response = client.post("/api/projection", json={"monthly_saving": "1e30"})

    assert response.status_code == 422
