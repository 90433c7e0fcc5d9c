"""Shared fixtures."""
import pytest
from fastapi.testclient import TestClient

from procvisual import main
from procvisual.adapters.mock import MockEmailAdapter
from procvisual.services.auth import PasswordHasher
from procvisual.storage.database import init_db
from tests.factories import make_tx


@pytest.fixture
def sample_transactions():
    """A few months of income and expenses in 2024."""
    return [
        make_tx("income", 3000, "Salary", "2024-01-05", "January salary"),
        make_tx("expense", 1200, "Housing", "2024-01-10", "Rent"),
        make_tx("expense", 300, "Food", "2024-01-12", "Groceries"),
        make_tx("income", 3000, "Salary", "2024-02-05", "February salary"),
        make_tx("expense", 1200, "Housing", "2024-02-10", "Rent"),
        make_tx("expense", 450.50, "Leisure", "2024-02-20", "Concert tickets"),
        make_tx("expense", 100, "Food", "2024-03-01", "Market"),
        make_tx("income", 500, "Salary", "2024-03-02", "Bonus"),
        make_tx("expense", 80, "Transport", "2023-12-28", "Bus pass"),
    ]


@pytest.fixture
def client(tmp_path):
    """Test client against a fresh database and empty session registry."""
    init_db(str(tmp_path / "test.db"))
    main.sessions.clear()
    main.auth_service.hasher = PasswordHasher(rounds=4)
    MockEmailAdapter.clear()
    return TestClient(main.app)


def signup_and_login(client, email="maria@example.com", password="secret123", name="Maria"):
    """Register a user and return bearer headers for it."""
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "contact": "+55 11 99999-0000", "email": email, "password": password},
    )
    assert response.status_code == 200
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return signup_and_login(client)
