"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run against an in-memory SQLite database (TestingConfig). Flask-
    SQLAlchemy keeps a single shared connection for "sqlite://", so every
    request in the session sees the same tables.
  - The app is created once per session using create_app("testing").
  - All tables are created once via db.create_all() at session start.
  - Between tests, all rows are deleted so tests are isolated.
  - Anti-forgery protection stays ON. Each test client first fetches its
    session token, exactly like a browser dashboard would.

Helper functions (not fixtures) are provided for common operations:
  - csrf_headers(token)          → {"X-CSRF-Token": "<token>"}
  - add_debt(client, token, ...)    → HTTP response
  - add_payment(client, token, ...) → HTTP response
  - get_summary(client)          → summary dict
  - find_row(summary, person)    → one person row or None

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test without fixture parameterization overhead.
"""

from __future__ import annotations

import pytest
from sqlalchemy import delete

from backend.app import create_app
from backend.app.extensions import db as _db
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    """
    Creates the Flask application in 'testing' mode once for the entire test session.

    Steps:
      1. Create app with TestingConfig (in-memory SQLite, CSRF on).
      2. Run db.create_all() to create both tables and their indexes.
      3. Yield the app for the test session.
      4. Drop all tables at teardown.
    """
    flask_app = create_app("testing")

    with flask_app.app_context():
        _db.create_all()

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """
    Deletes all rows after every test.

    There are no foreign keys between the two tables, so order does not matter.
    """
    yield  # run the test

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test
        _db.session.execute(delete(Payment))
        _db.session.execute(delete(Debt))
        _db.session.commit()


# ═══════════════════════════════════════════════════════════════════════════
# Client fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (and cookie jar)."""
    return app.test_client()


@pytest.fixture
def csrf_token(client) -> str:
    """The anti-forgery token bound to `client`'s session cookie."""
    resp = client.get("/api/v1/session/csrf")
    assert resp.status_code == 200, f"csrf bootstrap failed: {resp.get_json()}"
    return resp.get_json()["data"]["csrf_token"]


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def csrf_headers(token: str) -> dict:
    """Returns the anti-forgery header dict for use in test requests."""
    return {"X-CSRF-Token": token}


def add_debt(client, token: str, person: str = "Asha", amount="90000", label: str = "", **extra):
    """Records a debt and returns the HTTP response."""
    payload = {"person": person, "amount": amount, "label": label, **extra}
    return client.post("/api/v1/debts/", json=payload, headers=csrf_headers(token))


def add_payment(client, token: str, person: str = "Asha", amount="15000", paid_at=None, note: str = ""):
    """Records a payment and returns the HTTP response."""
    payload = {"person": person, "amount": amount, "note": note}
    if paid_at is not None:
        payload["paid_at"] = paid_at
    return client.post("/api/v1/payments/", json=payload, headers=csrf_headers(token))


def get_summary(client) -> dict:
    """GET /summary and return its data dict."""
    resp = client.get("/api/v1/summary")
    assert resp.status_code == 200, f"summary failed: {resp.get_json()}"
    return resp.get_json()["data"]


def find_row(summary: dict, person: str) -> dict | None:
    """The person row for `person` in a summary, or None."""
    for row in summary["person_rows"]:
        if row["person"] == person:
            return row
    return None
