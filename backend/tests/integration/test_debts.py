"""
tests/integration/test_debts.py — Integration tests for debt endpoints.

Endpoints covered:
  GET    /debts        → 200 (list, newest first)
  POST   /debts        → 201 (record a debt)
  DELETE /debts/:id    → 200 (idempotent delete)

Behaviour verified:
  - Only a blank person is rejected (PERSON_REQUIRED, 400)
  - Negative / malformed / missing amounts are stored as "0.00"
  - total_debt rises by exactly max(0, amount)
  - Form-encoded bodies are accepted; unknown fields are ignored
  - Amounts beyond Numeric(12, 2) are stored as "0.00", never rounded
  - created_at is stored in UTC, so offsets do not disturb newest-first order
  - Every mutation response carries a freshly recomputed summary
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from .conftest import add_debt, add_payment, csrf_headers, get_summary


class TestCreateDebt:

    def test_happy_path(self, client, csrf_token):
        resp = add_debt(client, csrf_token, person="  Asha ", amount="90000", label=" Loan ")
        assert resp.status_code == 201

        body = resp.get_json()
        debt = body["data"]
        assert debt["id"] > 0
        assert debt["person"] == "Asha"
        assert debt["label"] == "Loan"
        assert debt["amount"] == "90000.00"
        assert debt["created_at"]
        assert body["warnings"] == []

    def test_response_carries_recomputed_summary(self, client, csrf_token):
        resp = add_debt(client, csrf_token, amount="250.50")
        summary = resp.get_json()["summary"]

        assert summary["totals"]["total_debt"] == "250.50"
        assert summary["people"] == ["Asha"]
        assert summary["currency"] == "LKR"

    @pytest.mark.parametrize("raw_amount", ["-500", "abc", "", None])
    def test_bad_amount_is_stored_as_zero(self, client, csrf_token, raw_amount):
        resp = add_debt(client, csrf_token, amount=raw_amount)
        assert resp.status_code == 201
        assert resp.get_json()["data"]["amount"] == "0.00"

    def test_missing_amount_is_stored_as_zero(self, client, csrf_token):
        resp = client.post(
            "/api/v1/debts/", json={"person": "Asha"}, headers=csrf_headers(csrf_token),
        )
        assert resp.status_code == 201
        assert resp.get_json()["data"]["amount"] == "0.00"

    def test_amount_rounds_half_up_to_cents(self, client, csrf_token):
        resp = add_debt(client, csrf_token, amount="10.005")
        assert resp.get_json()["data"]["amount"] == "10.01"

    @pytest.mark.parametrize("amount, expected_increase", [
        ("1200.40", Decimal("1200.40")),
        ("-75", Decimal("0.00")),
        ("nonsense", Decimal("0.00")),
    ])
    def test_total_debt_rises_by_clamped_amount(self, client, csrf_token, amount, expected_increase):
        add_debt(client, csrf_token, person="Bimal", amount="300")
        before = Decimal(get_summary(client)["totals"]["total_debt"])

        add_debt(client, csrf_token, person="Asha", amount=amount)
        after = Decimal(get_summary(client)["totals"]["total_debt"])

        assert after - before == expected_increase

    def test_missing_person_is_rejected(self, client, csrf_token):
        resp = client.post(
            "/api/v1/debts/", json={"amount": "100"}, headers=csrf_headers(csrf_token),
        )
        assert resp.status_code == 400
        error = resp.get_json()["error"]
        assert error["code"] == "PERSON_REQUIRED"
        assert error["field"] == "person"

    @pytest.mark.parametrize("person", ["", "   ", None])
    def test_blank_person_is_rejected_and_nothing_is_stored(self, client, csrf_token, person):
        resp = add_debt(client, csrf_token, person=person, amount="100")
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "PERSON_REQUIRED"

        assert get_summary(client)["totals"]["total_debt"] == "0.00"

    def test_form_encoded_body_with_csrf_field(self, client, csrf_token):
        resp = client.post(
            "/api/v1/debts/",
            data={"person": "Asha", "amount": "500", "label": "Bus fare", "csrf": csrf_token},
        )
        assert resp.status_code == 201
        assert resp.get_json()["data"]["label"] == "Bus fare"

    def test_unknown_fields_are_ignored(self, client, csrf_token):
        resp = add_debt(client, csrf_token, amount="10", currency="USD", interest="5%")
        assert resp.status_code == 201
        assert "currency" not in resp.get_json()["data"]

    def test_created_at_can_be_supplied(self, client, csrf_token):
        resp = add_debt(client, csrf_token, created_at="2024-01-15T08:30:00")
        assert resp.get_json()["data"]["created_at"].startswith("2024-01-15T08:30:00")

    def test_largest_storable_amount_is_exact(self, client, csrf_token):
        resp = add_debt(client, csrf_token, amount="9999999999.99")
        assert resp.get_json()["data"]["amount"] == "9999999999.99"
        assert get_summary(client)["totals"]["total_debt"] == "9999999999.99"

    @pytest.mark.parametrize("raw_amount", ["10000000000", "1234567890123456.78"])
    def test_amount_beyond_column_precision_is_stored_as_zero(self, client, csrf_token, raw_amount):
        add_debt(client, csrf_token, person="Bimal", amount="300")

        resp = add_debt(client, csrf_token, amount=raw_amount)
        assert resp.status_code == 201
        assert resp.get_json()["data"]["amount"] == "0.00"
        assert get_summary(client)["totals"]["total_debt"] == "300.00"


class TestListDebts:

    def test_empty(self, client):
        resp = client.get("/api/v1/debts/")
        assert resp.status_code == 200
        assert resp.get_json()["data"] == []

    def test_newest_first(self, client, csrf_token):
        add_debt(client, csrf_token, label="older", created_at="2024-01-01T10:00:00")
        add_debt(client, csrf_token, label="newest", created_at="2024-03-01T10:00:00")
        add_debt(client, csrf_token, label="middle", created_at="2024-02-01T10:00:00")

        labels = [d["label"] for d in client.get("/api/v1/debts/").get_json()["data"]]
        assert labels == ["newest", "middle", "older"]

    def test_same_timestamp_orders_by_id_desc(self, client, csrf_token):
        first = add_debt(client, csrf_token, label="a", created_at="2024-01-01T10:00:00")
        second = add_debt(client, csrf_token, label="b", created_at="2024-01-01T10:00:00")

        ids = [d["id"] for d in client.get("/api/v1/debts/").get_json()["data"]]
        assert ids == [second.get_json()["data"]["id"], first.get_json()["data"]["id"]]

    def test_offset_timestamps_are_ordered_on_the_utc_clock(self, client, csrf_token):
        # 10:00+05:30 is 04:30 UTC, earlier than 06:00 UTC.
        add_debt(client, csrf_token, label="colombo", created_at="2024-03-01T10:00:00+05:30")
        add_debt(client, csrf_token, label="utc", created_at="2024-03-01T06:00:00")

        debts = client.get("/api/v1/debts/").get_json()["data"]
        assert [d["label"] for d in debts] == ["utc", "colombo"]
        assert debts[1]["created_at"].startswith("2024-03-01T04:30:00")


class TestDeleteDebt:

    def test_delete_removes_the_debt(self, client, csrf_token):
        debt_id = add_debt(client, csrf_token, amount="400").get_json()["data"]["id"]

        resp = client.delete(f"/api/v1/debts/{debt_id}", headers=csrf_headers(csrf_token))
        assert resp.status_code == 200

        body = resp.get_json()
        assert body["data"] == {"id": debt_id, "deleted": True}
        assert body["summary"]["totals"]["total_debt"] == "0.00"
        assert client.get("/api/v1/debts/").get_json()["data"] == []

    def test_delete_twice_is_a_no_op(self, client, csrf_token):
        debt_id = add_debt(client, csrf_token, amount="400").get_json()["data"]["id"]
        add_debt(client, csrf_token, person="Bimal", amount="100")

        client.delete(f"/api/v1/debts/{debt_id}", headers=csrf_headers(csrf_token))
        after_first = get_summary(client)

        resp = client.delete(f"/api/v1/debts/{debt_id}", headers=csrf_headers(csrf_token))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["deleted"] is False
        assert get_summary(client) == after_first

    def test_delete_unknown_id_is_not_an_error(self, client, csrf_token):
        resp = client.delete("/api/v1/debts/99999", headers=csrf_headers(csrf_token))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["deleted"] is False

    def test_delete_keeps_payments(self, client, csrf_token):
        debt_id = add_debt(client, csrf_token, amount="400").get_json()["data"]["id"]
        add_payment(client, csrf_token, amount="100")

        client.delete(f"/api/v1/debts/{debt_id}", headers=csrf_headers(csrf_token))

        summary = get_summary(client)
        assert summary["totals"]["total_paid"] == "100.00"
        assert summary["people"] == ["Asha"]
