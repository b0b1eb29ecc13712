"""
tests/integration/test_summary.py — Integration tests for GET /summary.

Behaviour verified:
  - Empty ledger: zero totals, 0 / 100 progress, empty lists
  - total_remaining sums CLAMPED per-person remainders, so one person's
    overpayment never offsets another person's debt
  - Headline paid_percent is clamped to 100; remaining_percent = 100 - paid
  - Person list is distinct and sorted (case-sensitive)
  - Monthly timeline buckets by YYYY-MM, ascending, and sums to total_paid
"""

from __future__ import annotations

from decimal import Decimal

from .conftest import add_debt, add_payment, find_row, get_summary


class TestEmptyLedger:

    def test_empty_summary(self, client):
        summary = get_summary(client)

        assert summary["totals"] == {
            "total_debt": "0.00",
            "total_paid": "0.00",
            "total_remaining": "0.00",
        }
        assert summary["progress"] == {"paid_percent": 0, "remaining_percent": 100}
        assert summary["people"] == []
        assert summary["person_rows"] == []
        assert summary["chart_remaining"] == []
        assert summary["monthly_payments"] == []
        assert summary["currency"] == "LKR"


class TestTotals:

    def test_overpayment_does_not_offset_other_debts(self, client, csrf_token):
        add_debt(client, csrf_token, person="Asha", amount="100")
        add_payment(client, csrf_token, person="Bimal", amount="50")

        summary = get_summary(client)

        assert summary["totals"] == {
            "total_debt": "100.00",
            "total_paid": "50.00",
            "total_remaining": "100.00",
        }
        assert summary["progress"] == {"paid_percent": 50, "remaining_percent": 50}

    def test_paid_percent_is_clamped_to_100(self, client, csrf_token):
        add_debt(client, csrf_token, amount="100")
        add_payment(client, csrf_token, amount="300")

        progress = get_summary(client)["progress"]
        assert progress == {"paid_percent": 100, "remaining_percent": 0}

    def test_payments_without_any_debt(self, client, csrf_token):
        add_payment(client, csrf_token, person="Bimal", amount="5000")

        summary = get_summary(client)
        assert summary["progress"] == {"paid_percent": 0, "remaining_percent": 100}
        assert find_row(summary, "Bimal")["percent_paid"] == 0

    def test_chart_lists_only_people_who_still_owe(self, client, csrf_token):
        add_debt(client, csrf_token, person="Asha", amount="900")
        add_debt(client, csrf_token, person="Chamath", amount="200")
        add_payment(client, csrf_token, person="Chamath", amount="200")

        assert get_summary(client)["chart_remaining"] == [
            {"person": "Asha", "remaining": "900.00"},
        ]


class TestPeople:

    def test_people_are_distinct_and_sorted(self, client, csrf_token):
        add_debt(client, csrf_token, person="Chamath", amount="1")
        add_debt(client, csrf_token, person="Asha", amount="1")
        add_debt(client, csrf_token, person="Asha", amount="2")
        add_payment(client, csrf_token, person="Bimal", amount="1")
        add_payment(client, csrf_token, person="asha", amount="1")

        assert get_summary(client)["people"] == ["Asha", "Bimal", "Chamath", "asha"]
        assert client.get("/api/v1/people/").get_json()["data"] == [
            "Asha", "Bimal", "Chamath", "asha",
        ]


class TestMonthlyTimeline:

    def test_same_month_payments_share_one_bucket(self, client, csrf_token):
        add_payment(client, csrf_token, amount="1000", paid_at="2024-03-05")
        add_payment(client, csrf_token, amount="2500.50", paid_at="2024-03-28")
        add_payment(client, csrf_token, person="Bimal", amount="700", paid_at="2024-04-01")
        add_payment(client, csrf_token, amount="300", paid_at="2023-12-31")

        summary = get_summary(client)

        assert summary["monthly_payments"] == [
            {"month": "2023-12", "amount": "300.00"},
            {"month": "2024-03", "amount": "3500.50"},
            {"month": "2024-04", "amount": "700.00"},
        ]
        bucket_total = sum(Decimal(m["amount"]) for m in summary["monthly_payments"])
        assert bucket_total == Decimal(summary["totals"]["total_paid"])
