"""
services/summary_service.py — Aggregation engine for the ledger dashboard.

This file is the SINGLE SOURCE OF TRUTH for how balances are derived.
Nothing else in the codebase recomputes remaining balances or totals.

Layer rules:
  - No Flask imports. No current_app, request, g, or HTTP knowledge.
  - Receives a SQLAlchemy Session as an argument.
  - Read-only: never adds, flushes or commits.
  - Storage errors propagate. A failed query must surface as an error, never
    as an empty dashboard.

Balance rules:
  - A person is any distinct name found in debts OR payments. There is no
    Person table, so someone with only a payment still gets a row.
  - remaining(person) = max(0, owed - paid). Overpayment is clamped to zero
    and never offsets another person's balance, so total_remaining is the
    sum of clamped per-person remainders, NOT max(0, total_debt - total_paid).
  - Percentages round half up (16.67 → 17, 12.5 → 13).
"""

from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select, union
from sqlalchemy.orm import Session

from backend.app.coercion import ZERO
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment
from backend.app.services import debt_service, payment_service

_HUNDRED = Decimal("100")


# ── Data access helpers ────────────────────────────────────────────────────

def get_debts(session: Session) -> list[Debt]:
    """All debts, newest first."""
    return debt_service.list_debts(session)


def get_payments(session: Session) -> list[Payment]:
    """All payments, most recent payment date first."""
    return payment_service.list_payments(session)


def get_people(session: Session) -> list[str]:
    """
    Distinct person names across both tables, sorted by Python string order
    (case-sensitive). The database UNION gives no ordering guarantee, so the
    sort happens here.
    """
    stmt = union(select(Debt.person), select(Payment.person))
    return sorted(session.execute(stmt).scalars().all())


# ── Pure computations ──────────────────────────────────────────────────────

def percent_of(part: Decimal, whole: Decimal) -> int:
    """round_half_up(part / whole * 100), or 0 when whole is not positive."""
    if whole <= 0:
        return 0
    ratio = (part / whole) * _HUNDRED
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_person_rows(
        debts: list[Debt],
        payments: list[Payment],
) -> list[dict]:
    """
    Per-person breakdown: {person, owed, paid, remaining, percent_paid}.

    Rows are sorted by person name. Amounts stay Decimal here; get_summary()
    converts them to strings for the response.
    """
    owed: dict[str, Decimal] = defaultdict(lambda: ZERO)
    paid: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for debt in debts:
        owed[debt.person] += debt.amount
    for payment in payments:
        paid[payment.person] += payment.amount

    rows: list[dict] = []
    for person in sorted(set(owed) | set(paid)):
        person_owed = owed[person]
        person_paid = paid[person]
        rows.append({
            "person": person,
            "owed": person_owed,
            "paid": person_paid,
            "remaining": max(ZERO, person_owed - person_paid),
            # Unclamped: an overpaid person shows more than 100.
            "percent_paid": percent_of(person_paid, person_owed),
        })
    return rows


def compute_totals(
        debts: list[Debt],
        payments: list[Payment],
        person_rows: list[dict],
) -> dict[str, Decimal]:
    """
    Ledger-wide totals.

    total_remaining is summed from the clamped per-person rows, so one
    person's overpayment never reduces another person's balance.
    """
    return {
        "total_debt": sum((d.amount for d in debts), ZERO),
        "total_paid": sum((p.amount for p in payments), ZERO),
        "total_remaining": sum((r["remaining"] for r in person_rows), ZERO),
    }


def compute_progress(total_debt: Decimal, total_paid: Decimal) -> dict[str, int]:
    """
    Headline progress bars.

    paid_percent is clamped to [0, 100]. remaining_percent is derived as
    100 - paid_percent so the two bars always add up to 100. It is NOT
    computed from total_remaining, which can disagree when someone is overpaid.
    """
    paid_percent = max(0, min(100, percent_of(total_paid, total_debt)))
    return {
        "paid_percent": paid_percent,
        "remaining_percent": 100 - paid_percent,
    }


def chart_remaining(person_rows: list[dict]) -> list[dict]:
    """Chart feed: only people who still owe something, as {person, remaining}."""
    return [
        {"person": row["person"], "remaining": row["remaining"]}
        for row in person_rows
        if row["remaining"] > 0
    ]


def monthly_timeline(payments: list[Payment]) -> list[tuple[str, Decimal]]:
    """
    Payments summed per calendar month, ascending: [("2024-03", Decimal), ...].

    The bucket key is the YYYY-MM prefix of paid_at. The sum over all buckets
    always equals total_paid.
    """
    buckets: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for payment in payments:
        buckets[payment.paid_at.isoformat()[:7]] += payment.amount
    return sorted(buckets.items())


# ── Read-model ─────────────────────────────────────────────────────────────

def get_summary(session: Session) -> dict:
    """
    Builds the full dashboard read-model from a fresh read of both tables.

    Returns plain dicts, lists, strings and ints:
      {
        "totals":           {"total_debt", "total_paid", "total_remaining"},
        "progress":         {"paid_percent", "remaining_percent"},
        "people":           [name, ...],
        "person_rows":      [{"person", "owed", "paid", "remaining", "percent_paid"}],
        "chart_remaining":  [{"person", "remaining"}],
        "monthly_payments": [{"month", "amount"}],
      }
    Monetary values are decimal strings such as "75000.00".
    """
    debts = get_debts(session)
    payments = get_payments(session)

    rows = compute_person_rows(debts, payments)
    totals = compute_totals(debts, payments, rows)

    return {
        "totals": {key: str(value) for key, value in totals.items()},
        "progress": compute_progress(totals["total_debt"], totals["total_paid"]),
        "people": [row["person"] for row in rows],
        "person_rows": [serialize_row(row) for row in rows],
        "chart_remaining": [
            {"person": item["person"], "remaining": str(item["remaining"])}
            for item in chart_remaining(rows)
        ],
        "monthly_payments": [
            {"month": month, "amount": str(amount)}
            for month, amount in monthly_timeline(payments)
        ],
    }


def serialize_row(row: dict) -> dict:
    """Person row with Decimal amounts converted to strings."""
    return {
        "person": row["person"],
        "owed": str(row["owed"]),
        "paid": str(row["paid"]),
        "remaining": str(row["remaining"]),
        "percent_paid": row["percent_paid"],
    }
