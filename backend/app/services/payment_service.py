"""
services/payment_service.py — Payment mutations and listing.

Payments belong to a person name, not to a specific debt. A payment for a
name that has no debts is valid and is recorded as-is.

Notes on overpayment:
  If the payment exceeds the person's current outstanding balance, it is
  still recorded but a WarningCode.OVERPAYMENT warning is returned. The
  route wraps it in the standard envelope:
  {"data": {...}, "warnings": [{"code": "OVERPAYMENT", ...}]}.
  The excess is never tracked as credit (remaining clamps at zero).

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from backend.app.coercion import ZERO, coerce_amount, coerce_date, coerce_text
from backend.app.errors import AppError, ErrorCode, WarningCode
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment


# ── Private helpers ────────────────────────────────────────────────────────

def _outstanding_for(person: str, session: Session) -> Decimal:
    """
    max(0, sum of the person's debts - sum of the person's payments),
    evaluated before the new payment is added.
    """
    owed = session.execute(
        select(func.coalesce(func.sum(Debt.amount), 0))
        .where(Debt.person == person)
    ).scalar_one()

    paid = session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0))
        .where(Payment.person == person)
    ).scalar_one()

    # Totals may exceed MAX_AMOUNT, so they bypass coerce_amount().
    outstanding = (Decimal(str(owed)) - Decimal(str(paid))).quantize(ZERO)
    if outstanding <= ZERO:
        return ZERO
    return outstanding


# ── Public service functions ───────────────────────────────────────────────

def add_payment(
        session: Session,
        person,
        amount,
        paid_at=None,
        note="",
) -> tuple[Payment, list[dict]]:
    """
    Records a repayment by `person`.

    Args:
        person:  Payer name. Trimmed; blank raises PERSON_REQUIRED.
        amount:  Anything coerce_amount() accepts. Negative → 0.00.
        paid_at: date or 'YYYY-MM-DD'; missing or malformed → today.
        note:    Optional free text.

    Returns:
        (Payment, warnings). warnings is empty unless the payment exceeds
        the outstanding balance, e.g. [{"code": "OVERPAYMENT", "message": "..."}].
    """
    name = coerce_text(person)
    if not name:
        raise AppError(
            ErrorCode.PERSON_REQUIRED,
            "A person name is required to record a payment.",
            400,
            field="person",
        )

    value = coerce_amount(amount)

    warnings: list[dict] = []
    outstanding = _outstanding_for(name, session)
    if value > outstanding:
        warnings.append({
            "code": WarningCode.OVERPAYMENT,
            "message": (
                f"Payment of {value} exceeds the outstanding balance of "
                f"{outstanding} for {name}. Recording anyway; the excess is not "
                f"kept as credit."
            ),
        })

    payment = Payment(
        person=name,
        amount=value,
        paid_at=coerce_date(paid_at) or date.today(),
        note=coerce_text(note),
    )
    session.add(payment)
    session.flush()

    return payment, warnings


def delete_payment(session: Session, payment_id: int) -> bool:
    """
    Deletes the payment with `payment_id`.

    Returns True if a row was removed, False if it did not exist (no-op).
    """
    result = session.execute(delete(Payment).where(Payment.id == payment_id))
    return result.rowcount > 0


def list_payments(session: Session) -> list[Payment]:
    """All payments, paid_at DESC then id DESC."""
    stmt = select(Payment).order_by(Payment.paid_at.desc(), Payment.id.desc())
    return list(session.execute(stmt).scalars().all())


def list_payments_for(person: str, session: Session) -> list[Payment]:
    """One person's payments, paid_at DESC then id DESC."""
    stmt = (
        select(Payment)
        .where(Payment.person == person)
        .order_by(Payment.paid_at.desc(), Payment.id.desc())
    )
    return list(session.execute(stmt).scalars().all())
