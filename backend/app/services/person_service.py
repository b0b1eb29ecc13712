"""
services/person_service.py — Person-level operations.

A "person" is not a table: it is the set of debts and payments sharing one
exact name. Renaming therefore rewrites the `who` column in BOTH tables.

Atomicity:
  rename_person() issues two UPDATE statements on the caller's session and
  does not commit. The route commits once, so both tables change together
  or (on any error, after rollback) not at all. Readers never observe a
  person split across the old and new names.

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.orm import Session

from backend.app.coercion import coerce_text
from backend.app.errors import AppError, ErrorCode
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment
from backend.app.services import debt_service, payment_service, summary_service


def rename_person(session: Session, old_name, new_name) -> dict[str, int] | None:
    """
    Moves every debt and payment from `old_name` to `new_name`.

    No-op (returns None) unless both trimmed names are non-empty and differ.
    If `new_name` already has rows, the two groups simply merge.

    Returns:
        {"debts": <rows renamed>, "payments": <rows renamed>} when applied.
        Applying the same rename twice renames zero rows the second time.
    """
    old = coerce_text(old_name)
    new = coerce_text(new_name)
    if not old or not new or old == new:
        return None

    debts = session.execute(
        update(Debt)
        .where(Debt.person == old)
        .values(person=new)
        .execution_options(synchronize_session=False)
    )
    payments = session.execute(
        update(Payment)
        .where(Payment.person == old)
        .values(person=new)
        .execution_options(synchronize_session=False)
    )
    return {"debts": debts.rowcount, "payments": payments.rowcount}


def list_people(session: Session) -> list[str]:
    """Distinct names across debts and payments, sorted."""
    return summary_service.get_people(session)


def get_person_detail(person, session: Session) -> dict:
    """
    Everything recorded under one exact name: its balance row plus the
    underlying debts and payments (newest first).

    Raises:
        AppError(PERSON_NOT_FOUND, 404) -- the name has no debts or payments.
    """
    name = coerce_text(person)
    debts = debt_service.list_debts_for(name, session) if name else []
    payments = payment_service.list_payments_for(name, session) if name else []

    rows = summary_service.compute_person_rows(debts, payments)
    if not rows:
        raise AppError(
            ErrorCode.PERSON_NOT_FOUND,
            f"No debts or payments are recorded for '{name}'.",
            404,
        )

    return {
        "row": rows[0],
        "debts": debts,
        "payments": payments,
    }
