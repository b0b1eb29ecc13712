"""
services/debt_service.py — Debt mutations and listing.

Invariants enforced here:
  - person is trimmed and must be non-empty (PERSON_REQUIRED, 400)
  - amount is clamped to >= 0 and quantized to 2 dp (never rejected)
  - deleting an id that does not exist is a no-op, not an error

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from backend.app.coercion import coerce_amount, coerce_text, coerce_timestamp
from backend.app.errors import AppError, ErrorCode
from backend.app.models.debt import Debt


def add_debt(
        session: Session,
        person,
        amount,
        label="",
        created_at=None,
) -> Debt:
    """
    Records a new debt for `person`.

    Args:
        person:     Debtor name. Trimmed; blank raises PERSON_REQUIRED.
        amount:     Anything coerce_amount() accepts. Negative → 0.00.
        label:      Optional annotation, defaults to "".
        created_at: Optional timestamp; defaults to the current UTC time.

    Returns:
        The flushed Debt (id assigned).
    """
    name = coerce_text(person)
    if not name:
        raise AppError(
            ErrorCode.PERSON_REQUIRED,
            "A person name is required to record a debt.",
            400,
            field="person",
        )

    debt = Debt(
        person=name,
        label=coerce_text(label),
        amount=coerce_amount(amount),
        created_at=coerce_timestamp(created_at) or datetime.now(timezone.utc),
    )
    session.add(debt)
    session.flush()
    return debt


def add_debt_for_person(
        session: Session,
        person,
        amount,
        label="",
) -> Debt | None:
    """
    Quick-add variant used from an existing person's detail view.

    The person is expected to be known already, so a blank name is silently
    ignored (returns None) instead of raising.
    """
    if not coerce_text(person):
        return None
    return add_debt(session, person=person, amount=amount, label=label)


def delete_debt(session: Session, debt_id: int) -> bool:
    """
    Deletes the debt with `debt_id`.

    Returns True if a row was removed, False if no such debt existed.
    Calling it twice with the same id leaves the same end state.
    """
    result = session.execute(delete(Debt).where(Debt.id == debt_id))
    return result.rowcount > 0


def list_debts(session: Session) -> list[Debt]:
    """All debts, newest first."""
    stmt = select(Debt).order_by(Debt.created_at.desc(), Debt.id.desc())
    return list(session.execute(stmt).scalars().all())


def list_debts_for(person: str, session: Session) -> list[Debt]:
    """One person's debts, newest first. Exact, case-sensitive name match."""
    stmt = (
        select(Debt)
        .where(Debt.person == person)
        .order_by(Debt.created_at.desc(), Debt.id.desc())
    )
    return list(session.execute(stmt).scalars().all())
