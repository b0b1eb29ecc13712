"""
models/debt.py — Debt table definition.

One principal amount owed by one person. No business logic. No imports
from services or routes.

Key design points:
  - `person` maps to the `who` column. It is a free-text name and the ONLY
    link to payments: there is no Person table and no foreign key.
  - `amount` uses Numeric(12, 2) — never Float. Amounts are clamped to
    >= 0 by coercion.py before they reach this table; the CHECK constraint
    is the last guard.
  - `person` carries a non-unique index because every aggregate groups by it.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.extensions import db


class Debt(db.Model):
    __tablename__ = "debts"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_debts_amount_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    person: Mapped[str] = mapped_column(
        "who",
        Text,
        nullable=False,
        index=True,   # ix_debts_who
    )

    label: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default="",
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        server_default="0",
    )

    # Only used for ordering (newest first) and display.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Debt id={self.id} "
            f"person={self.person!r} "
            f"amount={self.amount}>"
        )
