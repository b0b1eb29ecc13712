"""
models/payment.py — Payment table definition.

A repayment event. It is NOT tied to a Debt row — only to a person name,
which must match Debt.person exactly for the two to aggregate together.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.extensions import db


class Payment(db.Model):
    __tablename__ = "payments"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    person: Mapped[str] = mapped_column(
        "who",
        Text,
        nullable=False,
        index=True,   # ix_payments_who
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        server_default="0",
    )

    # Calendar date, not a timestamp. Month buckets use its YYYY-MM prefix.
    paid_at: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        server_default=func.current_date(),
    )

    note: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default="",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Payment id={self.id} "
            f"person={self.person!r} "
            f"amount={self.amount} "
            f"paid_at={self.paid_at}>"
        )
