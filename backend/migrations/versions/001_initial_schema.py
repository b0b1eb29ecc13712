"""Initial schema — debts and payments tables with their person indexes.

Revision: 001_initial_schema
Created:  2026-10-18

Append-only:
  This file must NEVER be edited after it has been applied to any database.
  If a schema change is required, create a NEW migration file.

Layout:
  debts(id, who, label, amount, created_at)
  payments(id, who, amount, paid_at, note)

There is deliberately NO foreign key between the tables: a payment belongs
to a person name, not to a debt row, and may exist for a name with no debts.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# ── Alembic revision identifiers ──────────────────────────────────────────
revision: str = "001_initial_schema"
down_revision: str | None = None      # first migration, no parent
branch_labels: tuple | None = None
depends_on: tuple | None = None


def upgrade() -> None:
    # ── debts ──────────────────────────────────────────────────────────────
    op.create_table(
        "debts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("who", sa.Text(), nullable=False),
        sa.Column("label", sa.Text(), nullable=False, server_default=""),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_debts"),
        sa.CheckConstraint("amount >= 0", name="ck_debts_amount_non_negative"),
    )
    op.create_index("ix_debts_who", "debts", ["who"])

    # ── payments ───────────────────────────────────────────────────────────
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("who", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "paid_at",
            sa.Date(),
            nullable=False,
            server_default=sa.func.current_date(),
        ),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
    )
    op.create_index("ix_payments_who", "payments", ["who"])


def downgrade() -> None:
    op.drop_index("ix_payments_who", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_debts_who", table_name="debts")
    op.drop_table("debts")
