"""
schemas/debt_schema.py — Marshmallow schemas for debt endpoints.

Validation responsibility:
  - This file: field shapes only. Every field except `person` is lenient —
    malformed amounts and timestamps are coerced, never rejected.
  - services/debt_service.py: clamps the amount again and fills defaults,
    so the invariants hold for callers that bypass these schemas.

Request schemas inherit from marshmallow.Schema directly — never ma.Schema.
See extensions.py for the reason.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields

from backend.app.coercion import ZERO
from backend.app.extensions import ma
from backend.app.schemas.fields import (
    LenientAmount,
    LenientDateTime,
    PersonName,
    TrimmedString,
)


class AddDebtSchema(Schema):
    """
    POST /debts

    Field rules:
      person     : required, non-blank after trimming (PERSON_REQUIRED)
      label      : optional free text, defaults to ""
      amount     : lenient; negative or malformed → 0.00
      created_at : optional ISO timestamp; malformed → None (service uses now)
    """

    class Meta:
        # Forms post extra fields (csrf token, action name). Ignore them.
        unknown = EXCLUDE

    person     = PersonName()
    label      = TrimmedString(load_default="")
    amount     = LenientAmount(load_default=ZERO)
    created_at = LenientDateTime(load_default=None)


class QuickAddDebtSchema(Schema):
    """
    POST /people/debts — add a debt to a person already on the ledger.

    A blank person is NOT an error here: the service treats it as a no-op.
    """

    class Meta:
        unknown = EXCLUDE

    person = TrimmedString(load_default="")
    label  = TrimmedString(load_default="")
    amount = LenientAmount(load_default=ZERO)


class DebtSchema(ma.Schema):
    """Output shape of a Debt row. Amounts are strings, never JSON numbers."""

    id         = fields.Integer()
    person     = fields.String()
    label      = fields.String()
    amount     = fields.Decimal(as_string=True)
    created_at = fields.DateTime()
