"""
schemas/payment_schema.py — Marshmallow schemas for payment endpoints.

Request schemas inherit from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields

from backend.app.coercion import ZERO
from backend.app.extensions import ma
from backend.app.schemas.fields import (
    LenientAmount,
    LenientDate,
    PersonName,
    TrimmedString,
)


class AddPaymentSchema(Schema):
    """
    POST /payments

    Field rules:
      person  : required, non-blank after trimming (PERSON_REQUIRED)
      amount  : lenient; negative or malformed → 0.00
      paid_at : optional YYYY-MM-DD; missing or malformed → None (service uses today)
      note    : optional free text, defaults to ""

    Overpayment is allowed. The service returns an OVERPAYMENT warning but
    still records the payment.
    """

    class Meta:
        unknown = EXCLUDE

    person  = PersonName()
    amount  = LenientAmount(load_default=ZERO)
    paid_at = LenientDate(load_default=None)
    note    = TrimmedString(load_default="")


class PaymentSchema(ma.Schema):
    """Output shape of a Payment row."""

    id      = fields.Integer()
    person  = fields.String()
    amount  = fields.Decimal(as_string=True)
    paid_at = fields.Date()
    note    = fields.String()
