"""
schemas/fields.py — Lenient marshmallow field types.

These fields never raise for a malformed value: they hand the raw input to
coercion.py and return whatever safe default it produces. A field can still
be `required=True`, in which case marshmallow's own "missing" / "null"
checks apply before _deserialize is reached.
"""

from __future__ import annotations

from marshmallow import ValidationError, fields

from backend.app.coercion import (
    coerce_amount,
    coerce_date,
    coerce_text,
    coerce_timestamp,
)
from backend.app.errors import ErrorCode


class _LenientField(fields.Field):
    """Base for fields that accept null as "not supplied"."""

    def __init__(self, **kwargs):
        kwargs.setdefault("allow_none", True)
        super().__init__(**kwargs)


class TrimmedString(_LenientField):
    """Any scalar → stripped str. Lists, dicts and booleans → ""."""

    def _deserialize(self, value, attr, data, **kwargs):
        return coerce_text(value)


class LenientAmount(_LenientField):
    """Number or numeric string → Decimal >= 0 with 2 dp. Garbage → 0.00."""

    def _deserialize(self, value, attr, data, **kwargs):
        return coerce_amount(value)


class LenientDate(_LenientField):
    """ISO date string → date. Blank or malformed → None."""

    def _deserialize(self, value, attr, data, **kwargs):
        return coerce_date(value)


class LenientDateTime(_LenientField):
    """ISO timestamp string → datetime. Blank or malformed → None."""

    def _deserialize(self, value, attr, data, **kwargs):
        return coerce_timestamp(value)


def _require_non_blank(value: str) -> None:
    if not value:
        raise ValidationError(ErrorCode.PERSON_REQUIRED)


class PersonName(TrimmedString):
    """
    Required debtor name. Missing, null and whitespace-only values are the
    one input the ledger refuses (PERSON_REQUIRED): a row without a name
    could never be grouped, renamed or deleted by person.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("required", True)
        kwargs.setdefault("allow_none", False)
        kwargs.setdefault("validate", _require_non_blank)
        kwargs.setdefault("error_messages", {
            "required": ErrorCode.PERSON_REQUIRED,
            "null":     ErrorCode.PERSON_REQUIRED,
        })
        super().__init__(**kwargs)
