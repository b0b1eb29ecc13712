"""
schemas/person_schema.py — Marshmallow schema for the rename endpoint.

Both names are lenient: blank or identical names make the rename a no-op
in person_service.py rather than a 400.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema

from backend.app.schemas.fields import TrimmedString


class RenamePersonSchema(Schema):
    """POST /people/rename"""

    class Meta:
        unknown = EXCLUDE

    old_name = TrimmedString(load_default="")
    new_name = TrimmedString(load_default="")
