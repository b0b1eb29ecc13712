"""
routes/helpers.py — Request/response plumbing shared by the route files.

Every mutating route follows the same request shape:
  1. read the body (JSON or form-encoded)
  2. load it through a schema
  3. call ONE service function
  4. commit
  5. respond with the result AND a freshly recomputed summary

Once step 4 has run the write is durable. A failure while recomputing the
summary in step 5 is therefore reported inline (summary null plus a
SUMMARY_UNAVAILABLE warning) instead of as a STORAGE_ERROR, which would tell
the client nothing was saved.
"""

from __future__ import annotations

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from backend.app.errors import WarningCode
from backend.app.extensions import db
from backend.app.services import summary_service


def request_payload() -> dict:
    """JSON object body if present, otherwise the submitted form fields."""
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form.to_dict()


def summary_payload() -> dict:
    """The dashboard read-model plus the configured display currency."""
    summary = summary_service.get_summary(db.session)
    summary["currency"] = current_app.config["LEDGER_CURRENCY"]
    return summary


def mutation_response(data, status: int = 200, warnings: list[dict] | None = None):
    """
    Envelope for a committed mutation. The summary is recomputed AFTER the
    commit so it always reflects the write that was just made.
    """
    warnings = list(warnings or [])

    try:
        summary = summary_payload()
    except SQLAlchemyError as error:
        db.session.rollback()
        current_app.logger.error(
            "Summary unavailable after committed %s %s: %s",
            request.method, request.path, error,
            exc_info=True,
        )
        summary = None
        warnings.append({
            "code": WarningCode.SUMMARY_UNAVAILABLE,
            "message": (
                "The change was saved, but the updated summary could not be "
                "loaded. Fetch GET /api/v1/summary to refresh."
            ),
        })

    return jsonify({
        "data": data,
        "summary": summary,
        "warnings": warnings,
    }), status
