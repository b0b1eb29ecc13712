"""
routes/people.py — Person-level route handlers.

Endpoints (base url_prefix=/api/v1/people):
  GET  /people           → 200  distinct names, sorted
  GET  /people/:name     → 200  one person's balance row, debts and payments
  POST /people/rename    → 200  move all rows to a new name (one transaction)
  POST /people/debts     → 201  quick-add a debt for an existing person
                          → 200  when the person is blank (no-op)
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from backend.app.errors import WarningCode
from backend.app.extensions import db
from backend.app.middleware.csrf_middleware import require_csrf
from backend.app.routes.helpers import mutation_response, request_payload
from backend.app.schemas.debt_schema import DebtSchema, QuickAddDebtSchema
from backend.app.schemas.payment_schema import PaymentSchema
from backend.app.schemas.person_schema import RenamePersonSchema
from backend.app.services import debt_service, person_service, summary_service

people_bp = Blueprint("people", __name__)


@people_bp.route("/", methods=["GET"])
def list_people():
    """GET /people — every name that appears in debts or payments."""
    return jsonify({
        "data": person_service.list_people(db.session),
        "warnings": [],
    }), 200


@people_bp.route("/<path:person>", methods=["GET"])
def get_person(person: str):
    """GET /people/:name — PERSON_NOT_FOUND (404) if the name has no rows."""
    detail = person_service.get_person_detail(person, db.session)
    return jsonify({
        "data": {
            **summary_service.serialize_row(detail["row"]),
            "debts": DebtSchema(many=True).dump(detail["debts"]),
            "payments": PaymentSchema(many=True).dump(detail["payments"]),
        },
        "warnings": [],
    }), 200


@people_bp.route("/rename", methods=["POST"])
@require_csrf
def rename_person():
    """
    POST /people/rename — body: {"old_name": "...", "new_name": "..."}

    Blank or identical names are a no-op reported with a RENAME_SKIPPED
    warning, not an error.
    """
    data = RenamePersonSchema().load(request_payload())
    renamed = person_service.rename_person(db.session, data["old_name"], data["new_name"])
    db.session.commit()

    if renamed is None:
        return mutation_response(
            {"old_name": data["old_name"], "new_name": data["new_name"], "renamed": None},
            warnings=[{
                "code": WarningCode.RENAME_SKIPPED,
                "message": "Both names must be non-blank and different; nothing was renamed.",
            }],
        )

    current_app.logger.info(
        "Renamed person %r -> %r (debts=%s, payments=%s)",
        data["old_name"], data["new_name"], renamed["debts"], renamed["payments"],
    )
    return mutation_response(
        {"old_name": data["old_name"], "new_name": data["new_name"], "renamed": renamed},
    )


@people_bp.route("/debts", methods=["POST"])
@require_csrf
def quick_add_debt():
    """POST /people/debts — body: {"person": "...", "amount": ..., "label": "..."}"""
    data = QuickAddDebtSchema().load(request_payload())
    debt = debt_service.add_debt_for_person(db.session, **data)
    db.session.commit()

    if debt is None:
        return mutation_response(None)

    current_app.logger.info(
        "Quick-added debt id=%s person=%r amount=%s", debt.id, debt.person, debt.amount,
    )
    return mutation_response(DebtSchema().dump(debt), status=201)
