"""
routes/debts.py — Debt route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.

Endpoints (base url_prefix=/api/v1/debts):
  GET    /debts       → 200  list all debts, newest first
  POST   /debts       → 201  record a debt
  DELETE /debts/:id   → 200  delete a debt (missing id is a no-op)
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from backend.app.extensions import db
from backend.app.middleware.csrf_middleware import require_csrf
from backend.app.routes.helpers import mutation_response, request_payload
from backend.app.schemas.debt_schema import AddDebtSchema, DebtSchema
from backend.app.services import debt_service

debts_bp = Blueprint("debts", __name__)


@debts_bp.route("/", methods=["GET"])
def list_debts():
    """GET /debts — every debt, created_at DESC then id DESC."""
    debts = debt_service.list_debts(db.session)
    return jsonify({
        "data": DebtSchema(many=True).dump(debts),
        "warnings": [],
    }), 200


@debts_bp.route("/", methods=["POST"])
@require_csrf
def create_debt():
    """
    POST /debts — Record a debt.

    Only a blank person is rejected (PERSON_REQUIRED, 400). A negative or
    malformed amount is stored as 0.00.
    """
    data = AddDebtSchema().load(request_payload())
    debt = debt_service.add_debt(session=db.session, **data)
    db.session.commit()

    current_app.logger.info(
        "Recorded debt id=%s person=%r amount=%s", debt.id, debt.person, debt.amount,
    )
    return mutation_response(DebtSchema().dump(debt), status=201)


@debts_bp.route("/<int:debt_id>", methods=["DELETE"])
@require_csrf
def delete_debt(debt_id: int):
    """DELETE /debts/:id — idempotent; reports whether a row was removed."""
    deleted = debt_service.delete_debt(db.session, debt_id)
    db.session.commit()

    current_app.logger.info("Delete debt id=%s removed=%s", debt_id, deleted)
    return mutation_response({"id": debt_id, "deleted": deleted})
