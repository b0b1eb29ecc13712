"""
routes/payments.py — Payment route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.

Special: add_payment returns (Payment, warnings[]).
  If warnings is non-empty (OVERPAYMENT), they are included in the response
  envelope. The HTTP status is still 201 — overpayment never blocks.

Endpoints (base url_prefix=/api/v1/payments):
  GET    /payments       → 200  list all payments, latest paid_at first
  POST   /payments       → 201  record a payment
  DELETE /payments/:id   → 200  delete a payment (missing id is a no-op)
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from backend.app.extensions import db
from backend.app.middleware.csrf_middleware import require_csrf
from backend.app.routes.helpers import mutation_response, request_payload
from backend.app.schemas.payment_schema import AddPaymentSchema, PaymentSchema
from backend.app.services import payment_service

payments_bp = Blueprint("payments", __name__)


@payments_bp.route("/", methods=["GET"])
def list_payments():
    """GET /payments — every payment, paid_at DESC then id DESC."""
    payments = payment_service.list_payments(db.session)
    return jsonify({
        "data": PaymentSchema(many=True).dump(payments),
        "warnings": [],
    }), 200


@payments_bp.route("/", methods=["POST"])
@require_csrf
def create_payment():
    """
    POST /payments — Record a repayment for a person.

    paid_at defaults to today when missing or malformed.
    """
    data = AddPaymentSchema().load(request_payload())
    payment, warnings = payment_service.add_payment(session=db.session, **data)
    db.session.commit()

    current_app.logger.info(
        "Recorded payment id=%s person=%r amount=%s paid_at=%s",
        payment.id, payment.person, payment.amount, payment.paid_at,
    )
    return mutation_response(PaymentSchema().dump(payment), status=201, warnings=warnings)


@payments_bp.route("/<int:payment_id>", methods=["DELETE"])
@require_csrf
def delete_payment(payment_id: int):
    """DELETE /payments/:id — idempotent; reports whether a row was removed."""
    deleted = payment_service.delete_payment(db.session, payment_id)
    db.session.commit()

    current_app.logger.info("Delete payment id=%s removed=%s", payment_id, deleted)
    return mutation_response({"id": payment_id, "deleted": deleted})
