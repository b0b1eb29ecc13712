"""
routes/summary.py — Dashboard read-model.

Endpoints (base url_prefix=/api/v1):
  GET /summary → 200  totals, progress, per-person rows, chart feed, monthly timeline

Recomputed from storage on every request; nothing is cached.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from backend.app.routes.helpers import summary_payload

summary_bp = Blueprint("summary", __name__)


@summary_bp.route("/summary", methods=["GET"])
def get_summary():
    return jsonify({"data": summary_payload(), "warnings": []}), 200
