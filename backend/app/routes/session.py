"""
routes/session.py — Session bootstrap.

Endpoints (base url_prefix=/api/v1/session):
  GET /session/csrf → 200  {"csrf_token": "..."}

Clients call this once, keep the session cookie, and send the token back
in the X-CSRF-Token header (or a `csrf` body field) on every mutation.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from backend.app.middleware.csrf_middleware import issue_csrf_token

session_bp = Blueprint("session", __name__)


@session_bp.route("/csrf", methods=["GET"])
def get_csrf_token():
    return jsonify({"data": {"csrf_token": issue_csrf_token()}, "warnings": []}), 200
