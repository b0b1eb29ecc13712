"""
middleware/csrf_middleware.py — Anti-forgery token decorator.

The @require_csrf decorator:
  1. Reads the token from the X-CSRF-Token header, or from a `csrf` field
     in the JSON / form body
  2. Compares it (constant time) with the token stored in the signed
     Flask session when the session was started
  3. Raises the appropriate 403 error if either is missing or they differ

Strict responsibility boundary:
  - This middleware only proves the request came from a page that holds
    the session's token. It knows nothing about debts or payments.
  - It runs BEFORE the route body, so a rejected request never reaches a
    service and has no partial effect.

Error codes:
  CSRF_TOKEN_MISSING (403) — no token supplied, or no session token issued yet
  CSRF_TOKEN_INVALID (403) — supplied token does not match the session's
"""

from __future__ import annotations

import functools
import hmac
import secrets
from typing import Callable

from flask import current_app, request, session

from backend.app.errors import AppError, ErrorCode

CSRF_SESSION_KEY = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"
CSRF_FIELD = "csrf"


def issue_csrf_token() -> str:
    """
    Returns the session's token, creating it on first use.

    The token lives for the whole session, like a form token rendered into
    every page of a server-side app.
    """
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_hex(16)
        session[CSRF_SESSION_KEY] = token
    return token


def require_csrf(f: Callable) -> Callable:
    """
    Route decorator that rejects mutating requests without a valid token.

    Raises AppError for all failures — the global error handler converts
    these to the JSON error envelope. Routes never catch AppError.

    Usage:
        @debts_bp.route("/", methods=["POST"])
        @require_csrf
        def create_debt():
            ...
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        _verify_csrf_token()
        return f(*args, **kwargs)

    return decorated


def _supplied_token() -> str | None:
    token = request.headers.get(CSRF_HEADER)
    if token:
        return token

    body = request.get_json(silent=True)
    if isinstance(body, dict) and isinstance(body.get(CSRF_FIELD), str):
        return body[CSRF_FIELD]

    return request.form.get(CSRF_FIELD) or None


def _verify_csrf_token() -> None:
    """
    Performs the token comparison for the current request.

    Separated from the decorator wrapper for testability. Skipped entirely
    when CSRF_ENABLED is False (never allowed in production, see config.py).
    """
    if not current_app.config.get("CSRF_ENABLED", True):
        return

    supplied = _supplied_token()
    expected = session.get(CSRF_SESSION_KEY)

    if not supplied or not expected:
        raise AppError(
            ErrorCode.CSRF_TOKEN_MISSING,
            "This request needs the session's anti-forgery token. "
            "Fetch one from GET /api/v1/session/csrf.",
            403,
        )

    if not hmac.compare_digest(supplied.encode(), expected.encode()):
        raise AppError(
            ErrorCode.CSRF_TOKEN_INVALID,
            "The anti-forgery token does not match this session.",
            403,
        )
