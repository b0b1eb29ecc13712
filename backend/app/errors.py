"""
errors.py — AppError base class and error code registry.

Every error returned by the Debt Ledger API uses a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Malformed amounts, dates and optional text are NOT errors: they are
    coerced (see coercion.py). Only the codes below ever reach a client.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
# These are the string values sent in the API response.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    PERSON_REQUIRED            = "PERSON_REQUIRED"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    PERSON_NOT_FOUND           = "PERSON_NOT_FOUND"

    # ── Authenticity Errors (403) ──────────────────────────────────────────
    # Raised before any mutation runs; the request has no partial effect.
    CSRF_TOKEN_MISSING         = "CSRF_TOKEN_MISSING"
    CSRF_TOKEN_INVALID         = "CSRF_TOKEN_INVALID"

    # ── System Errors (500) ────────────────────────────────────────────────
    STORAGE_ERROR              = "STORAGE_ERROR"
    INTERNAL_ERROR             = "INTERNAL_ERROR"


# ── Warning Code Registry ──────────────────────────────────────────────────
#
# Warnings are returned alongside a 2xx response in the `warnings` array.
# They never block the request.
# ──────────────────────────────────────────────────────────────────────────

class WarningCode:

    # Payment exceeds the person's outstanding balance. Still recorded;
    # the excess is not tracked as credit.
    OVERPAYMENT    = "OVERPAYMENT"

    # Rename was a no-op: a blank name, or old and new names are identical.
    RENAME_SKIPPED = "RENAME_SKIPPED"

    # The mutation was committed but the summary could not be recomputed.
    SUMMARY_UNAVAILABLE = "SUMMARY_UNAVAILABLE"
