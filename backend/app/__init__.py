"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time — this enables:
           - Multiple isolated test app instances
           - Clean separation between app creation and app startup
           - Alembic and `flask init-db` to work without starting the server

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Configure app.logger from LOG_LEVEL
  3. Initialise extensions (SQLAlchemy, Marshmallow) via init_app()
  4. Create the schema once (idempotent) when AUTO_CREATE_SCHEMA is set
  5. Register all route blueprints under /api/v1
  6. Register global error handlers (AppError, ValidationError,
     SQLAlchemyError, HTTPException, Exception → JSON)
  7. Register a custom JSON provider to serialise Decimal as string
"""

from __future__ import annotations

import traceback
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from backend.config import config_by_name, validate_production_config


# ── Custom JSON provider ───────────────────────────────────────────────────
# Flask's default JSON encoder does not handle Decimal.
# All monetary amounts are serialised as strings to preserve precision.

class DecimalJSONProvider(DefaultJSONProvider):
    """
    Extends Flask's default JSON provider to serialise Decimal as str.

    Example: Decimal("10.50") → "10.50" (not 10.5 or 10.500000001)
    """

    def default(self, o):
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.
                     Defaults to "development".

    Returns:
        A fully configured Flask app ready to serve requests.
    """
    app = Flask(__name__)
    app.json_provider_class = DecimalJSONProvider
    app.json = DecimalJSONProvider(app)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from backend.app.extensions import db, ma
    db.init_app(app)
    ma.init_app(app)

    # ── Model registration ─────────────────────────────────────────────────
    # Import all models so that SQLAlchemy's MetaData is populated before
    # create_all() or Alembic inspects it.
    with app.app_context():
        from backend.app.models import debt, payment  # noqa: F401

        if app.config.get("AUTO_CREATE_SCHEMA"):
            init_schema()

    # ── Blueprints ─────────────────────────────────────────────────────────
    _register_blueprints(app)

    # ── Error handlers ─────────────────────────────────────────────────────
    _register_error_handlers(app)
    _register_cors(app)
    _register_cli(app)

    return app


def init_schema() -> None:
    """
    Creates the debts and payments tables and their indexes if absent.

    Idempotent (CREATE ... IF NOT EXISTS semantics), so it is safe to run at
    every process start. Must be called inside an application context.
    """
    from backend.app.extensions import db
    db.create_all()


def _register_blueprints(app: Flask) -> None:
    """
    Registers all route blueprints under the /api/v1 prefix.

    The url_prefix is set here so individual route files only specify
    the path relative to their resource (e.g. "/" and "/<int:id>").
    """
    from backend.app.routes.debts import debts_bp
    from backend.app.routes.payments import payments_bp
    from backend.app.routes.people import people_bp
    from backend.app.routes.session import session_bp
    from backend.app.routes.summary import summary_bp

    app.register_blueprint(session_bp,  url_prefix="/api/v1/session")
    app.register_blueprint(summary_bp,  url_prefix="/api/v1")
    app.register_blueprint(debts_bp,    url_prefix="/api/v1/debts")
    app.register_blueprint(payments_bp, url_prefix="/api/v1/payments")
    app.register_blueprint(people_bp,   url_prefix="/api/v1/people")


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → structured JSON error envelope with the correct HTTP status
      ValidationError → marshmallow schema errors as PERSON_REQUIRED /
                        MISSING_FIELD / INVALID_FIELD responses (400)
      SQLAlchemyError → session rolled back, STORAGE_ERROR (500)
      HTTPException   → werkzeug 404 / 405 etc. in the same envelope
      Exception       → generic INTERNAL_ERROR (500); traceback logged

    Stack traces never leave the server; they go to app.logger.
    """
    from backend.app.errors import AppError, ErrorCode
    from backend.app.extensions import db

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        """
        Converts an AppError raised anywhere in the request lifecycle
        (middleware, service, route) into the standard error envelope.

        Routes never catch AppError — they let it propagate here. Any
        pending writes from the failed request are discarded.
        """
        db.session.rollback()
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Converts marshmallow ValidationError into the standard error envelope.

        Only the FIRST error is returned. If the message is itself a
        registered ErrorCode (e.g. PERSON_REQUIRED) it is used as the code.
        """
        messages = error.messages  # e.g. {"person": ["PERSON_REQUIRED"]}

        field = None
        raw_message = "Invalid input."
        code = ErrorCode.INVALID_FIELD

        if isinstance(messages, dict):
            for field_name, field_errors in messages.items():
                field = field_name if field_name != "_schema" else None

                if isinstance(field_errors, list):
                    raw_message = field_errors[0] if field_errors else "Invalid value."
                else:
                    raw_message = str(field_errors)
                break
        elif isinstance(messages, list):
            raw_message = messages[0] if messages else "Invalid input."

        if raw_message in vars(ErrorCode).values():
            code = raw_message
        elif str(raw_message).startswith("Missing data for required field"):
            code = ErrorCode.MISSING_FIELD

        response_body = {
            "error": {
                "code": code,
                "message": _code_to_message(code)
                if raw_message in vars(ErrorCode).values() else raw_message,
            }
        }
        if field is not None:
            response_body["error"]["field"] = field

        return jsonify(response_body), 400

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error: SQLAlchemyError):
        """
        Any database failure before the commit aborts the request's mutation.
        The session is rolled back so no partial write (e.g. half a rename) is
        committed, and the client gets an explicit error rather than a stale
        dashboard. Failures while rebuilding the summary after a commit are
        handled inline by routes/helpers.mutation_response.
        """
        db.session.rollback()
        app.logger.error(
            "Storage failure on %s %s: %s\n%s",
            request.method,
            request.path,
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.STORAGE_ERROR,
                "message": "The ledger could not be read or updated.",
            }
        }), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        """404 / 405 / 400 from werkzeug, rendered in the error envelope."""
        code = (error.name or "HTTP_ERROR").upper().replace(" ", "_")
        return jsonify({
            "error": {
                "code": code,
                "message": error.description or error.name,
            }
        }), error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """
        Catches all unhandled exceptions and returns a generic 500 response.

        The full traceback is logged to the application logger. Stack traces
        NEVER leave the server in the response body.
        """
        db.session.rollback()
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred. Please try again later.",
            }
        }), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers for browser-based local development.

    Enabled when DEBUG or TESTING is true so a dashboard served from another
    local port can call the API. Credentials are allowed because the
    anti-forgery token is bound to the session cookie.
    """

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allow_all = bool(app.config.get("DEBUG") or app.config.get("TESTING"))

        if allow_all and origin:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type, X-CSRF-Token"

        return response


def _register_cli(app: Flask) -> None:
    """`flask --app backend.wsgi init-db` creates the schema explicitly."""

    @app.cli.command("init-db")
    def init_db_command():
        init_schema()
        app.logger.info("Ledger schema is ready at %s", app.config["SQLALCHEMY_DATABASE_URI"])


def _code_to_message(code: str) -> str:
    """
    Returns a human-readable default message for a known error code.
    Used when a ValidationError message IS the error code constant itself
    (e.g. PERSON_REQUIRED raised by the PersonName field).
    """
    _messages = {
        "PERSON_REQUIRED": "A non-blank person name is required.",
        "MISSING_FIELD": "A required field is missing.",
        "INVALID_FIELD": "A field has an invalid value.",
    }
    return _messages.get(code, "Invalid input.")
