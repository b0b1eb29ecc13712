import os
from pathlib import Path

from dotenv import load_dotenv


_BACKEND_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _BACKEND_DIR.parent

# Root .env is canonical; backend/.env remains a fallback.
load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv(_BACKEND_DIR / ".env")


def _first_non_empty_env(*names: str, default: str) -> str:
    """Returns the first non-empty env var value from `names`, else `default`."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value != "":
            return value
    return default


def _parse_int_env(*names: str, default: int) -> int:
    """Parses the first non-empty env var in `names` as int, else returns `default`."""
    raw = _first_non_empty_env(*names, default=str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _parse_bool_env(name: str, default: bool) -> bool:
    """Reads "1/true/yes/on" (any case) as True and "0/false/no/off" as False."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _default_sqlite_url() -> str:
    """debt_tracker.sqlite in the project root."""
    return f"sqlite:///{_PROJECT_ROOT / 'debt_tracker.sqlite'}"


class BaseConfig:

    # Signs the Flask session cookie that carries the anti-forgery token.
    SECRET_KEY: str = _first_non_empty_env(
        "SECRET_KEY",
        default="change-me-in-production",
    )

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    JSON_SORT_KEYS: bool = False

    # Display currency reported with every summary. Amounts are never converted.
    LEDGER_CURRENCY: str = _first_non_empty_env("LEDGER_CURRENCY", default="LKR")

    # Mutating endpoints require the session's anti-forgery token.
    CSRF_ENABLED: bool = _parse_bool_env("CSRF_ENABLED", default=True)

    # Run the idempotent db.create_all() once when the app is created.
    AUTO_CREATE_SCHEMA: bool = _parse_bool_env("AUTO_CREATE_SCHEMA", default=True)

    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="INFO").upper()

    PORT: int = _parse_int_env("PORT", default=8000)


class DevelopmentConfig(BaseConfig):
    DEBUG:   bool = True
    TESTING: bool = False

    SQLALCHEMY_DATABASE_URI: str = _first_non_empty_env(
        "DATABASE_URL",
        default=_default_sqlite_url(),
    )
    SQLALCHEMY_ECHO: bool = False
    LOG_LEVEL: str = _first_non_empty_env("LOG_LEVEL", default="DEBUG").upper()


class TestingConfig(BaseConfig):

    DEBUG:   bool = True
    TESTING: bool = True

    # In-memory SQLite; Flask-SQLAlchemy pins it to a single shared connection.
    SQLALCHEMY_DATABASE_URI: str = _first_non_empty_env(
        "TEST_DATABASE_URL",
        default="sqlite://",
    )
    SQLALCHEMY_ECHO: bool = False

    # The integration conftest creates and drops tables itself.
    AUTO_CREATE_SCHEMA: bool = False
    CSRF_ENABLED: bool = True
    LEDGER_CURRENCY: str = "LKR"


class ProductionConfig(BaseConfig):

    DEBUG:   bool = False
    TESTING: bool = False
    SQLALCHEMY_ECHO: bool = False

    # Schema is managed by Alembic in production.
    AUTO_CREATE_SCHEMA: bool = _parse_bool_env("AUTO_CREATE_SCHEMA", default=False)

    # Heroku / Render return 'postgres://' which SQLAlchemy 1.4+ rejects;
    # normalise to 'postgresql://'.
    _raw_db_url: str = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI: str = (
        _raw_db_url.replace("postgres://", "postgresql://", 1)
        if _raw_db_url.startswith("postgres://")
        else _raw_db_url
    )


def validate_production_config(app) -> None:
    """
    Fail-fast guard for production configuration.

    Called by the app factory right after app.config.from_object(ProductionConfig).
    Raises ValueError if any required production value is missing or insecure.
    """
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError(
            "DATABASE_URL environment variable is required in production. "
            "Set it to a valid database connection string."
        )
    if app.config.get("SECRET_KEY") == "change-me-in-production":
        raise ValueError(
            "SECRET_KEY must be set to a strong random value in production. "
            "Do not use the default placeholder."
        )
    if not app.config.get("CSRF_ENABLED"):
        raise ValueError(
            "CSRF_ENABLED must not be turned off in production."
        )


# ── Config selector ────────────────────────────────────────────────────────

config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
}

# Convenience alias: resolves the active config class from FLASK_ENV.
ActiveConfig: type[BaseConfig] = config_by_name.get(
    os.getenv("FLASK_ENV", "development"),
    DevelopmentConfig,
)
