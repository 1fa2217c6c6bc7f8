import os
from datetime import timedelta


def _env_flag(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name, default):
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def normalize_database_url(raw_url: str) -> str:
    """SQLAlchemy dropped the ``postgres://`` alias that hosted Postgres still hands out."""
    if raw_url.startswith("postgres://"):
        return "postgresql://" + raw_url[len("postgres://"):]
    return raw_url


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "farmshare-dev-key")

    # Relative sqlite paths are anchored at the project root by create_app.
    SQLALCHEMY_DATABASE_URI = normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///instance/farmshare.db"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": _env_int("DB_POOL_RECYCLE", 300)}

    # Only farmer records are memoized; they are never edited.
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = _env_int("FARMER_CACHE_SECONDS", 600)

    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per day;80 per hour")
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "20 per minute")

    # Booking and catalog payloads are a handful of fields.
    MAX_CONTENT_LENGTH = _env_int("MAX_REQUEST_KB", 64) * 1024

    # Flask-Login keeps the farmer id in the session cookie.
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", False)
    REMEMBER_COOKIE_HTTPONLY = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=_env_int("FARMER_SESSION_DAYS", 7))

    SEED_SAMPLE_EQUIPMENT = _env_flag("SEED_SAMPLE_EQUIPMENT", True)
    SENTRY_DSN = os.getenv("SENTRY_DSN")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    # A live catalog is curated by hand; sample rows only when asked for.
    SEED_SAMPLE_EQUIPMENT = _env_flag("SEED_SAMPLE_EQUIPMENT", False)


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CACHE_TYPE = "SimpleCache"
    RATELIMIT_ENABLED = False
    SEED_SAMPLE_EQUIPMENT = False
    SENTRY_DSN = None


config_by_env = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
