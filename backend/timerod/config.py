import os
from datetime import timedelta
from dotenv import load_dotenv


load_dotenv()


def _flag(name, default="0"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _database_url():
    # Hosted Postgres providers hand out postgres:// URLs, SQLAlchemy wants postgresql://
    url = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI") or "sqlite:///timerod.db"
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    SECRET_KEY = os.getenv("JWT_SECRET_KEY", "fallback-jwt-secret-change-me-in-production")  # used for both Flask and JWT
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "fallback-jwt-secret-change-me-in-production")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "480")))
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_TYPE = "Bearer"

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    RATELIMIT_STORAGE_URI = os.getenv("REDIS_URL") or "memory://"
    RATELIMIT_ENABLED = True

    AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", os.path.join("logs", "audit.log"))

    # Off by default: entries are stored with lateArrival=false / lateMinutes=0
    LATE_ARRIVAL_TRACKING = _flag("LATE_ARRIVAL_TRACKING")
    REPORT_DEFAULT_DAYS = int(os.getenv("REPORT_DEFAULT_DAYS", "30"))

    EXPOSE_ERROR_DETAIL = True
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES", "1")


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    SECRET_KEY = JWT_SECRET_KEY
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    AUTO_CREATE_TABLES = False
    LATE_ARRIVAL_TRACKING = False


class ProductionConfig(Config):
    DEBUG = False
    EXPOSE_ERROR_DETAIL = _flag("EXPOSE_ERROR_DETAIL")


def get_config():
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return ProductionConfig

    if env in {"test", "testing"}:
        return TestingConfig

    return DevelopmentConfig
