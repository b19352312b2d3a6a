# lockstep/config.py

import os
from datetime import timedelta


def _normalize_database_url(uri: str) -> str:
    # Heroku/Render style URLs still say postgres://
    if uri.startswith("postgres://"):
        uri = uri.replace("postgres://", "postgresql://", 1)
    return uri


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-dev-key")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Strict"
    PERMANENT_SESSION_LIFETIME = timedelta(days=14)
    REMEMBER_COOKIE_DURATION = timedelta(days=14)

    PUBLIC_ORIGIN = os.getenv("PUBLIC_ORIGIN", "https://lockstep.example.com")
    DEV_ALLOWED_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")

    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
    ADMIN_PLAYER_NAME = os.getenv("ADMIN_PLAYER_NAME", "admin")

    SCORE_RATE_LIMIT_WINDOW_S = int(os.getenv("SCORE_RATE_LIMIT_WINDOW_S", "60"))
    SCORE_RATE_LIMIT_MAX = int(os.getenv("SCORE_RATE_LIMIT_MAX", "45"))
    SCORES_TOP_LIMIT = int(os.getenv("SCORES_TOP_LIMIT", "10"))

    @staticmethod
    def init_app(app):
        pass


class DevelopmentConfig(Config):
    DEBUG = True
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DEV_DATABASE_URL",
        "sqlite:///lockstep.db"  # relative to the Flask instance folder
    )


class ProductionConfig(Config):
    DEBUG = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 280,
    }
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///lockstep.db"))


class TestingConfig(Config):
    TESTING = True
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    ADMIN_PASSWORD = "admin-test-password"


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
