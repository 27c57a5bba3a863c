# config.py
"""Runtime settings read from the environment (.env is loaded by database.py)."""

import os

DEFAULT_CORS_ORIGINS = [
    "http://localhost:8081",   # Expo dev server
    "http://localhost:19006",  # Expo web
    "http://localhost:3000",   # Alternative local dev
]


def cors_origins():
    """Explicit origins are required because credentials are allowed."""
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def jwt_secret():
    return os.getenv("JWT_SECRET")


def jwt_audience():
    return os.getenv("JWT_AUDIENCE", "authenticated")


def log_level():
    return os.getenv("LOG_LEVEL", "INFO").upper()
