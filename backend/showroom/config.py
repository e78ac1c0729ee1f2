# backend/showroom/config.py
from __future__ import annotations
import os


def parse_flag(value, default: bool) -> bool:
    """Booleans pass through; strings such as "false" or "0" are read as words."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _env_flag(name: str, default: bool) -> bool:
    return parse_flag(os.environ.get(name), default)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Only used when LEDGER_BACKEND == "sql"
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///showroom.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "memory" keeps everything in process; "sql" persists through Flask-SQLAlchemy
    LEDGER_BACKEND = os.environ.get("LEDGER_BACKEND", "memory")

    # Strict: a sale may not take a product below zero stock.
    ENFORCE_STOCK_LEVELS = _env_flag("ENFORCE_STOCK_LEVELS", True)
    # Permissive: supplier payments may exceed the due balance (balance goes negative).
    ALLOW_SUPPLIER_OVERPAYMENT = _env_flag("ALLOW_SUPPLIER_OVERPAYMENT", True)

    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "10"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Company profile defaults until the settings are edited
    COMPANY_NAME = os.environ.get("COMPANY_NAME", "Your Brand Name")
    COMPANY_ADDRESS = os.environ.get("COMPANY_ADDRESS", "123 Fashion Street, Dhaka, Bangladesh")
