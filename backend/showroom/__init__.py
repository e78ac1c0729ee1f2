# backend/showroom/__init__.py
from flask import Flask

from .config import Config
from .extensions import db, migrate, ledger


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Module loggers (showroom.*) propagate to the app logger
    app.logger.setLevel(str(app.config["LOG_LEVEL"]).upper())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    ledger.init_app(app, repository=app.config.get("LEDGER_REPOSITORY"))

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
