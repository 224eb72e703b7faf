from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .coins.controller import register as register_coins
from .common.errors import ApiJSONProvider, register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS, MAX_COINS_PER_AWARD
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import ensure_demo_users, init_schema
from .extensions import db
from .groups.controller import register as register_groups
from .payments.controller import register as register_payments
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger().setLevel(level)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json = ApiJSONProvider(app)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SQLALCHEMY_DATABASE_URI"] = getattr(settings, "SQLALCHEMY_DATABASE_URI")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_COINS_PER_AWARD"] = int(getattr(settings, "MAX_COINS_PER_AWARD", MAX_COINS_PER_AWARD))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    db.init_app(app)

    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info("Starting with settings=%s", settings_module)
    if db_config and app.config["DEBUG"]:
        logger.debug(
            "Database %s@%s:%s/%s",
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if auto_init_db or auto_seed_db:
        with app.app_context():
            if auto_init_db:
                init_schema(app, db_config=db_config)
            if auto_seed_db:
                ensure_demo_users()

    container = build_container(max_coins_per_award=app.config["MAX_COINS_PER_AWARD"])
    app.extensions["container"] = container

    register_users(app, container)
    register_groups(app, container)
    register_attendance(app, container)
    register_payments(app, container)
    register_coins(app, container)
    register_dashboard(app, container)
    register_error_handlers(app)

    return app
