from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector
from sqlalchemy import inspect
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..extensions import db
from . import tables  # noqa: F401  (registers the ORM models on db.metadata)
from .session import atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "tutoring_center")),
    )


def ensure_database_exists(db_config: dict) -> None:
    """CREATE DATABASE on the MySQL server so create_all() has somewhere to go."""
    target = _as_target(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def init_schema(app, *, db_config: dict | None = None) -> None:
    """Create missing tables (idempotent). Must run inside an app context."""
    uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    if db_config and uri.startswith("mysql"):
        ensure_database_exists(db_config)
    db.create_all()
    logger.info("Schema ready (tables=%d)", len(list_tables()))


def list_tables() -> list[str]:
    return sorted(inspect(db.engine).get_table_names())


DEMO_USERS = (
    ("Admin Demo", "admin@tutoring.local", "admin123", Role.ADMIN),
    ("Teacher Demo", "teacher@tutoring.local", "teacher123", Role.TEACHER),
    ("Student Demo", "student@tutoring.local", "student123", Role.STUDENT),
)


def ensure_demo_users() -> None:
    """Upsert one account per role, resetting their passwords."""
    with atomic() as session:
        for full_name, email, password, role in DEMO_USERS:
            row = tables.UserRow.query.filter_by(email=email).first()
            if row is None:
                row = tables.UserRow(email=email)
                session.add(row)
            row.full_name = full_name
            row.password_hash = generate_password_hash(password)
            row.role = role.value
    logger.info("Demo users ready: %s", ", ".join(u[1] for u in DEMO_USERS))
