from __future__ import annotations

import sqlite3
from types import SimpleNamespace

import pytest
from sqlalchemy import event
from sqlalchemy.engine import Engine

from tests.fakes import build_world
from tutoring_center.core.enums import GroupStatus, Role


@event.listens_for(Engine, "connect")
def _enforce_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES unless asked; MySQL InnoDB always enforces them
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture()
def world():
    return build_world()


@pytest.fixture()
def people(world):
    """An admin, two teachers and three students; Ann and Bob sit in Tom's group."""
    admin = world.users.add("Ada Admin", Role.ADMIN)
    tom = world.users.add("Tom Teacher", Role.TEACHER)
    tina = world.users.add("Tina Teacher", Role.TEACHER)
    ann = world.users.add("Ann Student", Role.STUDENT)
    bob = world.users.add("Bob Student", Role.STUDENT)
    cid = world.users.add("Cid Student", Role.STUDENT)

    group_id = world.groups.create_group(
        name="Algebra", description=None, teacher_id=tom.user_id, schedule="Mon 10:00", status=GroupStatus.ACTIVE
    )
    for student in (ann, bob):
        world.group_service.enroll_student(group_id, student.user_id, current_user_id=tom.user_id)

    return SimpleNamespace(admin=admin, tom=tom, tina=tina, ann=ann, bob=bob, cid=cid, group_id=group_id)


@pytest.fixture()
def app():
    from tutoring_center.extensions import db
    from tutoring_center.main import create_app

    app = create_app("config.testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()
