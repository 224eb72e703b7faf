from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar

from ..extensions import db

_depth: ContextVar[int] = ContextVar("tx_depth", default=0)


@contextmanager
def atomic():
    """Unit of work around the Flask-SQLAlchemy session.

    Every repository write runs inside one of these. Nested blocks join the
    outermost one, and only the outermost commits (or rolls back on error), so a
    service can wrap a cascade of repository calls into a single transaction.
    """
    depth = _depth.get()
    token = _depth.set(depth + 1)
    try:
        yield db.session
        if depth == 0:
            db.session.commit()
    except Exception:
        if depth == 0:
            db.session.rollback()
        raise
    finally:
        _depth.reset(token)
