# liftlog/storage.py
"""
Transaction and error-translation helpers for the query functions in
``liftlog.models``.

Query functions never commit. Reads are wrapped with ``@storage_call`` so a
driver error surfaces as ``StorageError``; writes run inside ``atomic()``
which commits once at the end or rolls everything back.
"""

import sqlite3
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import db
from .errors import ConstraintError, StorageError


def _translate(exc: SQLAlchemyError) -> StorageError:
    if isinstance(exc, IntegrityError):
        return ConstraintError()
    return StorageError()


def storage_call(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            raise _translate(e) from e

    return wrapper


@contextmanager
def atomic():
    """
    with atomic():
        inserted = save_workout(...)
        for s in sets:
            save_set(s, inserted.id)
    """
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise _translate(e) from e
    except Exception:
        db.session.rollback()
        raise


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FK constraints unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
