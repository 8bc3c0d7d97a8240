"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from, plus
the SQLite connection hook the app enables before creating tables.
This is separate to avoid circular imports.
"""

import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Create the SQLAlchemy instance
# This will be initialized with the Flask app in app.py
db = SQLAlchemy()


def _set_sqlite_pragma(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def enable_sqlite_foreign_keys():
    """Enforce ON DELETE rules on every new SQLite connection."""
    if not event.contains(Engine, "connect", _set_sqlite_pragma):
        event.listen(Engine, "connect", _set_sqlite_pragma)
