"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  The migration mechanism stores applied migration
versions in the ``migrations`` table and executes new migrations in
order.

Every function accepts an optional ``db_path`` so that tests and
alternative deployments can point the store at a different file
without touching the global settings.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings


MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS lists (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            uuid TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            type TEXT NOT NULL DEFAULT 'private',
            optin TEXT NOT NULL DEFAULT 'single',
            tags TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_lists_name ON lists(name);

        CREATE TABLE IF NOT EXISTS subscribers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS subscriber_lists (
            subscriber_id INTEGER NOT NULL,
            list_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'unconfirmed',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (subscriber_id, list_id),
            FOREIGN KEY(subscriber_id) REFERENCES subscribers(id) ON DELETE CASCADE,
            FOREIGN KEY(list_id) REFERENCES lists(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_sub_lists_list ON subscriber_lists(list_id, status);
        """,
    ),
    (
        2,
        """
        -- Free-text description shown next to the list name in the admin UI.
        ALTER TABLE lists ADD COLUMN description TEXT NOT NULL DEFAULT '';
        """,
    ),
]


def get_database_path(db_path: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``db_path`` takes precedence over ``settings.database_url``.  An
    absolute path (or SQLite's ``:memory:``) is used as is; a relative
    one is resolved against the project root.
    """
    db_url = db_path or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name and
    has foreign key enforcement turned on, which SQLite leaves off by
    default.  Values are returned as stored (timestamps stay strings).
    """
    conn = sqlite3.connect(get_database_path(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(db_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new entries of
    ``MIGRATIONS``.  Append new migrations with an incremented version.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
