from __future__ import annotations

import logging
import sqlite3

from domain.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "slot_machine.db"

# Raised by the driver for failed statements and for ints too large for
# an SQLite INTEGER.
STORE_ERRORS = (sqlite3.Error, OverflowError)


def open_database(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """
    Open the session's single SQLite connection.

    Both repositories share the returned connection for the whole session.
    Raises `StoreUnavailableError` if the file cannot be opened.
    """

    try:
        conn = sqlite3.connect(db_path)
        # sqlite3 opens lazily; touch the file so a bad path fails here.
        conn.execute("SELECT 1")
    except sqlite3.Error as exc:
        raise StoreUnavailableError(db_path, str(exc)) from exc

    logger.debug("Opened database %s", db_path)
    return conn


def close_database(conn: sqlite3.Connection) -> None:
    try:
        conn.close()
    except sqlite3.Error as exc:
        logger.error("Error closing database: %s", exc)
