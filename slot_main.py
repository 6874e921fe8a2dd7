import logging
import os
import sys

from dotenv import load_dotenv

from application.services import GameSession
from domain.errors import StoreUnavailableError
from infrastructure.db.connection import DEFAULT_DB_PATH, close_database, open_database
from infrastructure.db.player_repository_sqlite import SqlitePlayerRepository
from infrastructure.db.spin_history_repository_sqlite import SqliteSpinHistoryRepository
from interfaces.cli.handlers import run_cli


load_dotenv()

DB_PATH = os.environ.get("DB_PATH", DEFAULT_DB_PATH)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    # getLevelName hands back "Level <name>" for names it does not know.
    return level if isinstance(level, int) else logging.WARNING


def main() -> int:
    logging.basicConfig(
        level=_log_level(LOG_LEVEL),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        conn = open_database(DB_PATH)
    except StoreUnavailableError as exc:
        logging.getLogger(__name__).critical("%s", exc)
        return 1

    try:
        session = GameSession(
            SqlitePlayerRepository(conn),
            SqliteSpinHistoryRepository(conn),
        )
        # Schema failures are logged by the repositories; play on regardless.
        session.bootstrap()
        return run_cli(session)
    finally:
        close_database(conn)


if __name__ == "__main__":
    sys.exit(main())
