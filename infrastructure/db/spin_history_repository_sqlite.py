from __future__ import annotations

import logging
import sqlite3
from typing import List

from domain.models import SpinRecord
from domain.repositories import SpinHistoryRepository
from domain.results import StoreResult
from infrastructure.db.connection import STORE_ERRORS

logger = logging.getLogger(__name__)


class SqliteSpinHistoryRepository(SpinHistoryRepository):
    """
    SQLite-backed implementation of `SpinHistoryRepository`.

    Manages the `spin_history` table. Rows reference `players.id` but the
    reference is not enforced.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def ensure_schema(self) -> StoreResult[None]:
        try:
            with self._conn as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS spin_history (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        player_id INTEGER,
                        bet REAL NOT NULL,
                        winnings REAL NOT NULL,
                        balance REAL NOT NULL,
                        FOREIGN KEY (player_id) REFERENCES players (id)
                    )
                    """
                )
        except STORE_ERRORS as exc:
            return self._failure("Error creating spin_history table", exc)
        return StoreResult.ok()

    @staticmethod
    def _to_domain(row: tuple) -> SpinRecord:
        return SpinRecord(
            id=int(row[0]),
            player_id=int(row[1]),
            bet=float(row[2]),
            winnings=float(row[3]),
            balance=float(row[4]),
        )

    @staticmethod
    def _failure(message: str, exc: Exception) -> StoreResult:
        logger.error("%s: %s", message, exc)
        return StoreResult.fail(f"{message}: {exc}")

    def append_spin_record(self, record: SpinRecord) -> StoreResult[int]:
        try:
            with self._conn as conn:
                cur = conn.execute(
                    """
                    INSERT INTO spin_history (player_id, bet, winnings, balance)
                    VALUES (?, ?, ?, ?)
                    """,
                    (record.player_id, record.bet, record.winnings, record.balance),
                )
        except STORE_ERRORS as exc:
            return self._failure("Error saving spin history", exc)
        return StoreResult.ok(int(cur.lastrowid))

    def get_spin_history(self, player_id: int) -> StoreResult[List[SpinRecord]]:
        try:
            cur = self._conn.execute(
                """
                SELECT id, player_id, bet, winnings, balance
                FROM spin_history
                WHERE player_id = ?
                ORDER BY id
                """,
                (player_id,),
            )
            rows = cur.fetchall()
        except STORE_ERRORS as exc:
            return self._failure("Error reading spin history", exc)
        return StoreResult.ok([self._to_domain(row) for row in rows])
