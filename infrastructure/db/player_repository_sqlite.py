from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from domain.models import Player
from domain.repositories import PlayerRepository
from domain.results import StoreResult
from infrastructure.db.connection import STORE_ERRORS

logger = logging.getLogger(__name__)


class SqlitePlayerRepository(PlayerRepository):
    """
    SQLite-backed implementation of `PlayerRepository`.

    This repository owns the `players` table and maps rows to the `Player`
    domain model. It works on a connection opened by the caller and does
    not close it.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def ensure_schema(self) -> StoreResult[None]:
        try:
            with self._conn as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS players (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        age INTEGER,
                        card TEXT,
                        balance REAL DEFAULT 0
                    )
                    """
                )
        except STORE_ERRORS as exc:
            return self._failure("Error creating players table", exc)
        return StoreResult.ok()

    @staticmethod
    def _to_domain(row: tuple) -> Player:
        return Player(
            id=int(row[0]),
            name=row[1],
            age=int(row[2]),
            card=row[3],
            balance=float(row[4]),
        )

    @staticmethod
    def _failure(message: str, exc: Exception) -> StoreResult:
        logger.error("%s: %s", message, exc)
        return StoreResult.fail(f"{message}: {exc}")

    def find_player(self, name: str, age: int, card: str) -> StoreResult[Optional[int]]:
        try:
            cur = self._conn.execute(
                """
                SELECT id
                FROM players
                WHERE name = ? AND age = ? AND card = ?
                ORDER BY id
                LIMIT 1
                """,
                (name, age, card),
            )
            row = cur.fetchone()
        except STORE_ERRORS as exc:
            return self._failure("Error looking up player", exc)

        if not row:
            return StoreResult.ok(None)
        return StoreResult.ok(int(row[0]))

    def create_player(self, name: str, age: int, card: str) -> StoreResult[int]:
        try:
            with self._conn as conn:
                cur = conn.execute(
                    "INSERT INTO players (name, age, card) VALUES (?, ?, ?)",
                    (name, age, card),
                )
        except STORE_ERRORS as exc:
            return self._failure("Error adding player", exc)
        return StoreResult.ok(int(cur.lastrowid))

    def get_player(self, player_id: int) -> StoreResult[Optional[Player]]:
        try:
            cur = self._conn.execute(
                "SELECT id, name, age, card, balance FROM players WHERE id = ?",
                (player_id,),
            )
            row = cur.fetchone()
        except STORE_ERRORS as exc:
            return self._failure("Error reading player", exc)

        if not row:
            return StoreResult.ok(None)
        return StoreResult.ok(self._to_domain(row))

    def set_balance(self, player_id: int, amount: float) -> StoreResult[None]:
        try:
            with self._conn as conn:
                conn.execute(
                    """
                    UPDATE players
                    SET balance = ?
                    WHERE id = ?
                    """,
                    (amount, player_id),
                )
        except STORE_ERRORS as exc:
            return self._failure("Error updating balance", exc)
        return StoreResult.ok()
