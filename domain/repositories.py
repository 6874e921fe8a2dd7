from __future__ import annotations

from typing import List, Optional, Protocol

from .models import Player, SpinRecord
from .results import StoreResult


class PlayerRepository(Protocol):
    """
    Abstraction over player persistence.

    Implementations are responsible for:
    - Mapping between database rows and the `Player` domain model.
    - Hiding any SQL / driver details from the application layer.
    - Reporting failures through `StoreResult` instead of raising.
    """

    def ensure_schema(self) -> StoreResult[None]:
        """Create the players table if it does not exist yet."""

        ...

    def find_player(self, name: str, age: int, card: str) -> StoreResult[Optional[int]]:
        """
        Return the id of the first player matching all three identity
        fields. `value` is None when nobody matches.
        """

        ...

    def create_player(self, name: str, age: int, card: str) -> StoreResult[int]:
        """
        Insert a new player and return the id the store assigned.

        Uniqueness of the identity triple is not enforced here.
        """

        ...

    def get_player(self, player_id: int) -> StoreResult[Optional[Player]]:
        ...

    def set_balance(self, player_id: int, amount: float) -> StoreResult[None]:
        """Overwrite the stored balance. No sign or range check."""

        ...


class SpinHistoryRepository(Protocol):
    """
    Append-only log of settled spins.
    """

    def ensure_schema(self) -> StoreResult[None]:
        ...

    def append_spin_record(self, record: SpinRecord) -> StoreResult[int]:
        """Persist one spin and return its row id."""

        ...

    def get_spin_history(self, player_id: int) -> StoreResult[List[SpinRecord]]:
        """Return the player's spins in the order they were recorded."""

        ...
