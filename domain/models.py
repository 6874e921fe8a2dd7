from dataclasses import dataclass
from typing import Dict, Optional, Tuple


# Glyph -> weight. Only the keys drive sampling; the integers are reserved
# for a payout evaluator that does not exist yet.
SYMBOL_TABLE: Dict[str, int] = {"A": 5, "B": 4, "C": 3, "D": 2}

STARTING_BALANCE = 100.0

ReelGrid = Tuple[Tuple[str, ...], ...]


@dataclass
class Player:
    """
    Domain representation of a slot machine player.

    A player is looked up by the identity triple (name, age, card). The
    store assigns `id`; `balance` is reset to the starting balance on
    every login.
    """

    id: int
    name: str
    age: int
    card: str
    balance: float


@dataclass(frozen=True)
class SpinRecord:
    """One settled spin, written once to the history table and never updated."""

    player_id: int
    bet: float
    winnings: float
    balance: float
    id: Optional[int] = None
