from __future__ import annotations

import random
from typing import List, Mapping, Optional, Protocol

from domain.models import SYMBOL_TABLE, ReelGrid


class ReelGenerator:
    """
    Produces the symbol grid shown for each spin.

    One `random.Random` instance is created per generator and reused for
    every spin. Without an injected `rng` it is seeded once from the OS
    entropy source.
    """

    def __init__(
        self,
        symbols: Mapping[str, int] = SYMBOL_TABLE,
        rng: Optional[random.Random] = None,
        rows: int = 3,
        columns: int = 3,
    ) -> None:
        if not symbols:
            raise ValueError("At least one symbol is required.")
        self._glyphs = sorted(symbols)
        self._rng = rng if rng is not None else random.Random()
        self._rows = rows
        self._columns = columns

    def spin(self) -> ReelGrid:
        # Uniform over the glyphs; the symbol weights are not applied.
        return tuple(
            tuple(self._rng.choice(self._glyphs) for _ in range(self._columns))
            for _ in range(self._rows)
        )


def format_grid(grid: ReelGrid) -> List[str]:
    """Render a grid as one line per row, glyphs separated by spaces."""

    return [" ".join(row) for row in grid]


class PayoutEvaluator(Protocol):
    """
    Turns a grid and a bet into winnings.

    This is where a paytable (for example one driven by `SYMBOL_TABLE`)
    would plug in. None is implemented.
    """

    def evaluate(self, grid: ReelGrid, bet: float) -> float:
        ...


class NoPayout:
    """Every spin loses: winnings are always zero."""

    def evaluate(self, grid: ReelGrid, bet: float) -> float:
        return 0.0
