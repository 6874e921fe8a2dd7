from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from application.reels import NoPayout, PayoutEvaluator, ReelGenerator
from domain.models import STARTING_BALANCE, ReelGrid, SpinRecord
from domain.repositories import PlayerRepository, SpinHistoryRepository

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDENTIFY = "identify"
    FUND = "fund"
    SPIN = "spin"
    QUIT = "quit"


@dataclass
class OperationResult:
    """Generic result type for simple operations."""

    success: bool
    error_message: Optional[str] = None
    store_errors: List[str] = field(default_factory=list)


@dataclass
class IdentifyResult:
    """Result of resolving an identity triple to a player id."""

    success: bool
    error_message: Optional[str] = None
    player_id: Optional[int] = None
    created: bool = False


@dataclass
class SpinResult:
    """
    Result of one spin.

    `store_errors` lists persistence failures that were logged while
    settling the spin. They only make the spin fail when the session was
    created with `abort_on_store_error=True`.
    """

    success: bool
    error_message: Optional[str] = None
    grid: Optional[ReelGrid] = None
    bet: float = 0.0
    winnings: float = 0.0
    balance: float = 0.0
    store_errors: List[str] = field(default_factory=list)


class GameSession:
    """
    Interactive session controller: identify, fund, spin repeatedly, quit.

    The session owns no database handle itself; repositories are injected
    so tests can substitute in-memory doubles. Store failures are logged and
    collected on the returned results. By default the session keeps going
    after them; pass `abort_on_store_error=True` to stop instead.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        history_repo: SpinHistoryRepository,
        reels: Optional[ReelGenerator] = None,
        payout: Optional[PayoutEvaluator] = None,
        starting_balance: float = STARTING_BALANCE,
        abort_on_store_error: bool = False,
    ) -> None:
        self._player_repo = player_repo
        self._history_repo = history_repo
        self._reels = reels or ReelGenerator()
        self._payout = payout or NoPayout()
        self._starting_balance = starting_balance
        self._abort_on_store_error = abort_on_store_error

        self.state = SessionState.IDENTIFY
        self.player_id: Optional[int] = None
        self.balance = 0.0

    def bootstrap(self) -> OperationResult:
        """Create both tables if needed. Failures are reported, not raised."""

        errors = []
        for repo in (self._player_repo, self._history_repo):
            result = repo.ensure_schema()
            if not result.success:
                errors.append(result.error_message or "Schema creation failed.")

        if errors:
            logger.warning("Continuing without a confirmed schema: %s", "; ".join(errors))
            return OperationResult(
                success=False,
                error_message="Could not create the database schema.",
                store_errors=errors,
            )
        return OperationResult(success=True)

    def identify(self, name: str, age: int, card: str) -> IdentifyResult:
        """
        Resolve (name, age, card) to a player id, creating the player when
        the triple has not been seen before.
        """

        if self.state is not SessionState.IDENTIFY:
            return IdentifyResult(success=False, error_message="Player already identified.")

        found = self._player_repo.find_player(name, age, card)
        if not found.success:
            return IdentifyResult(success=False, error_message=found.error_message)

        created = False
        player_id = found.value
        if player_id is None:
            inserted = self._player_repo.create_player(name, age, card)
            if not inserted.success:
                return IdentifyResult(success=False, error_message=inserted.error_message)
            player_id = inserted.value
            created = True
            logger.info("Created player %s for %r", player_id, name)

        self.player_id = player_id
        self.state = SessionState.FUND
        return IdentifyResult(success=True, player_id=player_id, created=created)

    def fund(self) -> OperationResult:
        """
        Reset the balance to the starting balance, overwriting whatever was
        stored for this player before.
        """

        if self.state is not SessionState.FUND:
            return OperationResult(success=False, error_message="Identify a player before funding.")

        self.balance = self._starting_balance

        saved = self._player_repo.set_balance(self.player_id, self.balance)
        if not saved.success:
            logger.warning("Starting balance not persisted: %s", saved.error_message)
            if self._abort_on_store_error:
                return OperationResult(
                    success=False,
                    error_message=saved.error_message,
                    store_errors=[saved.error_message or "Balance update failed."],
                )
            self.state = SessionState.SPIN
            return OperationResult(
                success=True,
                store_errors=[saved.error_message or "Balance update failed."],
            )

        self.state = SessionState.SPIN
        return OperationResult(success=True)

    def spin(self, bet: float) -> SpinResult:
        """
        Play one spin.

        The bet is not validated: zero, negative and oversized bets are
        accepted and the balance may go negative.
        """

        if self.state is not SessionState.SPIN:
            return SpinResult(
                success=False,
                error_message="Session is not ready to spin.",
                balance=self.balance,
            )

        grid = self._reels.spin()
        winnings = float(self._payout.evaluate(grid, bet))
        self.balance += winnings - bet

        store_errors = []
        saved = self._player_repo.set_balance(self.player_id, self.balance)
        if not saved.success:
            store_errors.append(saved.error_message or "Balance update failed.")

        record = SpinRecord(
            player_id=self.player_id,
            bet=bet,
            winnings=winnings,
            balance=self.balance,
        )
        appended = self._history_repo.append_spin_record(record)
        if not appended.success:
            store_errors.append(appended.error_message or "Saving spin history failed.")

        failed = bool(store_errors) and self._abort_on_store_error
        for error in store_errors:
            logger.warning("%s after store error: %s", "Aborting" if failed else "Continuing", error)

        return SpinResult(
            success=not failed,
            error_message=store_errors[0] if failed else None,
            grid=grid,
            bet=bet,
            winnings=winnings,
            balance=self.balance,
            store_errors=store_errors,
        )

    def quit(self) -> None:
        self.state = SessionState.QUIT
