from __future__ import annotations

import math
from typing import Callable, Optional

from application.reels import format_grid
from application.services import GameSession

Reader = Callable[[str], str]
Writer = Callable[[str], None]

# SQLite INTEGER is a signed 64-bit value.
_MIN_AGE = -(2**63)
_MAX_AGE = 2**63 - 1


class _EndOfInput(Exception):
    """Raised when the terminal closes mid-session."""


def _read(read: Reader, prompt: str) -> str:
    try:
        return read(prompt).strip()
    except EOFError as exc:
        raise _EndOfInput() from exc


def _read_number(read: Reader, write: Writer, prompt: str, cast, error: str):
    while True:
        raw = _read(read, prompt)
        try:
            return cast(raw)
        except ValueError:
            write(error)


def _parse_age(raw: str) -> int:
    age = int(raw)
    if not _MIN_AGE <= age <= _MAX_AGE:
        raise ValueError(f"Age out of range: {raw}")
    return age


def _parse_bet(raw: str) -> float:
    bet = float(raw)
    if not math.isfinite(bet):
        raise ValueError(f"Bet must be finite: {raw}")
    return bet


def run_cli(
    session: GameSession,
    read: Optional[Reader] = None,
    write: Optional[Writer] = None,
) -> int:
    """
    Drive `session` through the terminal prompts and return an exit code.

    This module contains only terminal concerns: prompting, parsing the
    typed values and printing results. Game rules live in `GameSession`.
    Defaults to the process's stdin/stdout.
    """

    read = read or input
    write = write or print

    try:
        player_id = _identify(session, read, write)
        if player_id is None:
            return 1

        funded = session.fund()
        if not funded.success:
            write(funded.error_message or "Could not set the starting balance.")
            return 1

        _spin_loop(session, read, write)
    except _EndOfInput:
        write("")
    finally:
        session.quit()
    return 0


def _identify(session: GameSession, read: Reader, write: Writer) -> Optional[int]:
    name = _read(read, "Enter your name: ")
    age = _read_number(read, write, "Enter your age: ", _parse_age, "Age must be a number.")
    card = _read(read, "Enter your card: ")

    result = session.identify(name, age, card)
    if not result.success:
        write(result.error_message or "Could not identify player.")
        return None

    if result.created:
        write("New player detected. Adding to database.")
    return result.player_id


def _spin_loop(session: GameSession, read: Reader, write: Writer) -> None:
    while True:
        choice = _read(read, "Press 'p' to play, 'q' to quit: ")
        if not choice:
            continue
        if choice.startswith("q"):
            return

        bet = _read_number(read, write, "Enter your bet amount: ", _parse_bet, "Bet must be a number.")
        result = session.spin(bet)
        if result.grid is not None:
            for line in format_grid(result.grid):
                write(line)

        if not result.success:
            write(result.error_message or "Spin failed.")
            return

        write(f"New Balance: {result.balance}")
