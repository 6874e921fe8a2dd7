class SlotMachineError(Exception):
    """Base class for errors raised by the slot machine."""


class StoreUnavailableError(SlotMachineError):
    """The database file could not be opened. Nothing can run without it."""

    def __init__(self, db_path: str, reason: str) -> None:
        super().__init__(f"Error opening database {db_path!r}: {reason}")
        self.db_path = db_path
        self.reason = reason
