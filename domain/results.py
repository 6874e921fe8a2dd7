from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class StoreResult(Generic[T]):
    """
    Outcome of a single store operation.

    Repositories never raise for recoverable database errors; they hand
    back a failed result and let the caller decide whether to carry on.
    """

    success: bool
    value: Optional[T] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error_message: str) -> "StoreResult[T]":
        return cls(success=False, error_message=error_message)
