"""Exceptions raised at the storage and orchestration boundaries."""

from typing import Optional

UNIQUE_VIOLATION = "23505"
INVALID_PARAMETER = "22023"
RAISED_EXCEPTION = "P0001"


class StorageError(Exception):
    """A failed write, carrying the SQLSTATE-style code reported by the database."""

    def __init__(self, code: Optional[str], message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"StorageError(code={self.code!r}, message={self.message!r})"


class CyclePublishedError(Exception):
    """Raised when a draft-only operation targets a published cycle."""

    def __init__(self, cycle_id: int):
        super().__init__(f"Schedule cycle {cycle_id} is published")
        self.cycle_id = cycle_id
