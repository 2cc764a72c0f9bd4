"""
Engine errors - Contract violations raised by the core.

These signal a bug in the calling layer (bad coordinates, duplicate
registration, unknown ids). Expected game situations such as an unplayable
card are NOT exceptions; see cards.types.CardResult.
"""

from __future__ import annotations


class QuintetError(Exception):
    """Base class for all engine contract violations."""

    code: str = "QuintetError"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class InvalidSizeError(QuintetError, ValueError):
    """Board size is not a positive integer."""
    code = "InvalidSize"


class OutOfBoundsError(QuintetError, ValueError):
    """Coordinate lies outside [0, size)."""
    code = "OutOfBounds"


class CellOccupiedError(QuintetError, ValueError):
    """Tried to place on a cell that already holds a stone."""
    code = "CellOccupied"


class CellEmptyError(QuintetError, ValueError):
    """Tried to remove a stone from an empty cell."""
    code = "CellEmpty"


class EmptyInputError(QuintetError, ValueError):
    """Tried to pick from an empty sequence."""
    code = "EmptyInput"


class DuplicateCardError(QuintetError, ValueError):
    """Card id registered twice."""
    code = "DuplicateId"


class UnknownCardError(QuintetError, KeyError):
    """Card id not present in the registry."""
    code = "UnknownId"

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else self.code
