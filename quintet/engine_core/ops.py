"""
Domain operations - The only channel through which card effects change a game.

Card effects return a list of these; the reducer applies them in order.
New cards never touch the Board directly.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Union

from .board import Point


@dataclass(frozen=True)
class PlaceOp:
    """Put player's stone on point."""
    point: Point
    player: int
    type: ClassVar[str] = "place"

    def describe(self) -> str:
        return f"place P{self.player} at ({self.point.x},{self.point.y})"


@dataclass(frozen=True)
class RemoveOp:
    """Clear the stone on point."""
    point: Point
    type: ClassVar[str] = "remove"

    def describe(self) -> str:
        return f"remove at ({self.point.x},{self.point.y})"


@dataclass(frozen=True)
class SwapAllOp:
    """Flip the owner of every stone on the board."""
    type: ClassVar[str] = "swapAll"

    def describe(self) -> str:
        return "swap all stones"


@dataclass(frozen=True)
class FreezeOp:
    """Add amount pending skip-turns to target."""
    target: int
    amount: int = 1
    type: ClassVar[str] = "freeze"

    def describe(self) -> str:
        return f"freeze P{self.target} for {self.amount}"


DomainOp = Union[PlaceOp, RemoveOp, SwapAllOp, FreezeOp]
