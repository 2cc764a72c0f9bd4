"""
Board - Square grid of stone ownership plus win-detection geometry.

Cells hold EMPTY (0) or a player number (1 or 2). The board is a plain
mutable container; the engine copies it before applying operations so
that no live GameState ever sees a board change under it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Literal, NamedTuple

from .errors import CellEmptyError, CellOccupiedError, InvalidSizeError, OutOfBoundsError

EMPTY: Literal[0] = 0
PLAYER_ONE: Literal[1] = 1
PLAYER_TWO: Literal[2] = 2

Player = Literal[1, 2]
CellValue = Literal[0, 1, 2]

WIN_LENGTH = 5

# Horizontal, vertical, diagonal (\), anti-diagonal (/)
DIRECTIONS: tuple[tuple[int, int], ...] = ((1, 0), (0, 1), (1, 1), (1, -1))


def opponent(player: int) -> Player:
    """The other player (1 <-> 2)."""
    return 3 - player  # type: ignore[return-value]


class Point(NamedTuple):
    x: int
    y: int


class LastMove(NamedTuple):
    x: int
    y: int
    player: int

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class WinLine:
    """A contiguous same-owner run of at least WIN_LENGTH stones."""
    player: int
    length: int
    line: tuple[Point, ...]


@dataclass
class Board:
    """
    Fixed-size grid. cells[y][x] is the owner of (x, y).

    Invariants:
    - every coordinate satisfies 0 <= x, y < size
    - Empty -> owned only via place(), owned -> Empty only via remove()
    - last_move tracks the most recent place() only
    """
    size: int
    cells: list[list[int]] = field(default_factory=list)
    last_move: LastMove | None = None

    @classmethod
    def create(cls, size: int) -> Board:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise InvalidSizeError(f"Invalid board size: {size!r}")
        return cls(size=size, cells=[[EMPTY] * size for _ in range(size)])

    def copy(self) -> Board:
        """Copy with an independent cell grid."""
        return Board(
            size=self.size,
            cells=[row.copy() for row in self.cells],
            last_move=self.last_move,
        )

    def is_on_board(self, point: Point | tuple[int, int]) -> bool:
        x, y = point
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, point: Point | tuple[int, int]) -> int:
        if not self.is_on_board(point):
            raise OutOfBoundsError(f"Point {tuple(point)} is off a {self.size}x{self.size} board")
        x, y = point
        return self.cells[y][x]

    def is_empty(self, point: Point | tuple[int, int]) -> bool:
        return self.get(point) == EMPTY

    def place(self, point: Point | tuple[int, int], player: int) -> None:
        """Put a stone on an empty cell and record it as the last move."""
        if self.get(point) != EMPTY:
            raise CellOccupiedError(f"Cell {tuple(point)} is occupied")
        x, y = point
        self.cells[y][x] = player
        self.last_move = LastMove(x, y, player)

    def remove(self, point: Point | tuple[int, int]) -> None:
        """Clear an occupied cell. last_move is left as is."""
        if self.get(point) == EMPTY:
            raise CellEmptyError(f"Cell {tuple(point)} is empty")
        x, y = point
        self.cells[y][x] = EMPTY

    def swap_all(self) -> None:
        """Flip the owner of every stone (1 <-> 2)."""
        for row in self.cells:
            for x, value in enumerate(row):
                if value != EMPTY:
                    row[x] = 3 - value

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def points(self) -> Iterator[Point]:
        """All coordinates, row-major."""
        for y in range(self.size):
            for x in range(self.size):
                yield Point(x, y)

    def empty_points(self) -> list[Point]:
        return [Point(x, y) for y, row in enumerate(self.cells) for x, v in enumerate(row) if v == EMPTY]

    def stones_of(self, player: int) -> list[Point]:
        return [Point(x, y) for y, row in enumerate(self.cells) for x, v in enumerate(row) if v == player]

    def count_empty(self) -> int:
        return sum(row.count(EMPTY) for row in self.cells)

    def has_stone_of(self, player: int) -> bool:
        return any(player in row for row in self.cells)

    # -------------------------------------------------------------------------
    # Win detection
    # -------------------------------------------------------------------------

    def check_win_from_last_move(self) -> WinLine | None:
        """
        Look for a winning line through last_move only.

        For each direction, extends both ways while cells match the mover
        and returns the first direction reaching WIN_LENGTH.
        """
        if self.last_move is None:
            return None
        x, y, player = self.last_move
        if self.cells[y][x] != player:
            # Stone was removed or flipped since it was placed
            return None

        for dx, dy in DIRECTIONS:
            line = [Point(x, y)]
            nx, ny = x - dx, y - dy
            while self.is_on_board((nx, ny)) and self.cells[ny][nx] == player:
                line.insert(0, Point(nx, ny))
                nx, ny = nx - dx, ny - dy
            nx, ny = x + dx, y + dy
            while self.is_on_board((nx, ny)) and self.cells[ny][nx] == player:
                line.append(Point(nx, ny))
                nx, ny = nx + dx, ny + dy
            if len(line) >= WIN_LENGTH:
                return WinLine(player=player, length=len(line), line=tuple(line))
        return None

    def scan_all_wins(self) -> list[WinLine]:
        """
        Full-board scan for every winning line of every player.

        A run is only counted from its head (the predecessor along the
        direction is off-board or not the same owner), so each line is
        reported once. Needed after effects like swapAll that can create
        wins nowhere near the last placement.
        """
        wins: list[WinLine] = []
        for y in range(self.size):
            for x in range(self.size):
                player = self.cells[y][x]
                if player == EMPTY:
                    continue
                for dx, dy in DIRECTIONS:
                    px, py = x - dx, y - dy
                    if self.is_on_board((px, py)) and self.cells[py][px] == player:
                        continue
                    line = [Point(x, y)]
                    nx, ny = x + dx, y + dy
                    while self.is_on_board((nx, ny)) and self.cells[ny][nx] == player:
                        line.append(Point(nx, ny))
                        nx, ny = nx + dx, ny + dy
                    if len(line) >= WIN_LENGTH:
                        wins.append(WinLine(player=player, length=len(line), line=tuple(line)))
        return wins

    def render(self) -> str:
        """Plain-text view (for CLI and debugging)."""
        symbols = {EMPTY: ".", PLAYER_ONE: "X", PLAYER_TWO: "O"}
        return "\n".join(" ".join(symbols.get(v, "?") for v in row) for row in self.cells)


def create_board(size: int) -> Board:
    """Create an empty size x size board."""
    return Board.create(size)
