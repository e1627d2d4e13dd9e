from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


BOARD_SIZE = 8

# Direction vectors (dcol, drow) indexed N, NE, E, SE, S, SW, W, NW.
DIR_VECTORS: Tuple[Tuple[int, int], ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)
N, NE, E, SE, S, SW, W, NW = range(8)


@dataclass(frozen=True)
class Square:
    """One of the 64 board cells.

    Notes:
    - Columns and rows are 0..7 (a1 = (0, 0), h8 = (7, 7)).
    - ``index`` is row-major (a1=0 .. h8=63), which is also the scan order
      used by move generation.
    - Use :func:`sq` rather than the constructor; it returns interned
      instances.
    """

    col: int
    row: int

    @property
    def index(self) -> int:
        return self.row * BOARD_SIZE + self.col

    def move_dest(self, direction: int, steps: int) -> Optional["Square"]:
        """Return the square ``steps`` away along ``direction``, or None off board."""
        dc, dr = DIR_VECTORS[direction]
        c = self.col + dc * steps
        r = self.row + dr * steps
        if 0 <= c < BOARD_SIZE and 0 <= r < BOARD_SIZE:
            return _SQUARES[r * BOARD_SIZE + c]
        return None

    def direction(self, to: "Square") -> int:
        """Return the direction index from this square to ``to``.

        Returns -1 when ``to`` is this square or does not lie on one of the
        eight lines through it.
        """
        dc = to.col - self.col
        dr = to.row - self.row
        if dc == 0 and dr == 0:
            return -1
        if dc != 0 and dr != 0 and abs(dc) != abs(dr):
            return -1
        unit = ((dc > 0) - (dc < 0), (dr > 0) - (dr < 0))
        return DIR_VECTORS.index(unit)

    def distance(self, to: "Square") -> int:
        return max(abs(to.col - self.col), abs(to.row - self.row))

    def is_valid_move(self, to: "Square") -> bool:
        return self.direction(to) >= 0

    def adjacent(self) -> List["Square"]:
        out: List[Square] = []
        for direction in range(8):
            nxt = self.move_dest(direction, 1)
            if nxt is not None:
                out.append(nxt)
        return out

    def __str__(self) -> str:
        return chr(ord("a") + self.col) + str(self.row + 1)


_SQUARES: List[Square] = [
    Square(idx % BOARD_SIZE, idx // BOARD_SIZE) for idx in range(BOARD_SIZE * BOARD_SIZE)
]
ALL_SQUARES: Tuple[Square, ...] = tuple(_SQUARES)


def sq(col: int, row: int) -> Square:
    """Return the interned square at ``(col, row)``.

    Raises:
        ValueError: If either coordinate is outside 0..7.
    """
    if not (0 <= col < BOARD_SIZE and 0 <= row < BOARD_SIZE):
        raise ValueError(f"invalid square coordinates: ({col}, {row})")
    return _SQUARES[row * BOARD_SIZE + col]


def parse_square(s: str) -> Square:
    """Convert algebraic notation (e.g. ``"c4"``) into a square.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return sq(ord(s[0]) - ord("a"), int(s[1]) - 1)
