from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from src.eval import evaluate

from .move import Move, mv
from .piece import Piece
from .regions import region_sizes
from .square import ALL_SQUARES, BOARD_SIZE, Square


# Moves per side before the game is declared a tie.
DEFAULT_MOVE_LIMIT = 60

WP, BP, EMP = Piece.WHITE, Piece.BLACK, Piece.EMPTY

# Standard opening, top row (row 8) first.
INITIAL_LAYOUT: Tuple[str, ...] = (
    "-bbbbbb-",
    "w------w",
    "w------w",
    "w------w",
    "w------w",
    "w------w",
    "w------w",
    "-bbbbbb-",
)


class IllegalMoveError(ValueError):
    """Raised when a move is applied that is not legal in the position."""


class MoveLimitError(ValueError):
    """Raised when a move limit is set that the game has already reached."""


def _parse_layout(rows: Sequence[str]) -> List[Piece]:
    if len(rows) != BOARD_SIZE:
        raise ValueError("layout must have 8 rows")
    cells = [EMP] * (BOARD_SIZE * BOARD_SIZE)
    for row_idx, text in enumerate(reversed(rows)):
        compact = "".join(text.split())
        if len(compact) != BOARD_SIZE:
            raise ValueError(f"layout row must have 8 squares: {text!r}")
        for col_idx, ch in enumerate(compact):
            cells[row_idx * BOARD_SIZE + col_idx] = Piece.from_abbrev(ch)
    return cells


@dataclass(eq=False)
class Board:
    """Lines of Action position with reversible moves.

    Notes:
    - ``cells`` holds one Piece per square, indexed by ``Square.index``.
    - ``move_limit`` counts moves of both sides together.
    - Winner and region sizes are cached and recomputed after any mutation.
    """

    cells: List[Piece]
    turn: Piece = BP
    move_limit: int = 2 * DEFAULT_MOVE_LIMIT
    _history: List[Move] = field(default_factory=list, repr=False)
    _winner_known: bool = field(default=False, repr=False)
    _winner: Optional[Piece] = field(default=None, repr=False)
    _regions_valid: bool = field(default=False, repr=False)
    _white_regions: List[int] = field(default_factory=list, repr=False)
    _black_regions: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE * BOARD_SIZE:
            raise ValueError("board must have 64 cells")
        if self.turn is EMP:
            raise ValueError("side to move must be white or black")

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board in the standard opening with Black to move."""
        return cls.from_layout(INITIAL_LAYOUT, BP)

    @classmethod
    def from_layout(cls, rows: Sequence[str], turn: Piece = BP) -> "Board":
        """Create a board from eight rows of ``w``/``b``/``-``.

        Args:
            rows: Row strings, top row (row 8) first. Whitespace is ignored.
            turn: Side to move.

        Raises:
            ValueError: If the layout is malformed or ``turn`` is EMPTY.
        """
        return cls(cells=_parse_layout(rows), turn=turn)

    def to_layout(self) -> List[str]:
        rows: List[str] = []
        for row_idx in range(BOARD_SIZE - 1, -1, -1):
            start = row_idx * BOARD_SIZE
            rows.append("".join(p.abbrev() for p in self.cells[start : start + BOARD_SIZE]))
        return rows

    def copy(self) -> "Board":
        """Return a deep copy of placement, turn, limit and history."""
        return Board(
            cells=list(self.cells),
            turn=self.turn,
            move_limit=self.move_limit,
            _history=list(self._history),
        )

    def clear(self) -> None:
        """Reset to the standard opening."""
        self.cells = _parse_layout(INITIAL_LAYOUT)
        self.turn = BP
        self.move_limit = 2 * DEFAULT_MOVE_LIMIT
        self._history.clear()
        self._invalidate()

    # --- Cell access ---
    def get(self, square: Square) -> Piece:
        return self.cells[square.index]

    def set(self, square: Square, piece: Piece, next_turn: Optional[Piece] = None) -> None:
        """Write ``piece`` at ``square`` and optionally hand the move to ``next_turn``."""
        if next_turn is EMP:
            raise ValueError("side to move must be white or black")
        self.cells[square.index] = piece
        if next_turn is not None:
            self.turn = next_turn
        self._invalidate()

    @property
    def history(self) -> Tuple[Move, ...]:
        return tuple(self._history)

    def moves_made(self) -> int:
        return len(self._history)

    def set_move_limit(self, limit: int) -> None:
        """Allow ``limit`` moves per side before the game is tied.

        Raises:
            MoveLimitError: If ``2 * limit`` moves have already been made. The
                board is left unchanged.
        """
        if 2 * limit <= self.moves_made():
            raise MoveLimitError("move limit too small")
        self.move_limit = 2 * limit
        self._winner_known = False

    # --- Legality ---
    def count_pieces(self, square: Square, direction: int) -> int:
        """Count pieces on the whole line through ``square`` along ``direction``.

        Both colours are counted, in both senses of the line, ``square``
        included.
        """
        count = 1
        for d in (direction, (direction + 4) % 8):
            for steps in range(1, BOARD_SIZE):
                other = square.move_dest(d, steps)
                if other is None:
                    break
                if self.cells[other.index] is not EMP:
                    count += 1
        return count

    def _blocked(self, from_sq: Square, to_sq: Square) -> bool:
        # Friendly piece on the target, or an opposing piece strictly between.
        if self.get(to_sq) is self.turn:
            return True
        opp = self.turn.opposite()
        direction = from_sq.direction(to_sq)
        for steps in range(1, from_sq.distance(to_sq)):
            nxt = from_sq.move_dest(direction, steps)
            if nxt is not None and self.get(nxt) is opp:
                return True
        return False

    def is_legal(self, from_sq: Square, to_sq: Square) -> bool:
        """Return True iff ``from_sq``-``to_sq`` is legal for the side to move."""
        if self.get(from_sq) is not self.turn or not from_sq.is_valid_move(to_sq):
            return False
        if self._blocked(from_sq, to_sq):
            return False
        return self.count_pieces(from_sq, from_sq.direction(to_sq)) == from_sq.distance(to_sq)

    def is_legal_move(self, move: Move) -> bool:
        """Legality of ``move``, ignoring its capture flag."""
        return self.is_legal(move.from_sq, move.to_sq)

    def legal_moves(self) -> List[Move]:
        """Return all legal moves in square, direction, distance order."""
        moves: List[Move] = []
        for from_sq in ALL_SQUARES:
            if self.cells[from_sq.index] is not self.turn:
                continue
            for direction in range(8):
                steps = 1
                to_sq = from_sq.move_dest(direction, steps)
                while to_sq is not None:
                    if self.is_legal(from_sq, to_sq):
                        moves.append(mv(from_sq, to_sq))
                    steps += 1
                    to_sq = from_sq.move_dest(direction, steps)
        return moves

    # --- Make / retract ---
    def make_move(self, move: Move) -> None:
        """Apply ``move`` in place.

        The capture flag of ``move`` is ignored; the recorded move is the
        capturing variant when the destination holds an opposing piece.

        Raises:
            IllegalMoveError: If ``move`` is not legal in this position.
        """
        if not self.is_legal_move(move):
            raise IllegalMoveError(f"illegal move: {move}")
        opp = self.turn.opposite()
        if self.get(move.to_sq) is opp:
            move = move.capture_move()
        elif move.capture:
            move = mv(move.from_sq, move.to_sq)
        self.cells[move.to_sq.index] = self.turn
        self.cells[move.from_sq.index] = EMP
        self.turn = opp
        self._history.append(move)
        self._invalidate()

    def retract(self) -> None:
        """Undo the last move, restoring the previous position exactly.

        Raises:
            ValueError: If no move has been made.
        """
        if not self._history:
            raise ValueError("no move to retract")
        last = self._history.pop()
        mover = self.turn.opposite()
        self.cells[last.from_sq.index] = mover
        self.cells[last.to_sq.index] = self.turn if last.capture else EMP
        self.turn = mover
        self._invalidate()

    @contextmanager
    def applied(self, move: Move) -> Iterator[None]:
        """Make ``move`` for the duration of the block, retracting on exit."""
        self.make_move(move)
        try:
            yield
        finally:
            self.retract()

    def undo(self) -> None:
        """Take back the last move of each side, if the game is still going."""
        if self.moves_made() > 1 and not self.game_over():
            self.retract()
            self.retract()

    # --- Regions / terminal state ---
    def _invalidate(self) -> None:
        self._winner_known = False
        self._regions_valid = False

    def _compute_regions(self) -> None:
        if self._regions_valid:
            return
        self._white_regions = region_sizes(self.cells, WP)
        self._black_regions = region_sizes(self.cells, BP)
        self._regions_valid = True

    def region_sizes(self, side: Piece) -> List[int]:
        """Return ``side``'s region sizes, largest first."""
        self._compute_regions()
        if side is WP:
            return list(self._white_regions)
        if side is BP:
            return list(self._black_regions)
        raise ValueError("regions are only defined for white or black")

    def num_pieces(self, side: Piece) -> int:
        return sum(self.region_sizes(side))

    def pieces_contiguous(self, side: Piece) -> bool:
        return len(self.region_sizes(side)) == 1

    def winner(self) -> Optional[Piece]:
        """Return the winner, EMPTY for a tie, or None while the game goes on.

        The side that just moved (not the side to move) is checked first, so
        a move that leaves both sides joined is credited to its player.
        """
        if not self._winner_known:
            mover, other = self.turn, self.turn.opposite()
            if self.pieces_contiguous(other):
                self._winner = other
            elif self.pieces_contiguous(mover):
                self._winner = mover
            elif self.num_pieces(WP) == 0 or self.num_pieces(BP) == 0:
                if self.num_pieces(WP) == 0 and self.num_pieces(BP) == 0:
                    self._winner = EMP
                else:
                    self._winner = WP if self.num_pieces(WP) else BP
            elif self.moves_made() == self.move_limit:
                self._winner = EMP
            else:
                return None
            self._winner_known = True
        return self._winner

    def game_over(self) -> bool:
        return self.winner() is not None

    def heuristic_estimate(self) -> int:
        """Static score of the position; positive favours White."""
        return evaluate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells and self.turn is other.turn

    def __hash__(self) -> int:
        return hash((tuple(self.cells), self.turn))

    def __str__(self) -> str:
        lines = ["==="]
        for row in self.to_layout():
            lines.append("    " + " ".join(row) + " ")
        lines.append(f"Next move: {self.turn.full_name()}")
        lines.append("===")
        return "\n".join(lines)
