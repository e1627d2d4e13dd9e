from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .board import Board
from .move import Move
from .piece import Piece


@dataclass
class Game:
    """Game wrapper around a board with helper operations.

    Responsibility: validate externally supplied moves, apply and undo them,
    and report game state.
    """

    board: Board

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.startpos())

    @classmethod
    def from_layout(cls, rows: Sequence[str], turn: Piece = Piece.BLACK) -> "Game":
        return cls(board=Board.from_layout(rows, turn))

    def layout(self) -> List[str]:
        return self.board.to_layout()

    def turn(self) -> Piece:
        return self.board.turn

    def legal_moves(self) -> List[Move]:
        if self.board.game_over():
            return []
        return self.board.legal_moves()

    def apply_move(self, move: Move) -> Move:
        """Play ``move`` and return it as recorded (capture flag included)."""
        if self.board.game_over():
            raise ValueError("game is over")
        if not self.board.is_legal_move(move):
            raise ValueError("illegal move")
        self.board.make_move(move)
        return self.board.history[-1]

    def undo_move(self) -> None:
        if self.board.moves_made() == 0:
            raise ValueError("no moves to undo")
        self.board.retract()

    def set_move_limit(self, limit: int) -> None:
        self.board.set_move_limit(limit)

    # --- State flags for protocol ---
    def winner(self) -> Optional[Piece]:
        return self.board.winner()

    def game_over(self) -> bool:
        return self.board.game_over()

    def move_history_str(self) -> List[str]:
        return [m.to_str() for m in self.board.history]
