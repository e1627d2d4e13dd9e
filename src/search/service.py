from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from src.engine.board import Board
from src.engine.move import Move
from src.engine.piece import Piece
from src.eval import MAX_SCORE, WINNING_VALUE


logger = logging.getLogger(__name__)

# Plies searched from the root when no depth is given.
DEFAULT_DEPTH = 5
INFTY = MAX_SCORE


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    nodes: int
    depth: int
    time_ms: int


def terminal_score(winner: Piece) -> int:
    """Score a finished game from White's point of view."""
    if winner is Piece.WHITE:
        return WINNING_VALUE
    if winner is Piece.BLACK:
        return -WINNING_VALUE
    return 0


class SearchService:
    """Fixed-depth minimax search with alpha-beta pruning.

    Notes:
    - Scores are from White's point of view; ``sense`` is +1 where White
      chooses (maximise) and -1 where Black chooses (minimise).
    - The caller's board is never touched: each search runs on a copy that
      is mutated with make/retract along the current path.
    - With ``enable_pruning=False`` the same procedure runs full width, which
      is useful to check that pruning never changes the result.
    """

    def __init__(self, *, enable_pruning: bool = True) -> None:
        self.enable_pruning = enable_pruning
        self.nodes = 0

    def choose_depth(self, board: Board) -> int:
        return DEFAULT_DEPTH

    def choose_move(self, board: Board) -> Optional[Move]:
        """Return the best move for the side to move, or None if there is none."""
        return self.search(board).best_move

    def search(self, board: Board, depth: Optional[int] = None) -> SearchResult:
        work = board.copy()
        d = self.choose_depth(work) if depth is None else depth
        if d < 1:
            raise ValueError("depth must be >= 1")
        sense = 1 if work.turn is Piece.WHITE else -1

        self.nodes = 0
        start = time.perf_counter()
        score, best = self.find_move(work, d, sense, -INFTY, INFTY, save_move=True)
        time_ms = int((time.perf_counter() - start) * 1000)

        logger.debug(
            "search complete",
            extra={
                "best_move": best.to_str() if best else None,
                "score": score,
                "nodes": self.nodes,
                "depth": d,
                "time_ms": time_ms,
            },
        )
        return SearchResult(best_move=best, score=score, nodes=self.nodes, depth=d, time_ms=time_ms)

    def find_move(
        self,
        board: Board,
        depth: int,
        sense: int,
        alpha: int,
        beta: int,
        *,
        save_move: bool = False,
    ) -> Tuple[int, Optional[Move]]:
        """Search ``board`` to ``depth`` plies and return (score, move).

        The score is the best one for ``sense`` within the (alpha, beta)
        window. A move is returned only when ``save_move`` is set and the
        position is neither finished nor at the horizon.
        """
        self.nodes += 1
        winner = board.winner()
        if winner is not None:
            return terminal_score(winner), None
        if depth == 0:
            return board.heuristic_estimate(), None

        moves = board.legal_moves()
        if not moves:
            # Side to move is stuck; fall back to the static score.
            return board.heuristic_estimate(), None

        best_score = -sense * INFTY
        best_move: Optional[Move] = None
        for move in moves:
            with board.applied(move):
                score, _ = self.find_move(board, depth - 1, -sense, alpha, beta)
            if (sense == 1 and score > best_score) or (sense == -1 and score < best_score):
                best_score = score
                if save_move:
                    best_move = move
            if sense == 1:
                alpha = max(alpha, score)
            else:
                beta = min(beta, score)
            if self.enable_pruning and alpha >= beta:
                break
        return best_score, best_move
