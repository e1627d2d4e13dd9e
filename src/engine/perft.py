from __future__ import annotations

from typing import Dict

from .board import Board


def perft(board: Board, depth: int) -> int:
    """Compute perft node count for `board` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - a finished game is a leaf and counts as 1 at any depth.
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    The board is walked with make/retract and is unchanged on return.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0 or board.game_over():
        return 1

    nodes = 0
    for m in board.legal_moves():
        with board.applied(m):
            nodes += perft(board, depth - 1)
    return nodes


def perft_divide(board: Board, depth: int) -> Dict[str, int]:
    """Split ``perft(board, depth)`` by root move, keyed by move text."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    counts: Dict[str, int] = {}
    for m in board.legal_moves():
        with board.applied(m):
            counts[m.to_str()] = perft(board, depth - 1)
    return counts
