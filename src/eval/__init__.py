"""Static evaluation for Lines of Action positions.

Pure, deterministic, and side-effect free. Scores are from White's point of
view: positive favours White, negative favours Black.
"""

from __future__ import annotations

from math import isqrt
from typing import TYPE_CHECKING, Final, List

from src.engine.piece import Piece

if TYPE_CHECKING:
    from src.engine.board import Board


# Largest score magnitude; the search uses it as infinity.
MAX_SCORE: Final = 2**31 - 1
# Score of a won position (for White if positive).
WINNING_VALUE: Final = MAX_SCORE - 20
# Region-count difference is scaled by this before the ratio adjustment.
HEURISTIC_SCALE: Final = isqrt(MAX_SCORE)
# Static scores never reach this magnitude, so they stay clear of wins.
HEURISTIC_LIMIT: Final = WINNING_VALUE // 2


def _largest_ratio(sizes: List[int]) -> float:
    return sizes[0] / sum(sizes)


def _clamp(score: int) -> int:
    return max(-HEURISTIC_LIMIT, min(HEURISTIC_LIMIT, score))


def evaluate(board: "Board") -> int:
    """Return a static score for ``board`` based on its regions.

    Fewer regions is better. The region-count difference is weighted by how
    dominant the advantaged side's largest region is compared with the other
    side's (largest region size over piece count).

    A side without pieces is scored as lost; with no pieces on either side
    the score is 0.
    """
    white = board.region_sizes(Piece.WHITE)
    black = board.region_sizes(Piece.BLACK)
    if not white or not black:
        if not white and not black:
            return 0
        return HEURISTIC_LIMIT if white else -HEURISTIC_LIMIT

    diff = len(black) - len(white)
    if diff == 0:
        return 0
    white_ratio = _largest_ratio(white)
    black_ratio = _largest_ratio(black)
    if diff > 0:
        ratio = white_ratio / black_ratio
    else:
        ratio = black_ratio / white_ratio
    return _clamp(int(HEURISTIC_SCALE * diff * ratio))
