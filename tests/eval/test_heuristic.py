from __future__ import annotations

from src.engine.board import Board
from src.engine.piece import Piece
from src.eval import HEURISTIC_LIMIT, HEURISTIC_SCALE, WINNING_VALUE, evaluate


# White regions [3, 1]; black regions [2, 1, 1].
UNEVEN = [
    "--bb-b--",
    "--------",
    "-------b",
    "--------",
    "--------",
    "w-------",
    "w-------",
    "w------w",
]


def _swap_colours(rows):
    table = str.maketrans("wb", "bw")
    return [r.translate(table) for r in rows]


def test_opening_is_balanced() -> None:
    assert evaluate(Board.startpos()) == 0


def test_scale_constant() -> None:
    assert HEURISTIC_SCALE == 46340


def test_fewer_regions_scaled_by_largest_region_ratio() -> None:
    b = Board.from_layout(UNEVEN, Piece.WHITE)
    assert b.region_sizes(Piece.WHITE) == [3, 1]
    assert b.region_sizes(Piece.BLACK) == [2, 1, 1]
    # diff 1, white ratio 3/4 over black ratio 2/4
    assert evaluate(b) == 69510
    assert b.heuristic_estimate() == evaluate(b)


def test_score_is_symmetric_in_colour() -> None:
    b = Board.from_layout(_swap_colours(UNEVEN), Piece.WHITE)
    assert evaluate(b) == -69510


def test_equal_region_counts_score_zero() -> None:
    rows = [
        "b-b-----",
        "--------",
        "--------",
        "--------",
        "--------",
        "--------",
        "ww------",
        "w-----w-",
    ]
    b = Board.from_layout(rows, Piece.WHITE)
    assert len(b.region_sizes(Piece.WHITE)) == len(b.region_sizes(Piece.BLACK))
    assert evaluate(b) == 0


def test_side_without_pieces_scores_as_lost() -> None:
    rows = ["--------"] * 7 + ["w-w-----"]
    assert evaluate(Board.from_layout(rows, Piece.WHITE)) == HEURISTIC_LIMIT
    black_only = ["--------"] * 7 + ["b-b-----"]
    assert evaluate(Board.from_layout(black_only, Piece.WHITE)) == -HEURISTIC_LIMIT
    assert evaluate(Board.from_layout(["--------"] * 8, Piece.WHITE)) == 0


def test_static_scores_stay_below_win_score() -> None:
    assert HEURISTIC_LIMIT < WINNING_VALUE
    b = Board.from_layout(UNEVEN, Piece.BLACK)
    assert abs(evaluate(b)) < HEURISTIC_LIMIT
