from __future__ import annotations

import pytest

from src.engine.board import Board
from src.engine.move import parse_move
from src.search.service import DEFAULT_DEPTH, SearchService


def test_search_returns_legal_move_at_depth_2_opening() -> None:
    board = Board.startpos()
    res = SearchService().search(board, depth=2)
    assert res.best_move is not None
    assert res.best_move in board.legal_moves(), "best move must be legal"
    assert res.depth == 2
    assert res.nodes > 1


def test_search_returns_legal_move_for_white_reply() -> None:
    board = Board.startpos()
    board.make_move(parse_move("c1-c3"))
    res = SearchService().search(board, depth=2)
    assert res.best_move in board.legal_moves()


def test_depth_is_a_fixed_constant() -> None:
    service = SearchService()
    assert DEFAULT_DEPTH == 5
    assert service.choose_depth(Board.startpos()) == DEFAULT_DEPTH


def test_invalid_depth_rejected() -> None:
    with pytest.raises(ValueError):
        SearchService().search(Board.startpos(), depth=0)


def test_horizon_returns_static_score_without_move() -> None:
    board = Board.startpos()
    service = SearchService()
    score, move = service.find_move(board, 0, -1, -10, 10, save_move=True)
    assert move is None
    assert score == board.heuristic_estimate()


def test_interior_calls_return_score_only() -> None:
    board = Board.startpos()
    service = SearchService()
    _, move = service.find_move(board, 1, -1, -(2**31 - 1), 2**31 - 1)
    assert move is None
    assert board.moves_made() == 0
