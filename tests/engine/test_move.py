from __future__ import annotations

import pytest

from src.engine.move import Move, parse_move
from src.engine.piece import Piece
from src.engine.square import parse_square


def test_move_text_form() -> None:
    m = Move(parse_square("c4"), parse_square("f4"))
    assert m.to_str() == "c4-f4"
    assert str(m) == "c4-f4"


def test_parse_move() -> None:
    m = parse_move("c4-f4")
    assert m == Move(parse_square("c4"), parse_square("f4"))
    assert m.capture is False
    cap = parse_move("C4xF4")
    assert cap.capture is True
    assert cap.from_sq == m.from_sq and cap.to_sq == m.to_sq


def test_parse_move_rejects_malformed_text() -> None:
    for bad in ("c4f4", "c4-f9", "c4_f4", "", "c4-f4-"):
        with pytest.raises(ValueError):
            parse_move(bad)


def test_capture_flag_is_part_of_identity() -> None:
    m = parse_move("a1-c1")
    assert m != m.capture_move()
    assert m.capture_move() == m.capture_move()
    assert len({m, m.capture_move(), parse_move("a1-c1")}) == 2


def test_piece_opposites() -> None:
    assert Piece.WHITE.opposite() is Piece.BLACK
    assert Piece.BLACK.opposite() is Piece.WHITE
    with pytest.raises(ValueError):
        Piece.EMPTY.opposite()
    assert Piece.from_abbrev("W") is Piece.WHITE
    assert Piece.from_abbrev("-") is Piece.EMPTY
    with pytest.raises(ValueError):
        Piece.from_abbrev("x")
    assert Piece.BLACK.full_name() == "black"
