from __future__ import annotations

from dataclasses import dataclass, replace

from .square import Square, parse_square


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        capture (bool): True once the move is known to replace an opposing
            piece. Set by ``Board.make_move``; generated moves never carry it.
    """

    from_sq: Square
    to_sq: Square
    capture: bool = False

    def capture_move(self) -> "Move":
        """Return the capturing variant of this move."""
        return replace(self, capture=True)

    def to_str(self) -> str:
        """Serialize the move into its text form.

        Returns:
            str: Move encoded like ``"c4-f4"``.
        """
        return f"{self.from_sq}-{self.to_sq}"

    def __str__(self) -> str:
        return self.to_str()


def mv(from_sq: Square, to_sq: Square) -> Move:
    return Move(from_sq, to_sq)


def parse_move(text: str) -> Move:
    """Parse a move string.

    Args:
        text (str): Move such as ``"c4-f4"``. ``"c4xf4"`` is accepted and
            yields a capturing move.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string is malformed or names invalid squares.
    """
    s = text.strip().lower()
    if len(s) != 5 or s[2] not in "-x":
        raise ValueError(f"invalid move: {text!r}")
    move = Move(parse_square(s[0:2]), parse_square(s[3:5]))
    if s[2] == "x":
        move = move.capture_move()
    return move
