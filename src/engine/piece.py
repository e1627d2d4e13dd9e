from __future__ import annotations

from enum import Enum


class Piece(Enum):
    """Contents of a single board cell."""

    WHITE = "w"
    BLACK = "b"
    EMPTY = "-"

    @classmethod
    def from_abbrev(cls, ch: str) -> "Piece":
        """Parse a one-letter piece abbreviation.

        Raises:
            ValueError: If ``ch`` is not one of ``w``, ``b`` or ``-``.
        """
        try:
            return cls(ch.lower())
        except ValueError:
            raise ValueError(f"invalid piece: {ch!r}") from None

    def opposite(self) -> "Piece":
        if self is Piece.WHITE:
            return Piece.BLACK
        if self is Piece.BLACK:
            return Piece.WHITE
        raise ValueError("empty square has no opposite")

    def abbrev(self) -> str:
        return self.value

    def full_name(self) -> str:
        return self.name.lower()
