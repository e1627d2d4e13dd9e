from __future__ import annotations

from typing import List, Sequence

from .piece import Piece
from .square import ALL_SQUARES


def region_sizes(cells: Sequence[Piece], side: Piece) -> List[int]:
    """Return the sizes of ``side``'s connected regions, largest first.

    Pieces are connected through any of their 8 neighbours. Each region is
    flood-filled with an explicit stack, so every cell is visited once.

    Args:
        cells: 64 pieces indexed by ``Square.index``.
        side: WHITE or BLACK.

    Returns:
        List[int]: Region sizes sorted descending; empty when ``side`` has no
            pieces.
    """
    if side is Piece.EMPTY:
        raise ValueError("regions are only defined for white or black")
    visited = [False] * len(cells)
    sizes: List[int] = []
    for start in ALL_SQUARES:
        if visited[start.index] or cells[start.index] is not side:
            continue
        visited[start.index] = True
        stack = [start]
        size = 0
        while stack:
            cur = stack.pop()
            size += 1
            for nb in cur.adjacent():
                if not visited[nb.index] and cells[nb.index] is side:
                    visited[nb.index] = True
                    stack.append(nb)
        sizes.append(size)
    sizes.sort(reverse=True)
    return sizes
