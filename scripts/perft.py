#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from src.engine.board import Board, INITIAL_LAYOUT
from src.engine.perft import perft, perft_divide
from src.engine.piece import Piece


def main() -> None:
    parser = argparse.ArgumentParser(description="Count Lines of Action positions to a depth")
    parser.add_argument(
        "--layout",
        type=str,
        default="/".join(INITIAL_LAYOUT),
        help="Rows of w/b/- separated by '/', top row first (default: standard opening)",
    )
    parser.add_argument("--turn", choices=["white", "black"], default="black")
    parser.add_argument("--depth", type=int, default=3, help="Plies to expand (default: 3)")
    parser.add_argument(
        "--divide", action="store_true", help="Print the node count below each root move"
    )
    args = parser.parse_args()

    turn = Piece.WHITE if args.turn == "white" else Piece.BLACK
    try:
        board = Board.from_layout(args.layout.split("/"), turn)
    except ValueError as e:
        raise SystemExit(f"Invalid layout: {e}")

    start = time.perf_counter()
    if args.divide:
        counts = perft_divide(board, args.depth)
        for move_text, n in counts.items():
            print(f"{move_text}: {n}")
        nodes = sum(counts.values())
    else:
        nodes = perft(board, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt * 1000)}")


if __name__ == "__main__":
    main()
