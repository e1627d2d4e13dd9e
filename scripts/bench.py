#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

# Ensure repo root (which contains `src/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from src.engine.board import Board, INITIAL_LAYOUT
from src.engine.piece import Piece
from src.search.service import SearchService


@dataclass
class BenchItem:
    id: str
    layout: Tuple[str, ...]
    turn: Piece


POSITIONS: List[BenchItem] = [
    BenchItem("opening-black", INITIAL_LAYOUT, Piece.BLACK),
    BenchItem("opening-white", INITIAL_LAYOUT, Piece.WHITE),
    BenchItem(
        "middlegame",
        (
            "--b-b---",
            "w--b---w",
            "-w-bb--w",
            "w--wb---",
            "---w---w",
            "-bbw-b--",
            "w-----bw",
            "---b----",
        ),
        Piece.WHITE,
    ),
]


def bench_position(svc: SearchService, item: BenchItem, depth: int) -> Dict[str, Any]:
    board = Board.from_layout(item.layout, item.turn)
    res = svc.search(board, depth=depth)
    nps = int(res.nodes * 1000 / max(1, res.time_ms)) if res.time_ms > 0 else 0
    return {
        "id": item.id,
        "depth": res.depth,
        "best_move": res.best_move.to_str() if res.best_move else None,
        "score": res.score,
        "time_ms": res.time_ms,
        "nodes": res.nodes,
        "nps": nps,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Run search benchmarks over built-in positions")
    parser.add_argument("--depth", type=int, default=3, help="Search depth (default: 3)")
    parser.add_argument(
        "--full-width", action="store_true", help="Disable alpha-beta cutoffs for comparison"
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument(
        "--progress", action="store_true", help="Print per-position progress to stderr"
    )
    args = parser.parse_args()

    svc = SearchService(enable_pruning=not args.full_width)

    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx, it in enumerate(POSITIONS, start=1):
        if args.progress:
            sys.stderr.write(f"[{idx}/{len(POSITIONS)}] {it.id}: running...\n")
            sys.stderr.flush()
        res = bench_position(svc, it, args.depth)
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"    time={res['time_ms']}ms nodes={res['nodes']} best={res['best_move']}\n"
            )
            sys.stderr.flush()

    dt_ms = int((time.perf_counter() - t0) * 1000)
    total_nodes = sum(r["nodes"] for r in results)
    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "config": {"depth": args.depth, "pruning": not args.full_width},
        },
        "results": results,
        "summary": {
            "positions": len(results),
            "total_time_ms": dt_ms,
            "total_nodes": total_nodes,
        },
    }
    print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
