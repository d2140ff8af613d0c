#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
from dataclasses import dataclass
from typing import Any, Dict, List

# Ensure repo root (which contains `negachess/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from negachess.engine.game import Game
from negachess.eval import PERSPECTIVES
from negachess.search.service import SearchService


@dataclass
class BenchItem:
    id: str
    fen: str


DEFAULT_POSITIONS = [
    BenchItem("startpos", "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"),
    BenchItem("open-e4e5", "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w"),
    BenchItem("italian", "r1bqk1nr/pppp1ppp/2n5/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w"),
    BenchItem("rook-ending", "8/5k2/8/3r4/8/2R5/5K2/8 b"),
]


def bench_position(svc: SearchService, item: BenchItem, depth: int) -> Dict[str, Any]:
    try:
        game = Game.from_fen(item.fen)
    except ValueError as e:
        raise ValueError(f"Invalid FEN for {item.id}: {e}")
    res = svc.find_best_move(game.board, depth)
    nps = int(res.nodes * 1000 / max(1, res.time_ms))
    return {
        "id": item.id,
        "depth": res.depth,
        "best_move": res.best_move.to_uci() if res.has_move else None,
        "score": res.score,
        "nodes": res.nodes,
        "time_ms": res.time_ms,
        "nps": nps,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Fixed-depth search benchmark")
    parser.add_argument("--depth", type=int, default=3, help="Search depth (default: 3)")
    parser.add_argument("--perspective", choices=PERSPECTIVES, default="mover")
    parser.add_argument("--json", action="store_true", help="Emit a JSON report")
    args = parser.parse_args()

    svc = SearchService(args.perspective)
    rows: List[Dict[str, Any]] = [bench_position(svc, item, args.depth) for item in DEFAULT_POSITIONS]

    if args.json:
        report = {
            "python": platform.python_version(),
            "depth": args.depth,
            "perspective": args.perspective,
            "positions": rows,
            "total_nodes": sum(r["nodes"] for r in rows),
            "total_time_ms": sum(r["time_ms"] for r in rows),
        }
        print(json.dumps(report, indent=2))
        return

    for r in rows:
        print(
            f"{r['id']:<12} depth={r['depth']} best={r['best_move']} score={r['score']} "
            f"nodes={r['nodes']} time_ms={r['time_ms']} nps={r['nps']}"
        )


if __name__ == "__main__":
    main()
