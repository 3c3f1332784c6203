#!/usr/bin/env python3
"""Generate reproducible benchmark CSVs for the rules engine and opponent."""

from __future__ import annotations

import argparse
import csv
import random
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stackchess.board import board_from_placement
from stackchess.constants import START_PLACEMENT, Color
from stackchess.game import GameState
from stackchess.opponent import MoveSelector
from stackchess.perft import perft


OPEN_PLACEMENT = "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R"


@dataclass(frozen=True)
class PositionCase:
    name: str
    placement: str
    turn: Color = Color.WHITE


def _write_csv(path: Path, fieldnames: list[str], rows: list[dict[str, object]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def run_perft_bench(depths_by_case: dict[PositionCase, list[int]]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for case, depths in depths_by_case.items():
        for depth in depths:
            board = board_from_placement(case.placement)
            start = perf_counter()
            nodes = perft(board, case.turn, depth)
            elapsed_ms = (perf_counter() - start) * 1000.0
            nps = int(nodes / max(elapsed_ms / 1000.0, 1e-9))
            rows.append(
                {
                    "position": case.name,
                    "depth": depth,
                    "nodes": nodes,
                    "elapsed_ms": round(elapsed_ms, 3),
                    "nps": nps,
                }
            )
    return rows


def run_selfplay_bench(seeds: list[int], max_plies: int) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for seed in seeds:
        selector = MoveSelector(rng=random.Random(seed))
        game = GameState(opponent_color=None, opponent_delay=None)
        start = perf_counter()
        while not game.game_over and len(game.history) < max_plies:
            choice = selector.choose_move(game.board, game.turn)
            if choice is None:
                break
            game.apply_move(*choice)
        elapsed_ms = (perf_counter() - start) * 1000.0
        plies = len(game.history)
        rows.append(
            {
                "seed": seed,
                "plies": plies,
                "captures": sum(1 for move in game.history if move.is_capture),
                "result": game.game_over or "unfinished",
                "elapsed_ms": round(elapsed_ms, 3),
                "ms_per_move": round(elapsed_ms / max(plies, 1), 3),
            }
        )
    return rows


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate benchmark CSV files")
    parser.add_argument(
        "--metrics-dir",
        default=str(ROOT / "docs" / "metrics"),
        help="Output directory for CSV metrics",
    )
    parser.add_argument("--games", type=int, default=10, help="Number of self-play games")
    parser.add_argument("--max-plies", type=int, default=200, help="Ply cap per self-play game")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    metrics_dir = Path(args.metrics_dir)

    perft_rows = run_perft_bench(
        {
            PositionCase("start", START_PLACEMENT): [1, 2, 3],
            PositionCase("italian", OPEN_PLACEMENT, Color.BLACK): [1, 2],
        }
    )
    selfplay_rows = run_selfplay_bench(list(range(args.games)), args.max_plies)

    perft_path = metrics_dir / "perft_metrics.csv"
    selfplay_path = metrics_dir / "selfplay_metrics.csv"

    _write_csv(
        perft_path,
        fieldnames=["position", "depth", "nodes", "elapsed_ms", "nps"],
        rows=perft_rows,
    )
    _write_csv(
        selfplay_path,
        fieldnames=["seed", "plies", "captures", "result", "elapsed_ms", "ms_per_move"],
        rows=selfplay_rows,
    )

    print(f"wrote {perft_path}")
    print(f"wrote {selfplay_path}")


if __name__ == "__main__":
    main()
