#!/usr/bin/env python3
"""Chart the CSVs written by ``scripts/bench.py``."""

from __future__ import annotations

import argparse
import csv
from pathlib import Path

import matplotlib.pyplot as plt

ROOT = Path(__file__).resolve().parents[1]

RESULT_COLORS = {
    "Checkmate": "#dc2626",
    "Stalemate": "#2563eb",
    "unfinished": "#6b7280",
}


def _outcome(result: str) -> str:
    return result.split("!", 1)[0]


def _read_rows(path: Path) -> list[dict[str, str]]:
    with path.open("r", encoding="utf-8") as handle:
        return list(csv.DictReader(handle))


def _perft_panel(ax, rows: list[dict[str, str]]) -> None:
    positions = sorted({row["position"] for row in rows})
    width = 0.8 / max(len(positions), 1)
    for offset, position in enumerate(positions):
        points = sorted((int(row["depth"]), int(row["nodes"])) for row in rows if row["position"] == position)
        depths = [depth + offset * width for depth, _ in points]
        ax.bar(depths, [nodes for _, nodes in points], width=width, label=position)
    ax.set_yscale("log")
    ax.set_xlabel("depth")
    ax.set_ylabel("leaf nodes")
    ax.set_title("Perft tree size")
    ax.legend(fontsize="small")


def _selfplay_panel(ax, rows: list[dict[str, str]]) -> None:
    # One point per game, coloured by how it ended.
    for result, color in RESULT_COLORS.items():
        games = [row for row in rows if _outcome(row["result"]) == result]
        if not games:
            continue
        ax.scatter(
            [int(row["plies"]) for row in games],
            [float(row["ms_per_move"]) for row in games],
            color=color,
            label=f"{result.lower()} ({len(games)})",
        )
    ax.set_xlabel("plies")
    ax.set_ylabel("ms per move")
    ax.set_title("Self-play cost")
    ax.legend(fontsize="small")


def plot(perft_rows: list[dict[str, str]], selfplay_rows: list[dict[str, str]], output: Path) -> None:
    fig, (left, right) = plt.subplots(1, 2, figsize=(12, 5))
    _perft_panel(left, perft_rows)
    _selfplay_panel(right, selfplay_rows)
    for ax in (left, right):
        ax.grid(True, linestyle=":", alpha=0.5)

    output.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output, format="svg")
    plt.close(fig)


def main() -> None:
    parser = argparse.ArgumentParser(description="Plot benchmark metrics")
    parser.add_argument("--metrics-dir", type=Path, default=ROOT / "docs" / "metrics")
    parser.add_argument("--output", type=Path, default=ROOT / "docs" / "visuals" / "bench.svg")
    args = parser.parse_args()

    plot(
        _read_rows(args.metrics_dir / "perft_metrics.csv"),
        _read_rows(args.metrics_dir / "selfplay_metrics.csv"),
        args.output,
    )
    print(f"wrote {args.output}")


if __name__ == "__main__":
    main()
