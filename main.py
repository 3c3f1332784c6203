"""Command-line utilities for the chess engine."""

from __future__ import annotations

import argparse
import logging
import random

import uvicorn

from stackchess.board import board_from_placement, render_board
from stackchess.constants import START_PLACEMENT, Color, PieceType, parse_square
from stackchess.errors import ChessError
from stackchess.game import GameState
from stackchess.opponent import MoveSelector
from stackchess.perft import perft, perft_divide


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stack chess utilities")
    parser.add_argument("--placement", default=START_PLACEMENT, help="FEN piece placement")
    parser.add_argument("--turn", choices=["w", "b"], default="w", help="Side to move")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=False)

    perft_parser = subparsers.add_parser("perft", help="Run perft")
    perft_parser.add_argument("depth", type=int, help="Perft depth")
    perft_parser.add_argument("--divide", action="store_true", help="Show per-move split")

    suggest_parser = subparsers.add_parser("suggest", help="Ask the heuristic opponent for a move")
    suggest_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    play_parser = subparsers.add_parser("play", help="Play against the heuristic opponent")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser


def _parse_move(text: str):
    text = text.strip().lower()
    if len(text) not in (4, 5):
        raise ValueError(f"Invalid move: {text}")
    promotion = PieceType(text[4]) if len(text) == 5 else None
    return parse_square(text[:2]), parse_square(text[2:4]), promotion


def play(game: GameState) -> None:
    human = game.turn
    opponent = game.opponent_color
    while True:
        print(render_board(game.board))
        if game.game_over:
            print(game.game_over)
            return
        if game.turn is opponent:
            move = game.play_opponent_move()
            if move is None:
                return
            print(f"{opponent.label} plays {move}")
            continue

        prompt = f"{human.label} to move{' (check)' if game.in_check else ''}> "
        try:
            line = input(prompt)
        except EOFError:
            return
        if line.strip() in ("quit", "exit"):
            return
        if line.strip() == "undo":
            # Take back the opponent's reply and our own move.
            game.undo()
            game.undo()
            continue
        try:
            from_pos, to_pos, promotion = _parse_move(line)
            game.apply_move(from_pos, to_pos, promotion)
        except (ChessError, ValueError) as exc:
            print(exc)


def run() -> None:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    turn = Color(args.turn)
    board = board_from_placement(args.placement)

    if args.command == "perft":
        if args.divide:
            for move, count in perft_divide(board, turn, args.depth).items():
                print(f"{move}: {count}")
        else:
            print(perft(board, turn, args.depth))
        return

    if args.command == "suggest":
        selector = MoveSelector(rng=random.Random(args.seed))
        choice = selector.choose_move(board, turn)
        print(f"{choice[0]}{choice[1]}" if choice else "none")
        return

    if args.command == "serve":
        uvicorn.run("api.server:app", host=args.host, port=args.port)
        return

    if args.command == "play":
        game = GameState(
            opponent_color=Color.BLACK if turn is Color.WHITE else Color.WHITE,
            opponent_delay=None,
            selector=MoveSelector(rng=random.Random(args.seed)),
            placement=args.placement,
            turn=turn,
        )
        try:
            play(game)
        finally:
            game.close()
        return

    print(render_board(board))


if __name__ == "__main__":
    run()
