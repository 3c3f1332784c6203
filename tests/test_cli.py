import sys

import pytest

from main import _parse_move, build_parser, run
from stackchess.constants import PieceType


def test_parse_move() -> None:
    assert _parse_move("e2e4") == ((6, 4), (4, 4), None)
    assert _parse_move("a7a8q") == ((1, 0), (0, 0), PieceType.QUEEN)
    with pytest.raises(ValueError):
        _parse_move("e2")


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["perft", "2", "--divide"])
    assert args.command == "perft"
    assert args.depth == 2
    assert args.divide
    assert args.turn == "w"


def test_perft_command_prints_node_count(monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["stackchess", "perft", "2"])
    run()
    assert capsys.readouterr().out.strip() == "400"


def test_suggest_command_prints_a_move(monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["stackchess", "--turn", "b", "suggest", "--seed", "1"])
    run()
    out = capsys.readouterr().out.strip()
    assert len(out) == 4
    assert out[1] in "78"
