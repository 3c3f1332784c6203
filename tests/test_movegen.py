import pytest

from stackchess import movegen
from stackchess.board import Position, board_from_placement, copy_board, initial_board
from stackchess.constants import Color, parse_square
from stackchess.movegen import (
    MoveMode,
    generate_moves,
    in_check,
    is_square_attacked,
    legal_moves_for,
)


def _sq(name: str) -> Position:
    return Position(*parse_square(name))


def _names(moves) -> set[str]:
    return {pos.name for pos in moves}


def test_start_position_has_20_legal_moves() -> None:
    moves = legal_moves_for(initial_board(), Color.WHITE)
    assert len(moves) == 20

    pawn_moves = [m for m in moves if m[0].row == 6]
    knight_moves = [m for m in moves if m[0].row == 7]
    assert len(pawn_moves) == 16
    assert len(knight_moves) == 4


def test_empty_square_has_no_moves() -> None:
    assert generate_moves(initial_board(), _sq("e4")) == []


def test_pawn_pushes_and_captures() -> None:
    board = board_from_placement("4k3/8/8/8/8/3p1p2/4P3/4K3")
    assert _names(generate_moves(board, _sq("e2"))) == {"e3", "e4", "d3", "f3"}

    blocked = board_from_placement("4k3/8/8/8/4p3/8/4P3/4K3")
    assert _names(generate_moves(blocked, _sq("e2"))) == {"e3"}

    no_diagonal = board_from_placement("4k3/8/8/8/8/3P4/4P3/4K3")
    assert "d3" not in _names(generate_moves(no_diagonal, _sq("e2")))


def test_black_pawn_moves_down_the_board() -> None:
    board = initial_board()
    assert _names(generate_moves(board, _sq("d7"))) == {"d6", "d5"}


def test_knight_moves_skip_friendly_pieces() -> None:
    board = initial_board()
    assert _names(generate_moves(board, _sq("g1"))) == {"f3", "h3"}


def test_slider_rays_stop_at_pieces() -> None:
    board = board_from_placement("4k3/8/8/8/1p1R2P1/8/8/4K3")
    moves = _names(generate_moves(board, _sq("d4")))

    assert "b4" in moves
    assert "a4" not in moves
    assert "f4" in moves
    assert "g4" not in moves
    assert {"d8", "d1", "d5", "d3"} <= moves


def test_queen_combines_rook_and_bishop_rays() -> None:
    board = board_from_placement("4k3/8/8/8/3Q4/8/8/4K3")
    assert len(generate_moves(board, _sq("d4"))) == 27


def test_king_cannot_step_into_attack() -> None:
    board = board_from_placement("r6k/8/8/8/8/8/8/K7")

    assert in_check(board, Color.WHITE)
    assert _names(generate_moves(board, _sq("a1"))) == {"b1", "b2"}


def test_pinned_piece_cannot_expose_king() -> None:
    board = board_from_placement("4r2k/8/8/8/8/8/4N3/4K3")

    assert _names(generate_moves(board, _sq("e2"), MoveMode.RAW))
    assert generate_moves(board, _sq("e2"), MoveMode.LEGAL) == []


def test_raw_mode_ignores_self_check() -> None:
    board = board_from_placement("4r2k/8/8/8/8/8/4N3/4K3")
    raw = generate_moves(board, _sq("e2"), MoveMode.RAW)
    assert _names(raw) == {"c1", "c3", "d4", "f4", "g3", "g1"}


def test_attack_detection_never_uses_safety_filter(monkeypatch) -> None:
    board = board_from_placement("8/8/8/4k3/8/8/8/4K3")

    def _boom(*args, **kwargs):
        raise AssertionError("safety filter reached from attack detection")

    monkeypatch.setattr(movegen, "_leaves_king_safe", _boom)

    assert not in_check(board, Color.WHITE)
    assert not in_check(board, Color.BLACK)
    assert is_square_attacked(board, _sq("e2"), Color.WHITE)


def test_kings_facing_each_other_terminates() -> None:
    board = board_from_placement("4k3/8/8/8/8/8/8/4K3")

    assert not in_check(board, Color.WHITE)
    assert not in_check(board, Color.BLACK)
    assert _names(generate_moves(board, _sq("e1"))) == {"d1", "f1", "d2", "e2", "f2"}
    assert _names(generate_moves(board, _sq("e8"))) == {"d8", "f8", "d7", "e7", "f7"}


def test_missing_king_is_not_in_check() -> None:
    board = board_from_placement("4r3/8/8/8/8/8/8/8")
    assert not in_check(board, Color.WHITE)


def test_legal_moves_do_not_mutate_board() -> None:
    board = initial_board()
    before = copy_board(board)
    legal_moves_for(board, Color.WHITE)
    assert board == before


@pytest.mark.parametrize(
    "placement,color",
    [
        ("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R", Color.WHITE),
        ("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R", Color.BLACK),
        ("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8", Color.WHITE),
        ("rnb2k1r/pp1Pbppp/2p5/q7/2B5/8/PPPQNnPP/RNB1K2R", Color.WHITE),
    ],
)
def test_every_legal_move_keeps_own_king_safe(placement: str, color: Color) -> None:
    board = board_from_placement(placement)
    for from_pos, to_pos in legal_moves_for(board, color):
        trial = copy_board(board)
        trial[to_pos.row][to_pos.col] = trial[from_pos.row][from_pos.col]
        trial[from_pos.row][from_pos.col] = None
        assert not in_check(trial, color), f"{from_pos}{to_pos} leaves king attacked"
