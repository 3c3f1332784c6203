import pytest

from stackchess.board import (
    Piece,
    Position,
    board_from_placement,
    board_to_placement,
    copy_board,
    find_king,
    in_bounds,
    iter_pieces,
    initial_board,
    positions_equal,
    render_board,
)
from stackchess.constants import START_PLACEMENT, Color, PieceType, parse_square, square_name


def test_initial_layout() -> None:
    board = initial_board()

    assert [p.type for p in board[0]] == [
        PieceType.ROOK,
        PieceType.KNIGHT,
        PieceType.BISHOP,
        PieceType.QUEEN,
        PieceType.KING,
        PieceType.BISHOP,
        PieceType.KNIGHT,
        PieceType.ROOK,
    ]
    assert all(p == Piece(PieceType.PAWN, Color.BLACK) for p in board[1])
    assert all(p == Piece(PieceType.PAWN, Color.WHITE) for p in board[6])
    assert all(p.color is Color.WHITE for p in board[7])
    assert all(sq is None for row in board[2:6] for sq in row)
    assert board_to_placement(board) == START_PLACEMENT


def test_copy_board_is_independent() -> None:
    board = initial_board()
    clone = copy_board(board)

    clone[6][4] = None
    clone[4][4] = Piece(PieceType.PAWN, Color.WHITE)

    assert board[6][4] == Piece(PieceType.PAWN, Color.WHITE)
    assert board[4][4] is None
    assert clone == copy_board(clone)


def test_bounds_and_position_equality() -> None:
    assert in_bounds(Position(0, 0))
    assert in_bounds(Position(7, 7))
    assert not in_bounds(Position(-1, 3))
    assert not in_bounds(Position(3, 8))

    assert positions_equal(Position(2, 3), Position(2, 3))
    assert not positions_equal(Position(2, 3), Position(3, 2))
    assert not positions_equal(None, Position(0, 0))
    assert not positions_equal(None, None)


def test_find_king() -> None:
    board = initial_board()
    assert find_king(board, Color.WHITE) == Position(7, 4)
    assert find_king(board, Color.BLACK) == Position(0, 4)

    assert find_king(board_from_placement("8/8/8/8/8/8/8/4K3"), Color.BLACK) is None


def test_square_names() -> None:
    assert square_name(7, 0) == "a1"
    assert square_name(0, 7) == "h8"
    assert Position(6, 4).name == "e2"
    assert parse_square("e4") == (4, 4)
    assert parse_square("A8") == (0, 0)

    with pytest.raises(ValueError):
        parse_square("i9")
    with pytest.raises(ValueError):
        square_name(8, 0)


def test_placement_roundtrip_and_errors() -> None:
    placement = "r6k/8/8/3pP3/8/8/8/K7"
    assert board_to_placement(board_from_placement(placement)) == placement

    with pytest.raises(ValueError):
        board_from_placement("8/8/8")
    with pytest.raises(ValueError):
        board_from_placement("9/8/8/8/8/8/8/8")
    with pytest.raises(ValueError):
        board_from_placement("x7/8/8/8/8/8/8/8")


def test_render_board_puts_black_on_top() -> None:
    lines = render_board(initial_board()).splitlines()
    assert lines[0] == "8 r n b q k b n r"
    assert lines[7] == "1 R N B Q K B N R"
    assert lines[-1].strip() == "a b c d e f g h"


def test_iter_pieces_row_major_and_by_colour() -> None:
    board = board_from_placement("4k3/8/8/8/8/8/4P3/R3K3")
    white = list(iter_pieces(board, Color.WHITE))

    assert [pos.name for pos, _ in white] == ["e2", "a1", "e1"]
    assert white[0][1] == Piece(PieceType.PAWN, Color.WHITE)
    assert [pos.name for pos, _ in iter_pieces(board)] == ["e8", "e2", "a1", "e1"]
