"""Tests for the board grid and piece bookkeeping."""

import pytest

from chessgame.board import Board, in_bounds
from chessgame.errors import InvariantViolation
from chessgame.pieces import Color, Piece, PieceType, get_piece_value


class TestStartingBoard:
    def test_thirty_two_pieces(self):
        board = Board.starting()
        assert len(board.pieces()) == 32
        assert len(board.pieces(Color.WHITE)) == 16
        assert len(board.pieces(Color.BLACK)) == 16

    def test_back_ranks(self):
        board = Board.starting()
        assert board.piece_at((0, 4)).piece_type == PieceType.KING
        assert board.piece_at((0, 3)).piece_type == PieceType.QUEEN
        assert board.piece_at((7, 4)).piece_type == PieceType.KING
        assert board.piece_at((7, 4)).color == Color.BLACK
        assert board.piece_at((7, 0)).piece_type == PieceType.ROOK

    def test_pawn_rows(self):
        board = Board.starting()
        for col in range(8):
            assert board.piece_at((1, col)).piece_type == PieceType.PAWN
            assert board.piece_at((6, col)).color == Color.BLACK

    def test_positions_match_squares(self):
        board = Board.starting()
        for piece in board.pieces():
            assert board.piece_at(piece.position) is piece
        board.check_integrity()

    def test_nothing_has_moved(self):
        assert not any(p.has_moved for p in Board.starting().pieces())

    def test_str_renders_rank_eight_first(self):
        lines = str(Board.starting()).splitlines()
        assert lines[0] == "8 r n b q k b n r"
        assert lines[-2] == "1 R N B Q K B N R"
        assert lines[-1] == "  a b c d e f g h"


class TestMutation:
    def test_relocate_updates_position_and_flag(self):
        board = Board.starting()
        captured = board.relocate((0, 6), (2, 5))
        knight = board.piece_at((2, 5))
        assert captured is None
        assert knight.position == (2, 5)
        assert knight.has_moved is True
        assert board.piece_at((0, 6)) is None

    def test_relocate_returns_captured_piece(self):
        board = Board.starting()
        captured = board.relocate((0, 0), (7, 0))
        assert captured.piece_type == PieceType.ROOK
        assert captured.color == Color.BLACK

    def test_relocate_from_empty_square_is_a_fault(self):
        with pytest.raises(InvariantViolation):
            Board.starting().relocate((3, 3), (4, 4))

    def test_copy_is_deep(self):
        board = Board.starting()
        clone = board.copy()
        assert clone == board
        clone.relocate((1, 4), (3, 4))
        assert board.piece_at((1, 4)) is not None
        assert board.piece_at((1, 4)).has_moved is False
        assert clone != board

    def test_equality_includes_moved_flag(self):
        a = Board.empty()
        b = Board.empty()
        a.place(Piece(PieceType.ROOK, Color.WHITE, (0, 0)))
        b.place(Piece(PieceType.ROOK, Color.WHITE, (0, 0), has_moved=True))
        assert a != b


class TestKings:
    def test_find_king(self):
        board = Board.starting()
        assert board.find_king(Color.WHITE) == (0, 4)
        assert board.find_king(Color.BLACK) == (7, 4)

    def test_missing_king_is_invariant_violation(self):
        board = Board.empty()
        board.place(Piece(PieceType.KING, Color.WHITE, (0, 4)))
        with pytest.raises(InvariantViolation):
            board.find_king(Color.BLACK)

    def test_two_kings_is_invariant_violation(self):
        board = Board.starting()
        board.place(Piece(PieceType.KING, Color.WHITE, (3, 3)))
        with pytest.raises(InvariantViolation):
            board.check_integrity()

    def test_desynced_position_is_invariant_violation(self):
        board = Board.starting()
        board.piece_at((1, 0)).position = (2, 0)
        with pytest.raises(InvariantViolation):
            board.check_integrity()

    def test_invariant_violation_is_an_assertion(self):
        assert issubclass(InvariantViolation, AssertionError)


def test_in_bounds():
    assert in_bounds(0, 0)
    assert in_bounds(7, 7)
    assert not in_bounds(-1, 3)
    assert not in_bounds(3, 8)


def test_piece_values():
    assert get_piece_value(PieceType.PAWN) == 1
    assert get_piece_value(PieceType.KNIGHT) == get_piece_value(PieceType.BISHOP) == 3
    assert get_piece_value(PieceType.ROOK) == 5
    assert get_piece_value(PieceType.QUEEN) == 9
    assert get_piece_value(PieceType.KING, king=1000) == 1000
    assert get_piece_value(PieceType.KING) is None


def test_piece_letters():
    assert Piece(PieceType.KNIGHT, Color.WHITE, (0, 1)).letter == "N"
    assert Piece(PieceType.PAWN, Color.BLACK, (6, 0)).letter == "p"
    assert Color.WHITE.opponent is Color.BLACK
