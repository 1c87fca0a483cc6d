"""Shared helpers: build engine positions from FEN via python-chess."""

import chess
import pytest

from chessgame.board import Board
from chessgame.game import ChessGame
from chessgame.pieces import Color, Piece, PieceType
from chessgame.position import CastlingRights, EnPassantTarget, Position

_TYPES = {
    chess.PAWN: PieceType.PAWN,
    chess.KNIGHT: PieceType.KNIGHT,
    chess.BISHOP: PieceType.BISHOP,
    chess.ROOK: PieceType.ROOK,
    chess.QUEEN: PieceType.QUEEN,
    chess.KING: PieceType.KING,
}

_START = Board.starting()


def _color(chess_color: chess.Color) -> Color:
    return Color.WHITE if chess_color == chess.WHITE else Color.BLACK


def position_from_fen(fen: str) -> Position:
    cb = chess.Board(fen)
    board = Board.empty()
    for square, piece in cb.piece_map().items():
        row, col = chess.square_rank(square), chess.square_file(square)
        kind, color = _TYPES[piece.piece_type], _color(piece.color)
        home = _START.piece_at((row, col))
        moved = home is None or home.piece_type != kind or home.color != color
        board.place(Piece(kind, color, (row, col), has_moved=moved))

    def king_moved(c):
        return not (cb.has_kingside_castling_rights(c) or cb.has_queenside_castling_rights(c))

    rights = CastlingRights(
        white_king_moved=king_moved(chess.WHITE),
        black_king_moved=king_moved(chess.BLACK),
        white_rook_left_moved=not cb.has_queenside_castling_rights(chess.WHITE),
        white_rook_right_moved=not cb.has_kingside_castling_rights(chess.WHITE),
        black_rook_left_moved=not cb.has_queenside_castling_rights(chess.BLACK),
        black_rook_right_moved=not cb.has_kingside_castling_rights(chess.BLACK),
    )

    en_passant = None
    if cb.ep_square is not None:
        mover = not cb.turn
        landing_rank = chess.square_rank(cb.ep_square) + (1 if mover == chess.WHITE else -1)
        en_passant = EnPassantTarget(
            (landing_rank, chess.square_file(cb.ep_square)), _color(mover)
        )
    return Position(board=board, to_move=_color(cb.turn), castling=rights, en_passant=en_passant)


def oracle_moves(cb: chess.Board) -> set:
    """Legal (origin, destination) pairs according to python-chess."""
    return {
        (
            (chess.square_rank(m.from_square), chess.square_file(m.from_square)),
            (chess.square_rank(m.to_square), chess.square_file(m.to_square)),
        )
        for m in cb.legal_moves
    }


def game_from_fen(fen: str, **kwargs) -> ChessGame:
    return ChessGame(position=position_from_fen(fen), **kwargs)


def sq(name: str) -> tuple[int, int]:
    """'e4' -> (3, 4)."""
    return int(name[1]) - 1, "abcdefgh".index(name[0])


@pytest.fixture()
def game():
    return ChessGame()
