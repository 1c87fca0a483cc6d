"""Attack map and check detection.

Attack squares ignore whether the attacker's own king would be exposed.
Rays stop on (and include) the first occupied square whatever its color, so
a defended piece counts as attacked by its defenders. Pawns attack both
forward diagonals regardless of occupancy.
"""

from __future__ import annotations

from typing import Callable

from chessgame.board import Board, in_bounds
from chessgame.pieces import Color, Piece, PieceType, Square

__all__ = [
    "KNIGHT_OFFSETS",
    "KING_OFFSETS",
    "ROOK_DIRECTIONS",
    "BISHOP_DIRECTIONS",
    "QUEEN_DIRECTIONS",
    "attack_squares",
    "is_square_under_attack",
    "is_in_check",
]

KNIGHT_OFFSETS = [(2, 1), (2, -1), (-2, 1), (-2, -1),
                  (1, 2), (1, -2), (-1, 2), (-1, -2)]
ROOK_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1)]
BISHOP_DIRECTIONS = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
QUEEN_DIRECTIONS = ROOK_DIRECTIONS + BISHOP_DIRECTIONS
KING_OFFSETS = QUEEN_DIRECTIONS


def _offset_squares(piece: Piece, offsets: list[tuple[int, int]]) -> list[Square]:
    row, col = piece.position
    return [
        (row + dr, col + dc)
        for dr, dc in offsets
        if in_bounds(row + dr, col + dc)
    ]


def _ray_squares(board: Board, piece: Piece, directions: list[tuple[int, int]]) -> list[Square]:
    squares = []
    for dr, dc in directions:
        row, col = piece.position[0] + dr, piece.position[1] + dc
        while in_bounds(row, col):
            squares.append((row, col))
            if board.piece_at((row, col)) is not None:
                break
            row += dr
            col += dc
    return squares


def _pawn_attacks(board: Board, piece: Piece) -> list[Square]:
    row, col = piece.position
    target_row = row + piece.color.forward
    return [
        (target_row, col + dc)
        for dc in (-1, 1)
        if in_bounds(target_row, col + dc)
    ]


_ATTACKS: dict[PieceType, Callable[[Board, Piece], list[Square]]] = {
    PieceType.PAWN: _pawn_attacks,
    PieceType.KNIGHT: lambda board, piece: _offset_squares(piece, KNIGHT_OFFSETS),
    PieceType.BISHOP: lambda board, piece: _ray_squares(board, piece, BISHOP_DIRECTIONS),
    PieceType.ROOK: lambda board, piece: _ray_squares(board, piece, ROOK_DIRECTIONS),
    PieceType.QUEEN: lambda board, piece: _ray_squares(board, piece, QUEEN_DIRECTIONS),
    PieceType.KING: lambda board, piece: _offset_squares(piece, KING_OFFSETS),
}


def attack_squares(board: Board, piece: Piece) -> list[Square]:
    """Squares ``piece`` attacks from its current position."""
    return _ATTACKS[piece.piece_type](board, piece)


def is_square_under_attack(board: Board, square: Square, by_color: Color) -> bool:
    return any(
        square in attack_squares(board, piece)
        for piece in board.pieces(by_color)
    )


def is_in_check(board: Board, color: Color) -> bool:
    return is_square_under_attack(board, board.find_king(color), color.opponent)
