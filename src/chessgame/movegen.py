"""Pseudo-legal and legal move generation.

Legality is decided by simulation: each candidate is played on a scratch
copy of the board and rejected if the mover's king is then attacked.
"""

from __future__ import annotations

from chessgame.attacks import (
    BISHOP_DIRECTIONS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    QUEEN_DIRECTIONS,
    ROOK_DIRECTIONS,
    is_square_under_attack,
)
from chessgame.board import Board, in_bounds
from chessgame.pieces import Color, Piece, PieceType, Square
from chessgame.position import (
    CASTLE_COLUMNS,
    KING_COL,
    CastleSide,
    CastlingRights,
    EnPassantTarget,
    Position,
)

__all__ = [
    "pseudo_legal_moves",
    "castling_moves",
    "legal_moves",
    "all_legal_moves",
    "has_legal_moves",
]

# Squares the king crosses (start excluded) and squares that must be empty.
_CASTLE_PATHS = {
    CastleSide.KINGSIDE: ((5, 6), (5, 6)),
    CastleSide.QUEENSIDE: ((3, 2), (1, 2, 3)),
}


def _step_moves(board: Board, piece: Piece, offsets) -> list[Square]:
    row, col = piece.position
    moves = []
    for dr, dc in offsets:
        target = (row + dr, col + dc)
        if not in_bounds(*target):
            continue
        occupant = board.piece_at(target)
        if occupant is None or occupant.color != piece.color:
            moves.append(target)
    return moves


def _slide_moves(board: Board, piece: Piece, directions) -> list[Square]:
    moves = []
    for dr, dc in directions:
        row, col = piece.position[0] + dr, piece.position[1] + dc
        while in_bounds(row, col):
            occupant = board.piece_at((row, col))
            if occupant is not None:
                if occupant.color != piece.color:
                    moves.append((row, col))
                break
            moves.append((row, col))
            row += dr
            col += dc
    return moves


def _pawn_moves(
    board: Board, piece: Piece, en_passant: EnPassantTarget | None
) -> list[Square]:
    row, col = piece.position
    forward = piece.color.forward
    next_row = row + forward
    moves = []

    if in_bounds(next_row, col) and board.piece_at((next_row, col)) is None:
        moves.append((next_row, col))
        two_step = (row + 2 * forward, col)
        if row == piece.color.pawn_row and board.piece_at(two_step) is None:
            moves.append(two_step)

    for dc in (-1, 1):
        target = (next_row, col + dc)
        if not in_bounds(*target):
            continue
        occupant = board.piece_at(target)
        if occupant is not None and occupant.color != piece.color:
            moves.append(target)
        elif (
            occupant is None
            and en_passant is not None
            and en_passant.color == piece.color.opponent
            and en_passant.position == (row, col + dc)
        ):
            moves.append(target)
    return moves


def pseudo_legal_moves(
    board: Board, piece: Piece, en_passant: EnPassantTarget | None = None
) -> list[Square]:
    """Destinations consistent with the piece's pattern, ignoring check.

    King steps onto attacked squares are already excluded here; castling is
    generated separately by ``castling_moves``.
    """
    kind = piece.piece_type
    if kind == PieceType.PAWN:
        return _pawn_moves(board, piece, en_passant)
    if kind == PieceType.KNIGHT:
        return _step_moves(board, piece, KNIGHT_OFFSETS)
    if kind == PieceType.BISHOP:
        return _slide_moves(board, piece, BISHOP_DIRECTIONS)
    if kind == PieceType.ROOK:
        return _slide_moves(board, piece, ROOK_DIRECTIONS)
    if kind == PieceType.QUEEN:
        return _slide_moves(board, piece, QUEEN_DIRECTIONS)
    return [
        square
        for square in _step_moves(board, piece, KING_OFFSETS)
        if not is_square_under_attack(board, square, piece.color.opponent)
    ]


def castling_moves(board: Board, king: Piece, rights: CastlingRights) -> list[Square]:
    if king.piece_type != PieceType.KING:
        return []
    color = king.color
    row = color.home_row
    enemy = color.opponent
    if (
        rights.king_moved(color)
        or king.position != (row, KING_COL)
        or is_square_under_attack(board, (row, KING_COL), enemy)
    ):
        return []

    moves = []
    for side in (CastleSide.KINGSIDE, CastleSide.QUEENSIDE):
        if rights.rook_moved(color, side):
            continue
        king_to, rook_from, _ = CASTLE_COLUMNS[side]
        rook = board.piece_at((row, rook_from))
        if rook is None or rook.piece_type != PieceType.ROOK or rook.color != color:
            continue
        crossed, empty = _CASTLE_PATHS[side]
        if any(board.piece_at((row, c)) is not None for c in empty):
            continue
        if any(is_square_under_attack(board, (row, c), enemy) for c in crossed):
            continue
        moves.append((row, king_to))
    return moves


def _leaves_king_safe(
    board: Board, piece: Piece, destination: Square, en_passant: EnPassantTarget | None
) -> bool:
    scratch = board.copy()
    origin = piece.position
    if (
        piece.piece_type == PieceType.PAWN
        and origin[1] != destination[1]
        and scratch.piece_at(destination) is None
        and en_passant is not None
    ):
        scratch.remove(en_passant.position)
    scratch.relocate(origin, destination)
    king_square = destination if piece.piece_type == PieceType.KING else scratch.find_king(piece.color)
    return not is_square_under_attack(scratch, king_square, piece.color.opponent)


def legal_moves(position: Position, piece: Piece) -> list[Square]:
    """Destinations for ``piece`` that do not leave its own king attacked."""
    board = position.board
    candidates = pseudo_legal_moves(board, piece, position.en_passant)
    if piece.piece_type == PieceType.KING:
        candidates += castling_moves(board, piece, position.castling)
    return [
        destination
        for destination in candidates
        if _leaves_king_safe(board, piece, destination, position.en_passant)
    ]


def all_legal_moves(position: Position, color: Color | None = None) -> list[tuple[Square, Square]]:
    """Every legal (origin, destination) pair for ``color`` (default: side to move)."""
    color = color or position.to_move
    return [
        (piece.position, destination)
        for piece in position.board.pieces(color)
        for destination in legal_moves(position, piece)
    ]


def has_legal_moves(position: Position, color: Color | None = None) -> bool:
    color = color or position.to_move
    return any(legal_moves(position, piece) for piece in position.board.pieces(color))
