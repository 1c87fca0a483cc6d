"""Position state and the board-mutating half of move execution.

``apply_move`` trusts its caller: the destination must already be in the
moving piece's legal set. Bookkeeping that only the live game needs
(notation, capture lists, undo history, events) lives in ``chessgame.game``;
the search in ``chessgame.opponent`` calls ``apply_move`` on scratch copies.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from chessgame.board import Board
from chessgame.errors import InvariantViolation
from chessgame.pieces import Color, Piece, PieceType, Square

__all__ = [
    "CastleSide",
    "CastlingRights",
    "EnPassantTarget",
    "Position",
    "AppliedMove",
    "apply_move",
    "castle_side_for",
    "promote",
]

KING_COL = 4
KINGSIDE_ROOK_COL = 7
QUEENSIDE_ROOK_COL = 0


class CastleSide(enum.Enum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


# (king destination col, rook origin col, rook destination col)
CASTLE_COLUMNS = {
    CastleSide.KINGSIDE: (6, KINGSIDE_ROOK_COL, 5),
    CastleSide.QUEENSIDE: (2, QUEENSIDE_ROOK_COL, 3),
}


@dataclass
class CastlingRights:
    """Move flags behind castling eligibility. Flags only ever go False -> True."""

    white_king_moved: bool = False
    black_king_moved: bool = False
    white_rook_left_moved: bool = False
    white_rook_right_moved: bool = False
    black_rook_left_moved: bool = False
    black_rook_right_moved: bool = False

    def king_moved(self, color: Color) -> bool:
        return self.white_king_moved if color is Color.WHITE else self.black_king_moved

    def rook_moved(self, color: Color, side: CastleSide) -> bool:
        if color is Color.WHITE:
            if side is CastleSide.KINGSIDE:
                return self.white_rook_right_moved
            return self.white_rook_left_moved
        if side is CastleSide.KINGSIDE:
            return self.black_rook_right_moved
        return self.black_rook_left_moved

    def mark_king_moved(self, color: Color) -> None:
        if color is Color.WHITE:
            self.white_king_moved = True
        else:
            self.black_king_moved = True

    def mark_rook_square(self, color: Color, square: Square) -> None:
        """Flag the rook that starts on ``square``, if ``square`` is a rook corner."""
        row, col = square
        if row != color.home_row:
            return
        if col == QUEENSIDE_ROOK_COL:
            if color is Color.WHITE:
                self.white_rook_left_moved = True
            else:
                self.black_rook_left_moved = True
        elif col == KINGSIDE_ROOK_COL:
            if color is Color.WHITE:
                self.white_rook_right_moved = True
            else:
                self.black_rook_right_moved = True

    def can_castle(self, color: Color, side: CastleSide) -> bool:
        return not self.king_moved(color) and not self.rook_moved(color, side)


@dataclass(frozen=True)
class EnPassantTarget:
    """Landing square of a pawn that just advanced two ranks."""

    position: Square
    color: Color


@dataclass
class Position:
    board: Board = field(default_factory=Board.starting)
    to_move: Color = Color.WHITE
    castling: CastlingRights = field(default_factory=CastlingRights)
    en_passant: EnPassantTarget | None = None

    def copy(self) -> Position:
        return Position(
            board=self.board.copy(),
            to_move=self.to_move,
            castling=CastlingRights(**vars(self.castling)),
            en_passant=self.en_passant,
        )


@dataclass
class AppliedMove:
    piece_type: PieceType
    color: Color
    origin: Square
    destination: Square
    captured: PieceType | None = None
    captured_square: Square | None = None
    castle: CastleSide | None = None
    en_passant_capture: bool = False
    promotion: PieceType | None = None
    awaiting_promotion: bool = False


def castle_side_for(piece: Piece, destination: Square) -> CastleSide | None:
    """Castling is recognized by the king moving exactly two files."""
    if piece.piece_type != PieceType.KING:
        return None
    delta = destination[1] - piece.position[1]
    if delta == 2:
        return CastleSide.KINGSIDE
    if delta == -2:
        return CastleSide.QUEENSIDE
    return None


def apply_move(
    position: Position,
    origin: Square,
    destination: Square,
    promotion: PieceType | None = None,
) -> AppliedMove:
    """Apply a legal move to ``position`` in place.

    A pawn reaching the last rank becomes ``promotion`` when one is given.
    Without it the pawn stays, ``awaiting_promotion`` is set on the result and
    the side to move does not change.
    """
    board = position.board
    piece = board.piece_at(origin)
    if piece is None:
        raise InvariantViolation(f"apply_move from empty square {origin}")

    position.en_passant = None
    record = AppliedMove(
        piece_type=piece.piece_type,
        color=piece.color,
        origin=origin,
        destination=destination,
    )

    castle = castle_side_for(piece, destination)
    if castle is not None:
        _, rook_from, rook_to = CASTLE_COLUMNS[castle]
        row = origin[0]
        board.relocate((row, rook_from), (row, rook_to))
        record.castle = castle

    target = board.piece_at(destination)
    if (
        target is None
        and piece.piece_type == PieceType.PAWN
        and origin[1] != destination[1]
    ):
        captured_square = (origin[0], destination[1])
        target = board.remove(captured_square)
        record.en_passant_capture = True
    else:
        captured_square = destination

    if target is not None:
        if target.piece_type == PieceType.KING:
            raise InvariantViolation(f"move {origin}->{destination} captures a king")
        record.captured = target.piece_type
        record.captured_square = captured_square
        if target.piece_type == PieceType.ROOK:
            position.castling.mark_rook_square(target.color, captured_square)

    board.relocate(origin, destination)

    if piece.piece_type == PieceType.KING:
        position.castling.mark_king_moved(piece.color)
    elif piece.piece_type == PieceType.ROOK:
        position.castling.mark_rook_square(piece.color, origin)
    elif piece.piece_type == PieceType.PAWN:
        if abs(destination[0] - origin[0]) == 2:
            position.en_passant = EnPassantTarget(destination, piece.color)
        if destination[0] == piece.color.promotion_row:
            if promotion is None:
                record.awaiting_promotion = True
                return record
            promote(position, destination, promotion)
            record.promotion = promotion

    position.to_move = position.to_move.opponent
    return record


def promote(position: Position, square: Square, piece_type: PieceType) -> Piece:
    """Replace the pawn on ``square`` with a fresh ``piece_type`` of its color."""
    pawn = position.board.piece_at(square)
    if pawn is None or pawn.piece_type != PieceType.PAWN:
        raise InvariantViolation(f"no pawn to promote on {square}")
    promoted = Piece(piece_type, pawn.color, square, has_moved=True)
    position.board.place(promoted)
    return promoted
