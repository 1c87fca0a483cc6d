"""Piece, color and value definitions shared by every engine module."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    "Color",
    "PieceType",
    "Piece",
    "Square",
    "get_piece_value",
    "PIECE_SYMBOLS",
    "PROMOTION_CHOICES",
]

Square = tuple[int, int]  # (row, col), row 0 = rank 1, col 0 = file a


class Color(enum.Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row direction pawns of this color advance in."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_row(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_row(self) -> int:
        return 1 if self is Color.WHITE else 6

    @property
    def promotion_row(self) -> int:
        return 7 if self is Color.WHITE else 0


class PieceType(enum.Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


# Blank letter for pawns, matching the move-history notation.
PIECE_SYMBOLS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

PROMOTION_CHOICES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


def get_piece_value(piece_type: PieceType, *, king=None) -> int:
    """Get standard piece value. King value must be explicitly provided.

    king=None (default) makes a king lookup return None, so callers that
    forget to handle the king fail loudly on arithmetic.
    """
    return {
        PieceType.PAWN: 1, PieceType.KNIGHT: 3, PieceType.BISHOP: 3,
        PieceType.ROOK: 5, PieceType.QUEEN: 9, PieceType.KING: king,
    }[piece_type]


@dataclass
class Piece:
    piece_type: PieceType
    color: Color
    position: Square
    has_moved: bool = False

    @property
    def letter(self) -> str:
        """Single-letter symbol: upper-case for white, lower-case for black."""
        letter = PIECE_SYMBOLS[self.piece_type] or "P"
        return letter if self.color is Color.WHITE else letter.lower()

    def copy(self) -> Piece:
        return Piece(self.piece_type, self.color, self.position, self.has_moved)
