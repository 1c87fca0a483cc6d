"""Square names and move notation.

Coordinates are zero-based (row, col) inside the engine. The input layer
speaks files "a"-"h" and ranks 1-8; this module translates between the two
using python-chess's square helpers.
"""

from __future__ import annotations

import chess

from chessgame.pieces import PIECE_SYMBOLS, PieceType, Square

__all__ = [
    "FILES",
    "square_name",
    "parse_square",
    "file_rank_to_square",
    "parse_uci_move",
    "move_notation",
    "promotion_suffix",
    "parse_piece_type",
]

FILES = "abcdefgh"

_PROMOTION_FROM_CHESS = {
    chess.QUEEN: PieceType.QUEEN,
    chess.ROOK: PieceType.ROOK,
    chess.BISHOP: PieceType.BISHOP,
    chess.KNIGHT: PieceType.KNIGHT,
}

_PIECE_NAMES = {piece_type.value: piece_type for piece_type in PieceType}
_PIECE_NAMES.update({
    symbol.lower(): piece_type
    for piece_type, symbol in PIECE_SYMBOLS.items()
    if symbol
})
_PIECE_NAMES["p"] = PieceType.PAWN


def square_name(square: Square) -> str:
    row, col = square
    return chess.square_name(chess.square(col, row))


def parse_square(name: str) -> Square:
    """'e4' -> (3, 4). Raises ValueError for anything that is not a square."""
    try:
        index = chess.parse_square(name.strip().lower())
    except ValueError:
        raise ValueError(f"Invalid square: {name}") from None
    return chess.square_rank(index), chess.square_file(index)


def file_rank_to_square(file: str, rank: int) -> Square | None:
    """Translate a spoken file letter and 1-based rank; None when off the board."""
    file = file.strip().lower()
    if len(file) != 1 or file not in FILES or not 1 <= rank <= 8:
        return None
    return rank - 1, FILES.index(file)


def parse_uci_move(text: str) -> tuple[Square, Square, PieceType | None]:
    """'e7e8q' -> ((6, 4), (7, 4), PieceType.QUEEN)."""
    try:
        move = chess.Move.from_uci(text.strip().lower())
    except (chess.InvalidMoveError, ValueError) as e:
        raise ValueError(f"Invalid move format: {text}") from e
    if not move:
        raise ValueError(f"Invalid move format: {text}")
    origin = (chess.square_rank(move.from_square), chess.square_file(move.from_square))
    destination = (chess.square_rank(move.to_square), chess.square_file(move.to_square))
    promotion = _PROMOTION_FROM_CHESS.get(move.promotion) if move.promotion else None
    return origin, destination, promotion


def parse_piece_type(name: str) -> PieceType:
    """'knight', 'N' or 'n' -> PieceType.KNIGHT."""
    try:
        return _PIECE_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown piece: {name}") from None


def move_notation(piece_type: PieceType, destination: Square) -> str:
    """Piece letter plus destination, blank letter for pawns: 'Nf3', 'e4'."""
    return f"{PIECE_SYMBOLS[piece_type]}{square_name(destination)}"


def promotion_suffix(piece_type: PieceType) -> str:
    return f"={PIECE_SYMBOLS[piece_type]}"
