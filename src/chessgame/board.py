"""8x8 board grid. Pure data: placement, lookup and copying, no rules."""

from __future__ import annotations

from chessgame.errors import InvariantViolation
from chessgame.pieces import Color, Piece, PieceType, Square

__all__ = [
    "Board",
    "BOARD_SIZE",
    "BACK_RANK",
    "in_bounds",
]

BOARD_SIZE = 8

BACK_RANK = (
    PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
    PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK,
)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


class Board:
    """Grid of optional pieces indexed by (row, col).

    Every piece on the board satisfies ``board.piece_at(piece.position) is piece``;
    ``place``/``remove``/``relocate`` keep that in sync.
    """

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def starting(cls) -> Board:
        board = cls()
        for color in (Color.WHITE, Color.BLACK):
            for col, piece_type in enumerate(BACK_RANK):
                board.place(Piece(piece_type, color, (color.home_row, col)))
            for col in range(BOARD_SIZE):
                board.place(Piece(PieceType.PAWN, color, (color.pawn_row, col)))
        return board

    def piece_at(self, square: Square) -> Piece | None:
        row, col = square
        return self._grid[row][col]

    def place(self, piece: Piece) -> Piece | None:
        """Put ``piece`` on its own ``position``; returns whatever was there."""
        row, col = piece.position
        previous = self._grid[row][col]
        self._grid[row][col] = piece
        return previous

    def remove(self, square: Square) -> Piece | None:
        row, col = square
        piece = self._grid[row][col]
        self._grid[row][col] = None
        return piece

    def relocate(self, origin: Square, destination: Square) -> Piece | None:
        """Move the piece on ``origin`` to ``destination``, marking it moved.

        Returns the piece previously standing on ``destination``.
        """
        piece = self.remove(origin)
        if piece is None:
            raise InvariantViolation(f"no piece to relocate on {origin}")
        piece.position = destination
        piece.has_moved = True
        return self.place(piece)

    def pieces(self, color: Color | None = None) -> list[Piece]:
        """All pieces in row-major order, optionally of one color."""
        return [
            piece
            for row in self._grid
            for piece in row
            if piece is not None and (color is None or piece.color == color)
        ]

    def find_king(self, color: Color) -> Square:
        kings = [p for p in self.pieces(color) if p.piece_type == PieceType.KING]
        if len(kings) != 1:
            raise InvariantViolation(f"expected one {color.value} king, found {len(kings)}")
        return kings[0].position

    def check_integrity(self) -> None:
        """Raise InvariantViolation unless both kings exist and positions agree."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self._grid[row][col]
                if piece is not None and piece.position != (row, col):
                    raise InvariantViolation(
                        f"{piece.color.value} {piece.piece_type.value} on {(row, col)} "
                        f"records position {piece.position}"
                    )
        self.find_king(Color.WHITE)
        self.find_king(Color.BLACK)

    def copy(self) -> Board:
        clone = Board()
        for piece in self.pieces():
            clone.place(piece.copy())
        return clone

    def rows(self) -> list[list[str | None]]:
        """Piece letters per row, rank 1 first."""
        return [
            [piece.letter if piece else None for piece in row]
            for row in self._grid
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        lines = []
        for row in reversed(range(BOARD_SIZE)):
            cells = [piece.letter if piece else "." for piece in self._grid[row]]
            lines.append(f"{row + 1} " + " ".join(cells))
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
