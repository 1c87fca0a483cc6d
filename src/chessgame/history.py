"""Undo stack of pre-move snapshots."""

from __future__ import annotations

from dataclasses import dataclass

from chessgame.pieces import PieceType, Square
from chessgame.position import Position


@dataclass(frozen=True)
class HistorySnapshot:
    """Everything needed to put the game back exactly as it was before a move.

    The board is a deep copy; castling flags, en passant target and side to
    move travel with it inside ``position``. Legality code never reads these.
    """

    position: Position
    move_history: tuple[str, ...]
    captured_by_white: tuple[PieceType, ...]
    captured_by_black: tuple[PieceType, ...]
    last_move: tuple[Square, Square] | None
    last_move_description: str


class HistoryStore:
    def __init__(self) -> None:
        self._stack: list[HistorySnapshot] = []

    def push(self, snapshot: HistorySnapshot) -> None:
        self._stack.append(snapshot)

    def pop(self) -> HistorySnapshot | None:
        return self._stack.pop() if self._stack else None

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
