"""Game state machine and the public operations the input layer calls.

``ChessGame`` owns the position and everything derived from it. Input
arrives as a selected square, a from/to pair, a destination-only voice
command or a castle intent; every path funnels into ``_execute`` after the
destination has been checked against the legal-move generator. The
automated reply is requested explicitly through ``opponent_move`` so the
caller decides when it runs.

Rejected requests return False and leave state untouched; the reason is in
``last_error``.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, replace
from typing import Callable

from chessgame.attacks import is_in_check
from chessgame.board import Board, in_bounds
from chessgame.descriptions import describe_move, describe_outcome, describe_promotion
from chessgame.difficulty import DEFAULT_DIFFICULTY, DifficultyProfile, get_profile
from chessgame.errors import MoveError
from chessgame.events import EventBus, GameEvent
from chessgame.history import HistorySnapshot, HistoryStore
from chessgame.movegen import has_legal_moves, legal_moves
from chessgame.notation import file_rank_to_square, move_notation, promotion_suffix
from chessgame.opponent import OpponentMoveResult, select_opponent_move
from chessgame.pieces import PROMOTION_CHOICES, Color, Piece, PieceType, Square
from chessgame.position import (
    CASTLE_COLUMNS,
    KING_COL,
    CastleSide,
    CastlingRights,
    EnPassantTarget,
    Position,
    apply_move,
    promote,
)

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    PLAYING = "playing"
    AWAITING_PROMOTION = "awaiting_promotion"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class PromotionPending:
    position: Square
    color: Color


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view published to the narration/UI layer after each move."""

    board: tuple[tuple[str | None, ...], ...]  # rank 1 first, "P"/"p" letters
    current_player: str
    status: str
    is_in_check: bool
    is_checkmate: bool
    is_stalemate: bool
    result: str | None
    promotion_pending: Square | None
    last_move_description: str
    last_move: tuple[Square, Square] | None
    move_history: tuple[str, ...]
    captured_by_white: tuple[str, ...]
    captured_by_black: tuple[str, ...]
    difficulty: str


class ChessGame:
    def __init__(
        self,
        difficulty: str = DEFAULT_DIFFICULTY,
        *,
        human_color: Color = Color.WHITE,
        search_depth: int | None = None,
        rng: random.Random | None = None,
        position: Position | None = None,
    ):
        self.human_color = human_color
        self._search_depth = search_depth
        self._rng = rng or random.Random()
        self._history = HistoryStore()
        self.events: EventBus[GameSnapshot] = EventBus()
        self._start(difficulty, position)

    # --- lifecycle -------------------------------------------------------

    def _start(self, difficulty: str, position: Position | None = None) -> None:
        self.difficulty = self._profile(difficulty)
        self.position = position if position is not None else Position()
        self.position.board.check_integrity()
        self.selected_piece: Piece | None = None
        self.possible_moves: list[Square] = []
        self.promotion_pending: PromotionPending | None = None
        self.move_history: list[str] = []
        self.captured_by_white: list[PieceType] = []
        self.captured_by_black: list[PieceType] = []
        self.last_move: tuple[Square, Square] | None = None
        self.last_move_description = ""
        self.last_error: MoveError | None = None
        self._history.clear()
        self._update_game_state()

    def _profile(self, name: str) -> DifficultyProfile:
        profile = get_profile(name)
        if self._search_depth is not None and profile.strategy == "search":
            profile = replace(profile, search_depth=self._search_depth)
        return profile

    def reset(self, difficulty: str | None = None) -> None:
        """Start over from the initial position, optionally at a new difficulty."""
        self._start(difficulty or self.difficulty.name)
        logger.info("Game reset (difficulty=%s)", self.difficulty.name)

    def subscribe(self, listener: Callable[[GameEvent, GameSnapshot], None]) -> Callable[[], None]:
        return self.events.subscribe(listener)

    # --- read access -----------------------------------------------------

    @property
    def board(self) -> Board:
        return self.position.board

    @property
    def current_player(self) -> Color:
        return self.position.to_move

    @property
    def castling(self) -> CastlingRights:
        return self.position.castling

    @property
    def en_passant_target(self) -> EnPassantTarget | None:
        return self.position.en_passant

    @property
    def status(self) -> GameStatus:
        if self.is_checkmate:
            return GameStatus.CHECKMATE
        if self.is_stalemate:
            return GameStatus.STALEMATE
        if self.promotion_pending is not None:
            return GameStatus.AWAITING_PROMOTION
        return GameStatus.PLAYING

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate

    @property
    def result(self) -> str | None:
        if self.is_checkmate:
            return "0-1" if self.current_player == Color.WHITE else "1-0"
        if self.is_stalemate:
            return "1/2-1/2"
        return None

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    def legal_moves_from(self, square: Square) -> list[Square]:
        if not in_bounds(*square):
            return []
        piece = self.board.piece_at(square)
        if piece is None:
            return []
        return legal_moves(self.position, piece)

    def snapshot(self) -> GameSnapshot:
        pending = self.promotion_pending.position if self.promotion_pending else None
        return GameSnapshot(
            board=tuple(tuple(row) for row in self.board.rows()),
            current_player=self.current_player.value,
            status=self.status.value,
            is_in_check=self.is_in_check,
            is_checkmate=self.is_checkmate,
            is_stalemate=self.is_stalemate,
            result=self.result,
            promotion_pending=pending,
            last_move_description=self.last_move_description,
            last_move=self.last_move,
            move_history=tuple(self.move_history),
            captured_by_white=tuple(p.value for p in self.captured_by_white),
            captured_by_black=tuple(p.value for p in self.captured_by_black),
            difficulty=self.difficulty.name,
        )

    # --- inbound operations ----------------------------------------------

    def _reject(self, error: MoveError, detail: str = "") -> bool:
        self.last_error = error
        logger.debug("Rejected request (%s) %s", error.value, detail)
        return False

    def _blocked(self) -> MoveError | None:
        if self.is_game_over:
            return MoveError.GAME_OVER
        if self.promotion_pending is not None:
            return MoveError.PROMOTION_PENDING
        return None

    def _clear_selection(self) -> None:
        self.selected_piece = None
        self.possible_moves = []

    def select_piece(self, square: Square) -> bool:
        """Select the current player's piece on ``square`` and cache its legal moves."""
        blocked = self._blocked()
        if blocked is not None:
            return self._reject(blocked)
        if not in_bounds(*square):
            return self._reject(MoveError.OUT_OF_BOUNDS, str(square))
        piece = self.board.piece_at(square)
        if piece is None:
            return self._reject(MoveError.NO_PIECE_AT_ORIGIN, str(square))
        if piece.color != self.current_player:
            return self._reject(MoveError.NOT_CURRENT_PLAYERS_TURN, str(square))
        self.selected_piece = piece
        self.possible_moves = legal_moves(self.position, piece)
        self.last_error = None
        return True

    def move_selected(self, destination: Square, promotion: PieceType | None = None) -> bool:
        """Move the selected piece; the tap-to-move half of ``select_piece``."""
        blocked = self._blocked()
        if blocked is not None:
            return self._reject(blocked)
        if self.selected_piece is None:
            return self._reject(MoveError.NO_PIECE_AT_ORIGIN, "nothing selected")
        if not in_bounds(*destination):
            return self._reject(MoveError.OUT_OF_BOUNDS, str(destination))
        if destination not in self.possible_moves:
            return self._reject(MoveError.ILLEGAL_DESTINATION, str(destination))
        if promotion is not None and promotion not in PROMOTION_CHOICES:
            return self._reject(MoveError.INVALID_PROMOTION_PIECE, promotion.value)
        self._execute(self.selected_piece.position, destination, automated=False, promotion=promotion)
        return True

    def move(self, origin: Square, destination: Square, promotion: PieceType | None = None) -> bool:
        """Validate and apply a move given as zero-based (row, col) squares.

        ``promotion`` answers the promotion choice up front; without it a
        human pawn reaching the last rank waits for ``resolve_promotion``.
        """
        if not self.select_piece(origin):
            return False
        if not self.move_selected(destination, promotion):
            self._clear_selection()
            return False
        return True

    def move_from(self, from_file: str, from_rank: int, to_file: str, to_rank: int) -> bool:
        """Voice/touch form: files "a"-"h", ranks 1-8."""
        origin = file_rank_to_square(from_file, from_rank)
        destination = file_rank_to_square(to_file, to_rank)
        if origin is None or destination is None:
            return self._reject(
                MoveError.OUT_OF_BOUNDS, f"{from_file}{from_rank}-{to_file}{to_rank}"
            )
        return self.move(origin, destination)

    def move_to_square(self, to_file: str, to_rank: int, piece_type: PieceType | None = None) -> bool:
        """Destination-only command ("e4", "knight c3").

        Succeeds only when exactly one of the current player's pieces
        (of ``piece_type``, if given) can legally reach the square.
        """
        blocked = self._blocked()
        if blocked is not None:
            return self._reject(blocked)
        destination = file_rank_to_square(to_file, to_rank)
        if destination is None:
            return self._reject(MoveError.OUT_OF_BOUNDS, f"{to_file}{to_rank}")
        candidates = [
            piece
            for piece in self.board.pieces(self.current_player)
            if (piece_type is None or piece.piece_type == piece_type)
            and destination in legal_moves(self.position, piece)
        ]
        if not candidates:
            return self._reject(MoveError.ILLEGAL_DESTINATION, f"{to_file}{to_rank}")
        if len(candidates) > 1:
            return self._reject(
                MoveError.AMBIGUOUS_TARGET,
                f"{len(candidates)} pieces can reach {to_file}{to_rank}",
            )
        return self.move(candidates[0].position, destination)

    def castle_kingside(self) -> bool:
        return self._castle(CastleSide.KINGSIDE)

    def castle_queenside(self) -> bool:
        return self._castle(CastleSide.QUEENSIDE)

    def _castle(self, side: CastleSide) -> bool:
        blocked = self._blocked()
        if blocked is not None:
            return self._reject(blocked)
        row = self.current_player.home_row
        king = self.board.piece_at((row, KING_COL))
        if king is None or king.piece_type != PieceType.KING or king.color != self.current_player:
            return self._reject(MoveError.ILLEGAL_DESTINATION, f"no king to castle {side.value}")
        king_to, _, _ = CASTLE_COLUMNS[side]
        return self.move((row, KING_COL), (row, king_to))

    def resolve_promotion(self, piece_type: PieceType) -> bool:
        """Substitute the waiting pawn and hand the turn over."""
        pending = self.promotion_pending
        if pending is None:
            return self._reject(MoveError.NO_PROMOTION_PENDING)
        if piece_type not in PROMOTION_CHOICES:
            return self._reject(MoveError.INVALID_PROMOTION_PIECE, piece_type.value)

        promote(self.position, pending.position, piece_type)
        if self.move_history:
            self.move_history[-1] += promotion_suffix(piece_type)
        self.promotion_pending = None
        self.position.to_move = self.current_player.opponent
        self.last_move_description = describe_promotion(piece_type, pending.position)
        self.last_error = None
        self._settle(events=[])
        return True

    def opponent_move(self) -> OpponentMoveResult | None:
        """Compute and play the automated side's move now.

        Plays for whichever side is to move, resolving promotions to a queen.
        Returns None when the game is over, a promotion is pending, or the
        side to move has no legal move.
        """
        blocked = self._blocked()
        if blocked is not None:
            self._reject(blocked, "opponent move")
            return None
        result = select_opponent_move(self.position, self.difficulty, self._rng)
        if result is None:
            return None
        self._execute(result.origin, result.destination, automated=True)
        return result

    def undo(self) -> bool:
        """Take back one half-move, including an automated one."""
        snapshot = self._history.pop()
        if snapshot is None:
            return False
        self.position = snapshot.position
        self.move_history = list(snapshot.move_history)
        self.captured_by_white = list(snapshot.captured_by_white)
        self.captured_by_black = list(snapshot.captured_by_black)
        self.last_move = snapshot.last_move
        self.last_move_description = snapshot.last_move_description
        self.promotion_pending = None
        self.last_error = None
        self._clear_selection()
        self._update_game_state()
        return True

    # --- execution -------------------------------------------------------

    def _execute(
        self,
        origin: Square,
        destination: Square,
        *,
        automated: bool,
        promotion: PieceType | None = None,
    ) -> None:
        mover = self.board.piece_at(origin)
        self._history.push(HistorySnapshot(
            position=self.position.copy(),
            move_history=tuple(self.move_history),
            captured_by_white=tuple(self.captured_by_white),
            captured_by_black=tuple(self.captured_by_black),
            last_move=self.last_move,
            last_move_description=self.last_move_description,
        ))
        if promotion is None and (automated or mover.color != self.human_color):
            promotion = PieceType.QUEEN

        applied = apply_move(self.position, origin, destination, promotion)
        self.board.check_integrity()

        if applied.captured is not None:
            captures = self.captured_by_white if applied.color == Color.WHITE else self.captured_by_black
            captures.append(applied.captured)

        notation = move_notation(applied.piece_type, destination)
        if applied.promotion is not None:
            notation += promotion_suffix(applied.promotion)
        self.move_history.append(notation)
        self.last_move = (origin, destination)
        self.last_move_description = describe_move(applied)
        self.last_error = None
        self._clear_selection()
        logger.debug("%s plays %s", applied.color.value, notation)

        events = [GameEvent.CAPTURE if applied.captured is not None else GameEvent.MOVE]
        if applied.awaiting_promotion:
            self.promotion_pending = PromotionPending(destination, applied.color)
            self.events.publish(events, self.snapshot())
            return
        self._settle(events)

    def _settle(self, events: list[GameEvent]) -> None:
        """Recompute check/terminal state for the side to move and publish."""
        self._update_game_state()
        self.last_move_description += describe_outcome(
            self.is_in_check, self.is_checkmate, self.is_stalemate
        )
        if self.is_checkmate:
            events.append(GameEvent.CHECKMATE)
        elif self.is_in_check:
            events.append(GameEvent.CHECK)
        if self.is_game_over:
            logger.info("Game over: %s (%s)", self.status.value, self.result)
        self.events.publish(events, self.snapshot())

    def _update_game_state(self) -> None:
        color = self.current_player
        self.is_in_check = is_in_check(self.board, color)
        can_move = has_legal_moves(self.position, color)
        self.is_checkmate = self.is_in_check and not can_move
        self.is_stalemate = not self.is_in_check and not can_move
