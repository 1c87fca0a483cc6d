"""Rejection reasons for move requests, and the internal fault type."""

import enum


class MoveError(str, enum.Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NO_PIECE_AT_ORIGIN = "no_piece_at_origin"
    NOT_CURRENT_PLAYERS_TURN = "not_current_players_turn"
    ILLEGAL_DESTINATION = "illegal_destination"
    AMBIGUOUS_TARGET = "ambiguous_target"
    NO_PROMOTION_PENDING = "no_promotion_pending"
    PROMOTION_PENDING = "promotion_pending"
    INVALID_PROMOTION_PIECE = "invalid_promotion_piece"
    GAME_OVER = "game_over"


class InvariantViolation(AssertionError):
    """The engine reached a state the rules can never produce.

    Raised for a missing or duplicated king, or a piece whose recorded
    position disagrees with its square. Never caught inside the engine.
    """
