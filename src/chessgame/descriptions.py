"""Natural-language move descriptions for the narration layer."""

from __future__ import annotations

from chessgame.notation import square_name
from chessgame.pieces import Color, PieceType, Square
from chessgame.position import AppliedMove


def describe_move(move: AppliedMove) -> str:
    """'Knight to f3', 'Bishop takes knight on c6', 'White castles kingside'."""
    if move.castle is not None:
        return f"{move.color.value.capitalize()} castles {move.castle.value}"
    piece = move.piece_type.value.capitalize()
    if move.captured is not None:
        text = f"{piece} takes {move.captured.value} on {square_name(move.destination)}"
        if move.en_passant_capture:
            text += " en passant"
    else:
        text = f"{piece} to {square_name(move.destination)}"
    if move.promotion is not None:
        text += f", promoted to {move.promotion.value}"
    return text


def describe_promotion(piece_type: PieceType, square: Square) -> str:
    return f"Pawn promoted to {piece_type.value} at {square_name(square)}"


def describe_outcome(is_check: bool, is_checkmate: bool, is_stalemate: bool) -> str:
    """Suffix appended once terminal evaluation has run."""
    if is_checkmate:
        return ", checkmate"
    if is_stalemate:
        return ", stalemate"
    if is_check:
        return ", check"
    return ""


def describe_result(winner: Color | None) -> str:
    if winner is None:
        return "Draw by stalemate"
    return f"{winner.value.capitalize()} wins by checkmate"
