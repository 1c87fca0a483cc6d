"""Opponent move selection.

Three tiers, chosen by the game's difficulty profile: a uniformly random
legal move, a capture-preferring heuristic, and a shallow negamax search
with alpha-beta pruning over material. Every tier picks from the legal-move
generator's output only, and automated promotions always become queens.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from chessgame.attacks import is_in_check
from chessgame.difficulty import DifficultyProfile
from chessgame.movegen import all_legal_moves, has_legal_moves, legal_moves
from chessgame.pieces import Color, PieceType, Square, get_piece_value
from chessgame.position import Position, apply_move

logger = logging.getLogger(__name__)

# Sentinel value for the king in capture ranking; a king is never captured.
KING_VALUE = 1000
MATE_SCORE = 100_000

Move = tuple[Square, Square]


@dataclass
class OpponentMoveResult:
    origin: Square
    destination: Square
    method: str                 # "random", "capture" or "search"
    score: int | None = None    # search score from the mover's side


def _victim_value(position: Position, move: Move) -> int:
    """Value of the piece ``move`` captures, 0 for quiet moves."""
    origin, destination = move
    board = position.board
    victim = board.piece_at(destination)
    if victim is not None:
        return get_piece_value(victim.piece_type, king=KING_VALUE)
    mover = board.piece_at(origin)
    if mover.piece_type == PieceType.PAWN and origin[1] != destination[1]:
        return get_piece_value(PieceType.PAWN)
    return 0


def select_random_move(position: Position, rng: random.Random) -> OpponentMoveResult | None:
    """Random piece among those that can move, then a random destination."""
    movable = []
    for piece in position.board.pieces(position.to_move):
        destinations = legal_moves(position, piece)
        if destinations:
            movable.append((piece.position, destinations))
    if not movable:
        return None
    origin, destinations = rng.choice(movable)
    return OpponentMoveResult(origin, rng.choice(destinations), method="random")


def select_capture_move(position: Position, rng: random.Random) -> OpponentMoveResult | None:
    """Take the most valuable piece on offer, else play a random legal move."""
    moves = all_legal_moves(position)
    if not moves:
        return None
    scored = [(move, _victim_value(position, move)) for move in moves]
    best_value = max(value for _, value in scored)
    if best_value == 0:
        origin, destination = rng.choice(moves)
        return OpponentMoveResult(origin, destination, method="random")
    captures = [move for move, value in scored if value == best_value]
    origin, destination = rng.choice(captures)
    return OpponentMoveResult(origin, destination, method="capture", score=best_value)


def evaluate_material(position: Position, color: Color) -> int:
    """Material balance from ``color``'s side. Kings are not counted."""
    score = 0
    for piece in position.board.pieces():
        value = get_piece_value(piece.piece_type, king=0)
        score += value if piece.color == color else -value
    return score


def _ordered(position: Position, moves: list[Move]) -> list[Move]:
    """Captures first, most valuable victim then least valuable attacker."""
    board = position.board

    def key(move: Move) -> tuple[int, int]:
        attacker = board.piece_at(move[0])
        return (
            -_victim_value(position, move),
            get_piece_value(attacker.piece_type, king=KING_VALUE),
        )

    return sorted(moves, key=key)


def _child(position: Position, move: Move) -> Position:
    child = position.copy()
    apply_move(child, move[0], move[1], promotion=PieceType.QUEEN)
    return child


def _terminal_score(position: Position, ply: int) -> int:
    """Score for a side to move with no legal move: mated or stalemated."""
    if is_in_check(position.board, position.to_move):
        return -MATE_SCORE + ply
    return 0


def negamax(position: Position, depth: int, alpha: int, beta: int, ply: int = 0) -> int:
    """Score ``position`` from the side to move, searching ``depth`` plies.

    Leaves are checked for mate and stalemate before falling back to
    material, so a mate delivered on the last searched ply is still seen.
    """
    if depth == 0:
        if not has_legal_moves(position):
            return _terminal_score(position, ply)
        return evaluate_material(position, position.to_move)
    moves = all_legal_moves(position)
    if not moves:
        return _terminal_score(position, ply)
    best = -MATE_SCORE - 1
    for move in _ordered(position, moves):
        score = -negamax(_child(position, move), depth - 1, -beta, -alpha, ply + 1)
        if score > best:
            best = score
        if score > alpha:
            alpha = score
        if alpha >= beta:
            break
    return best


def select_search_move(
    position: Position, depth: int, rng: random.Random
) -> OpponentMoveResult | None:
    """Root of the negamax search.

    Root moves are shuffled before ordering, so equally good quiet moves do
    not always resolve to the same choice.
    """
    moves = all_legal_moves(position)
    if not moves:
        return None
    rng.shuffle(moves)
    alpha = -MATE_SCORE - 1
    best_move, best_score = None, alpha
    for move in _ordered(position, moves):
        score = -negamax(_child(position, move), depth - 1, -MATE_SCORE - 1, -alpha, ply=1)
        if best_move is None or score > best_score:
            best_move, best_score = move, score
            alpha = max(alpha, score)
    origin, destination = best_move
    return OpponentMoveResult(origin, destination, method="search", score=best_score)


def select_opponent_move(
    position: Position,
    profile: DifficultyProfile,
    rng: random.Random | None = None,
) -> OpponentMoveResult | None:
    """Pick a move for the side to move according to ``profile``.

    Returns None when that side has no legal move.
    """
    rng = rng or random.Random()
    if profile.strategy == "search":
        result = select_search_move(position, max(1, profile.search_depth), rng)
    elif profile.strategy == "capture":
        result = select_capture_move(position, rng)
    else:
        result = select_random_move(position, rng)

    if result is not None:
        logger.info(
            "Opponent (%s) selected %s->%s via %s (score=%s)",
            profile.name, result.origin, result.destination, result.method, result.score,
        )
    return result
