"""Session registry that sequences a human move and the automated reply.

The engine never replies on its own; this layer decides when the
automated side moves (immediately after the human's move settles).
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import asdict

from chessgame.config import Settings
from chessgame.difficulty import get_profile
from chessgame.game import ChessGame
from chessgame.notation import FILES, parse_piece_type, parse_square, parse_uci_move
from chessgame.position import CastleSide

logger = logging.getLogger(__name__)


class GameManager:
    def __init__(self, settings: Settings | None = None):
        self._settings = settings or Settings()
        self._sessions: dict[str, ChessGame] = {}

    def new_game(self, difficulty: str | None = None) -> tuple[str, dict]:
        """Create a new game session. Returns (session_id, state)."""
        settings = self._settings
        session_id = str(uuid.uuid4())
        rng = random.Random(settings.random_seed) if settings.random_seed is not None else None
        game = ChessGame(
            difficulty=get_profile(difficulty or settings.default_difficulty).name,
            human_color=settings.human,
            search_depth=settings.hard_search_depth,
            rng=rng,
        )
        self._sessions[session_id] = game
        logger.info("New game %s (difficulty=%s)", session_id, game.difficulty.name)
        # Automated side opens when the person plays black.
        self._reply(game)
        return session_id, self.state(game)

    def get_game(self, session_id: str) -> ChessGame | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> ChessGame:
        game = self._sessions.get(session_id)
        if game is None:
            raise KeyError(f"Session not found: {session_id}")
        return game

    @staticmethod
    def state(game: ChessGame) -> dict:
        return asdict(game.snapshot())

    def _reply(self, game: ChessGame) -> dict | None:
        """Let the automated side move if it is its turn and the game goes on."""
        if game.is_game_over or game.promotion_pending is not None:
            return None
        if game.current_player == game.human_color:
            return None
        result = game.opponent_move()
        if result is None:
            return None
        return {
            "origin": result.origin,
            "destination": result.destination,
            "notation": game.move_history[-1],
            "description": game.last_move_description,
            "method": result.method,
        }

    def _finish(self, game: ChessGame, player_description: str) -> dict:
        reply = self._reply(game)
        return {
            "player_move": player_description,
            "opponent_move": reply,
            "state": self.state(game),
        }

    def make_move(self, session_id: str, move_uci: str) -> dict:
        """Apply a human move given in UCI form, then the automated reply."""
        game = self._require(session_id)
        origin, destination, promotion = parse_uci_move(move_uci)
        if not game.move(origin, destination, promotion):
            raise ValueError(f"Illegal move {move_uci}: {game.last_error.value}")
        return self._finish(game, game.last_move_description)

    def move_to_square(self, session_id: str, square: str, piece: str | None = None) -> dict:
        game = self._require(session_id)
        row, col = parse_square(square)
        piece_type = parse_piece_type(piece) if piece else None
        if not game.move_to_square(FILES[col], row + 1, piece_type):
            raise ValueError(f"Cannot move to {square}: {game.last_error.value}")
        return self._finish(game, game.last_move_description)

    def castle(self, session_id: str, side: str) -> dict:
        game = self._require(session_id)
        castle_side = CastleSide(side)
        ok = game.castle_kingside() if castle_side is CastleSide.KINGSIDE else game.castle_queenside()
        if not ok:
            raise ValueError(f"Cannot castle {side}: {game.last_error.value}")
        return self._finish(game, game.last_move_description)

    def promote(self, session_id: str, piece: str) -> dict:
        game = self._require(session_id)
        if not game.resolve_promotion(parse_piece_type(piece)):
            raise ValueError(f"Cannot promote: {game.last_error.value}")
        return self._finish(game, game.last_move_description)

    def undo(self, session_id: str) -> dict:
        """Take back moves until it is the person's turn again.

        Rewinding past the automated opening leaves the automated side to
        move, so it plays a fresh opening move.
        """
        game = self._require(session_id)
        if not game.undo():
            raise ValueError("Nothing to undo")
        while game.current_player != game.human_color and game.can_undo:
            game.undo()
        self._reply(game)
        return self.state(game)

    def reset(self, session_id: str, difficulty: str | None = None) -> dict:
        game = self._require(session_id)
        game.reset(difficulty)
        self._reply(game)
        return self.state(game)

    def close(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
