"""Command-line front end.

Usage:
    python -m chessgame.cli [MOVE ...] [--difficulty NAME] [--seed N]
        [--no-opponent] [--interactive]

Moves are UCI ("e2e4", "e7e8q"), castles ("O-O", "O-O-O") or
destination-only commands ("e4", "Nf3"). After each move the automated
side replies unless --no-opponent is given. Prints the final game state as
JSON, or plays an interactive game in the terminal with --interactive.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from dataclasses import asdict

from chessgame.config import Settings
from chessgame.descriptions import describe_result
from chessgame.difficulty import DIFFICULTY_PROFILES
from chessgame.game import ChessGame
from chessgame.notation import parse_piece_type, parse_uci_move

_CASTLES = {"o-o": "kingside", "0-0": "kingside", "o-o-o": "queenside", "0-0-0": "queenside"}


def apply_command(game: ChessGame, text: str) -> bool:
    """Apply one move token for the side to move. Returns False if rejected."""
    token = text.strip()
    castle = _CASTLES.get(token.lower())
    if castle == "kingside":
        return game.castle_kingside()
    if castle == "queenside":
        return game.castle_queenside()
    if len(token) in (4, 5) and token[1].isdigit():
        try:
            origin, destination, promotion = parse_uci_move(token)
        except ValueError:
            return False
        return game.move(origin, destination, promotion)
    piece_type = None
    if len(token) == 3:
        try:
            piece_type = parse_piece_type(token[0])
        except ValueError:
            return False
        token = token[1:]
    if len(token) == 2 and token[1].isdigit():
        return game.move_to_square(token[0], int(token[1]), piece_type)
    return False


def _apply(game: ChessGame, text: str) -> bool:
    """Answer a pending promotion with a piece name, otherwise play a move token."""
    if game.promotion_pending is not None:
        try:
            return game.resolve_promotion(parse_piece_type(text))
        except ValueError:
            return False
    return apply_command(game, text)


def _reply(game: ChessGame, enabled: bool) -> None:
    if not enabled or game.is_game_over or game.promotion_pending is not None:
        return
    if game.current_player != game.human_color:
        game.opponent_move()


def _build_game(args: argparse.Namespace, settings: Settings) -> ChessGame:
    seed = args.seed if args.seed is not None else settings.random_seed
    return ChessGame(
        difficulty=args.difficulty or settings.default_difficulty,
        human_color=settings.human,
        search_depth=settings.hard_search_depth,
        rng=random.Random(seed) if seed is not None else None,
    )


def _run_moves(game: ChessGame, moves: list[str], opponent: bool) -> dict:
    narration = []
    _reply(game, opponent)
    for text in moves:
        if not _apply(game, text):
            reason = game.last_error.value if game.last_error else "unrecognized"
            print(f"error: {text} rejected ({reason})", file=sys.stderr)
            sys.exit(1)
        narration.append(game.last_move_description)
        before = len(game.move_history)
        _reply(game, opponent)
        if len(game.move_history) != before:
            narration.append(game.last_move_description)
    return {"narration": narration, "state": asdict(game.snapshot())}


def _interactive(game: ChessGame, opponent: bool) -> None:
    _reply(game, opponent)
    while True:
        print(game.board)
        if game.is_game_over:
            winner = game.current_player.opponent if game.is_checkmate else None
            print(describe_result(winner))
            return
        prompt = "promote to> " if game.promotion_pending else f"{game.current_player.value}> "
        try:
            line = input(prompt).strip()
        except EOFError:
            return
        if line in ("quit", "exit"):
            return
        if line == "undo":
            game.undo()
            while game.current_player != game.human_color and game.can_undo:
                game.undo()
            _reply(game, opponent)
            continue
        if line.startswith("new"):
            parts = line.split()
            game.reset(parts[1] if len(parts) > 1 else None)
            _reply(game, opponent)
            continue
        if not _apply(game, line):
            reason = game.last_error.value if game.last_error else "unrecognized"
            print(f"Invalid move ({reason})")
            continue
        print(game.last_move_description)
        before = len(game.move_history)
        _reply(game, opponent)
        if len(game.move_history) != before:
            print(game.last_move_description)


def main(argv: list[str] | None = None) -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Play chess against the built-in opponent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("moves", nargs="*", help="Moves to play in order")
    parser.add_argument(
        "--difficulty", default=None,
        choices=list(DIFFICULTY_PROFILES),
        help=f"Opponent strength (default: {settings.default_difficulty})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the opponent")
    parser.add_argument(
        "--no-opponent", action="store_true",
        help="Do not let the automated side reply; moves alternate colors",
    )
    parser.add_argument(
        "--interactive", action="store_true",
        help="Play in the terminal after applying MOVES",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    game = _build_game(args, settings)
    opponent = not args.no_opponent

    if args.interactive:
        _run_moves(game, args.moves, opponent)
        _interactive(game, opponent)
        return

    result = _run_moves(game, args.moves, opponent)
    json.dump(result, sys.stdout, indent=2)
    print()


if __name__ == "__main__":
    main()
