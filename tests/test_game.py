"""ChessGame: move requests, promotion, terminal states, undo and events."""

import pytest

from chessgame.errors import MoveError
from chessgame.events import GameEvent
from chessgame.game import ChessGame, GameStatus, PromotionPending
from chessgame.pieces import Color, PieceType
from chessgame.position import EnPassantTarget

from conftest import game_from_fen, sq


def _play(game: ChessGame, *moves: str) -> None:
    for move in moves:
        assert game.move(sq(move[:2]), sq(move[2:])), move


class TestOpening:
    def test_initial_state(self, game):
        assert game.current_player == Color.WHITE
        assert game.status == GameStatus.PLAYING
        assert not game.is_in_check
        assert game.move_history == []
        assert game.last_move is None
        assert not game.can_undo

    def test_pawn_double_step(self, game):
        assert game.move((1, 4), (3, 4))
        assert game.board.piece_at((3, 4)).piece_type == PieceType.PAWN
        assert game.board.piece_at((1, 4)) is None
        assert game.en_passant_target == EnPassantTarget((3, 4), Color.WHITE)
        assert game.current_player == Color.BLACK
        assert game.move_history == ["e4"]
        assert game.last_move == ((1, 4), (3, 4))
        assert game.last_move_description == "Pawn to e4"

    def test_reply_clears_en_passant_target(self, game):
        _play(game, "e2e4", "e7e5")
        assert game.en_passant_target == EnPassantTarget(sq("e5"), Color.BLACK)
        _play(game, "g1f3")
        assert game.en_passant_target is None

    def test_knight_notation_and_description(self, game):
        _play(game, "g1f3")
        assert game.move_history == ["Nf3"]
        assert game.last_move_description == "Knight to f3"

    def test_capture_is_recorded(self, game):
        _play(game, "e2e4", "d7d5", "e4d5")
        assert game.captured_by_white == [PieceType.PAWN]
        assert game.captured_by_black == []
        assert game.last_move_description == "Pawn takes pawn on d5"

    def test_move_from_voice_coordinates(self, game):
        assert game.move_from("g", 1, "f", 3)
        assert game.board.piece_at(sq("f3")).piece_type == PieceType.KNIGHT

    def test_move_from_rejects_off_board(self, game):
        assert not game.move_from("i", 2, "e", 4)
        assert game.last_error == MoveError.OUT_OF_BOUNDS
        assert not game.move_from("e", 2, "e", 9)
        assert game.last_error == MoveError.OUT_OF_BOUNDS


class TestSelection:
    def test_select_caches_legal_moves(self, game):
        assert game.select_piece(sq("g1"))
        assert game.selected_piece.piece_type == PieceType.KNIGHT
        assert set(game.possible_moves) == {sq("f3"), sq("h3")}

    def test_move_selected(self, game):
        game.select_piece(sq("b1"))
        assert game.move_selected(sq("c3"))
        assert game.selected_piece is None
        assert game.possible_moves == []
        assert game.current_player == Color.BLACK

    def test_move_selected_without_selection(self, game):
        assert not game.move_selected(sq("e4"))
        assert game.last_error == MoveError.NO_PIECE_AT_ORIGIN

    def test_failed_move_clears_selection(self, game):
        assert not game.move(sq("e2"), sq("e5"))
        assert game.selected_piece is None

    def test_reselect_replaces_selection(self, game):
        game.select_piece(sq("g1"))
        game.select_piece(sq("e2"))
        assert set(game.possible_moves) == {sq("e3"), sq("e4")}


class TestRejections:
    @pytest.mark.parametrize(
        "origin, destination, error",
        [
            ((8, 0), (7, 0), MoveError.OUT_OF_BOUNDS),
            ((-1, 0), (0, 0), MoveError.OUT_OF_BOUNDS),
            ((3, 3), (4, 3), MoveError.NO_PIECE_AT_ORIGIN),
            ((6, 4), (4, 4), MoveError.NOT_CURRENT_PLAYERS_TURN),
            ((1, 4), (4, 4), MoveError.ILLEGAL_DESTINATION),
            ((0, 0), (2, 0), MoveError.ILLEGAL_DESTINATION),
            ((1, 4), (8, 4), MoveError.OUT_OF_BOUNDS),
        ],
    )
    def test_rejected_move_leaves_state_unchanged(self, game, origin, destination, error):
        before = game.snapshot()
        assert not game.move(origin, destination)
        assert game.last_error == error
        assert game.snapshot() == before
        assert not game.can_undo

    def test_success_clears_last_error(self, game):
        game.move(sq("e2"), sq("e5"))
        assert game.last_error is not None
        _play(game, "e2e4")
        assert game.last_error is None


class TestDestinationOnly:
    def test_unique_pawn(self, game):
        assert game.move_to_square("e", 4)
        assert game.board.piece_at(sq("e4")).piece_type == PieceType.PAWN

    def test_unique_knight_with_type(self, game):
        assert game.move_to_square("f", 3, PieceType.KNIGHT)
        assert game.move_history == ["Nf3"]

    def test_no_piece_can_reach(self, game):
        assert not game.move_to_square("e", 5)
        assert game.last_error == MoveError.ILLEGAL_DESTINATION

    def test_type_filter_excludes_other_pieces(self, game):
        assert not game.move_to_square("e", 4, PieceType.KNIGHT)
        assert game.last_error == MoveError.ILLEGAL_DESTINATION

    def test_ambiguous_target_changes_nothing(self):
        game = game_from_fen("4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1")
        before = game.snapshot()
        assert not game.move_to_square("d", 2)
        assert game.last_error == MoveError.AMBIGUOUS_TARGET
        assert not game.move_to_square("d", 2, PieceType.KNIGHT)
        assert game.last_error == MoveError.AMBIGUOUS_TARGET
        assert game.snapshot() == before

    def test_off_board_destination(self, game):
        assert not game.move_to_square("z", 4)
        assert game.last_error == MoveError.OUT_OF_BOUNDS


PROMOTION_FEN = "k7/4P3/8/8/8/8/8/4K3 w - - 0 1"


class TestPromotion:
    def test_reaching_last_rank_waits_for_choice(self):
        game = game_from_fen(PROMOTION_FEN)
        assert game.move(sq("e7"), sq("e8"))
        assert game.promotion_pending == PromotionPending(sq("e8"), Color.WHITE)
        assert game.status == GameStatus.AWAITING_PROMOTION
        assert game.current_player == Color.WHITE
        assert game.board.piece_at(sq("e8")).piece_type == PieceType.PAWN

    def test_other_requests_blocked_while_pending(self):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        assert not game.move(sq("e1"), sq("d1"))
        assert game.last_error == MoveError.PROMOTION_PENDING
        assert not game.castle_kingside()
        assert game.last_error == MoveError.PROMOTION_PENDING
        assert game.opponent_move() is None

    def test_resolve_to_queen(self):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        assert game.resolve_promotion(PieceType.QUEEN)
        queen = game.board.piece_at(sq("e8"))
        assert queen.piece_type == PieceType.QUEEN
        assert queen.color == Color.WHITE
        assert game.current_player == Color.BLACK
        assert game.promotion_pending is None
        assert game.move_history == ["e8=Q"]
        assert game.is_in_check
        assert game.last_move_description == "Pawn promoted to queen at e8, check"

    def test_underpromotion(self):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        assert game.resolve_promotion(PieceType.KNIGHT)
        assert game.board.piece_at(sq("e8")).piece_type == PieceType.KNIGHT
        assert game.move_history == ["e8=N"]
        assert not game.is_in_check

    def test_choice_given_up_front(self):
        game = game_from_fen(PROMOTION_FEN)
        assert game.move(sq("e7"), sq("e8"), PieceType.ROOK)
        assert game.promotion_pending is None
        assert game.board.piece_at(sq("e8")).piece_type == PieceType.ROOK
        assert game.current_player == Color.BLACK
        assert game.last_move_description == "Pawn to e8, promoted to rook, check"

    @pytest.mark.parametrize("piece", [PieceType.KING, PieceType.PAWN])
    def test_invalid_piece_rejected(self, piece):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        assert not game.resolve_promotion(piece)
        assert game.last_error == MoveError.INVALID_PROMOTION_PIECE
        assert game.promotion_pending is not None

    def test_invalid_piece_up_front(self):
        game = game_from_fen(PROMOTION_FEN)
        assert not game.move(sq("e7"), sq("e8"), PieceType.KING)
        assert game.last_error == MoveError.INVALID_PROMOTION_PIECE
        assert game.board.piece_at(sq("e7")) is not None

    def test_nothing_to_resolve(self, game):
        assert not game.resolve_promotion(PieceType.QUEEN)
        assert game.last_error == MoveError.NO_PROMOTION_PENDING

    def test_capture_promotion(self):
        game = game_from_fen("k2r4/4P3/8/8/8/8/8/4K3 w - - 0 1")
        assert game.move(sq("e7"), sq("d8"), PieceType.QUEEN)
        assert game.captured_by_white == [PieceType.ROOK]
        assert game.move_history == ["d8=Q"]

    def test_automated_side_promotes_to_queen(self):
        game = game_from_fen("4k3/8/8/8/8/8/p7/4K3 b - - 0 1")
        assert game.move(sq("a2"), sq("a1"))
        assert game.promotion_pending is None
        assert game.board.piece_at(sq("a1")).piece_type == PieceType.QUEEN
        assert game.current_player == Color.WHITE

    def test_undo_while_pending(self):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        assert game.undo()
        assert game.promotion_pending is None
        assert game.board.piece_at(sq("e7")).piece_type == PieceType.PAWN
        assert game.move_history == []


class TestTerminal:
    def test_fools_mate(self, game):
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        assert game.is_checkmate
        assert game.is_in_check
        assert not game.is_stalemate
        assert game.current_player == Color.WHITE
        assert game.status == GameStatus.CHECKMATE
        assert game.result == "0-1"
        assert game.last_move_description == "Queen to h4, checkmate"

    def test_no_moves_after_checkmate(self, game):
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        assert not game.move(sq("a2"), sq("a3"))
        assert game.last_error == MoveError.GAME_OVER
        assert not game.select_piece(sq("a2"))
        assert not game.move_to_square("a", 3)
        assert game.opponent_move() is None

    def test_stalemate(self):
        game = game_from_fen("k7/8/8/1Q6/8/8/8/K7 w - - 0 1")
        _play(game, "b5b6")
        assert game.is_stalemate
        assert not game.is_checkmate
        assert not game.is_in_check
        assert game.status == GameStatus.STALEMATE
        assert game.result == "1/2-1/2"
        assert game.last_move_description == "Queen to b6, stalemate"

    def test_check_is_not_mate(self, game):
        _play(game, "e2e4", "f7f6", "d1h5")
        assert game.is_in_check
        assert not game.is_checkmate
        assert game.last_move_description == "Queen to h5, check"

    def test_undo_out_of_checkmate(self, game):
        _play(game, "f2f3", "e7e5", "g2g4", "d8h4")
        assert game.undo()
        assert not game.is_checkmate
        assert game.current_player == Color.BLACK


class TestUndo:
    def test_nothing_to_undo(self, game):
        assert not game.undo()

    def test_full_rewind_restores_start(self, game):
        start = game.snapshot()
        moves = ["e2e4", "d7d5", "e4d5", "g8f6", "f1b5", "c7c6", "d5c6", "d8d7"]
        _play(game, *moves)
        for _ in moves:
            assert game.undo()
        assert game.snapshot() == start
        assert game.board == ChessGame().board
        assert game.castling == ChessGame().castling
        assert not game.can_undo

    def test_undo_one_half_move(self, game):
        _play(game, "e2e4", "e7e5")
        assert game.undo()
        assert game.current_player == Color.BLACK
        assert game.move_history == ["e4"]
        assert game.en_passant_target == EnPassantTarget(sq("e4"), Color.WHITE)
        assert game.last_move == (sq("e2"), sq("e4"))
        assert game.last_move_description == "Pawn to e4"

    def test_undo_restores_moved_flag(self, game):
        _play(game, "g1f3")
        game.undo()
        assert game.board.piece_at(sq("g1")).has_moved is False

    def test_undo_restores_captures(self, game):
        _play(game, "e2e4", "d7d5", "e4d5")
        game.undo()
        assert game.captured_by_white == []
        assert game.board.piece_at(sq("d5")).color == Color.BLACK


class TestReset:
    def test_reset_clears_everything(self, game):
        _play(game, "e2e4", "e7e5", "g1f3")
        game.select_piece(sq("b8"))
        game.reset()
        assert game.board == ChessGame().board
        assert game.move_history == []
        assert game.selected_piece is None
        assert game.en_passant_target is None
        assert not game.can_undo
        assert game.current_player == Color.WHITE

    def test_reset_changes_difficulty(self, game):
        game.reset("hard")
        assert game.difficulty.name == "hard"
        game.reset()
        assert game.difficulty.name == "hard"


class TestSnapshot:
    def test_board_letters_rank_one_first(self, game):
        snap = game.snapshot()
        assert snap.board[0] == ("R", "N", "B", "Q", "K", "B", "N", "R")
        assert snap.board[1] == ("P",) * 8
        assert snap.board[7][4] == "k"
        assert snap.board[3] == (None,) * 8

    def test_fields_after_move(self, game):
        _play(game, "e2e4")
        snap = game.snapshot()
        assert snap.current_player == "black"
        assert snap.status == "playing"
        assert snap.move_history == ("e4",)
        assert snap.last_move == ((1, 4), (3, 4))
        assert snap.difficulty == "easy"
        assert snap.result is None

    def test_pending_promotion_square(self):
        game = game_from_fen(PROMOTION_FEN)
        game.move(sq("e7"), sq("e8"))
        snap = game.snapshot()
        assert snap.promotion_pending == sq("e8")
        assert snap.status == "awaiting_promotion"


class TestEvents:
    def _collect(self, game):
        seen = []
        unsubscribe = game.subscribe(lambda event, snap: seen.append((event, snap)))
        return seen, unsubscribe

    def test_move_event_with_settled_snapshot(self, game):
        seen, _ = self._collect(game)
        _play(game, "e2e4")
        assert [e for e, _ in seen] == [GameEvent.MOVE]
        assert seen[0][1].current_player == "black"

    def test_capture_event(self, game):
        _play(game, "e2e4", "d7d5")
        seen, _ = self._collect(game)
        _play(game, "e4d5")
        assert [e for e, _ in seen] == [GameEvent.CAPTURE]

    def test_check_event(self, game):
        _play(game, "e2e4", "f7f6")
        seen, _ = self._collect(game)
        _play(game, "d1h5")
        assert [e for e, _ in seen] == [GameEvent.MOVE, GameEvent.CHECK]

    def test_checkmate_event(self, game):
        _play(game, "f2f3", "e7e5", "g2g4")
        seen, _ = self._collect(game)
        _play(game, "d8h4")
        assert [e for e, _ in seen] == [GameEvent.MOVE, GameEvent.CHECKMATE]
        assert seen[-1][1].is_checkmate

    def test_rejected_move_publishes_nothing(self, game):
        seen, _ = self._collect(game)
        game.move(sq("e2"), sq("e5"))
        assert seen == []

    def test_unsubscribe(self, game):
        seen, unsubscribe = self._collect(game)
        unsubscribe()
        _play(game, "e2e4")
        assert seen == []

    def test_failing_listener_does_not_break_game(self, game):
        def boom(event, snap):
            raise RuntimeError("speaker unplugged")

        game.subscribe(boom)
        seen, _ = self._collect(game)
        _play(game, "e2e4")
        assert game.current_player == Color.BLACK
        assert [e for e, _ in seen] == [GameEvent.MOVE]
