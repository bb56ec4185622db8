from __future__ import annotations

import chess
import pytest

from abchess.evaluator import Evaluator
from abchess.position import ChessPosition, MalformedPositionError, Side, Termination


WHITE_MATES = "7k/6Q1/6K1/8/8/8/8/8 b - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"


def test_start_position_is_balanced():
    assert Evaluator.evaluate(ChessPosition(chess.Board())) == 0


def test_checkmate_by_white_scores_plus_1000():
    position = ChessPosition.from_fen(WHITE_MATES)
    assert position.termination() is Termination.CHECKMATE
    assert Evaluator.evaluate(position) == 1000


def test_checkmate_by_black_scores_minus_1000():
    position = ChessPosition.from_fen(FOOLS_MATE)
    assert Evaluator.evaluate(position) == -1000


def test_checkmate_score_does_not_depend_on_how_deep_it_was_found():
    root = ChessPosition.from_fen("6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1")
    mate = next(c for c in root.legal_successors() if c.move == chess.Move.from_uci("a1a8"))
    assert Evaluator.evaluate(mate) == 1000


def test_stalemate_scores_zero():
    position = ChessPosition.from_fen(STALEMATE)
    assert position.termination() is Termination.STALEMATE
    assert Evaluator.evaluate(position) == 0


def test_bare_kings_with_exhausted_draw_counter_score_zero():
    position = ChessPosition.from_fen("8/8/4k3/8/8/4K3/8/8 w - - 100 80")
    assert position.remaining_half_moves_until_draw() == 0
    assert position.termination() is Termination.DRAW_BY_RULE
    assert Evaluator.evaluate(position) == 0


def test_fifty_move_counter_ends_game_with_material_on_board():
    position = ChessPosition.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 100 90")
    assert position.is_terminal()
    assert list(position.legal_successors()) == []
    assert Evaluator.evaluate(position) == 0


def test_doubled_pawn_penalises_only_the_rear_pawn():
    position = ChessPosition.from_fen("4k3/8/8/8/8/4P3/4P3/4K3 w - - 0 1")
    pieces = position.piece_inventory()
    rear = next(p for p in pieces if p.rank == 2)
    front = next(p for p in pieces if p.rank == 3 and p.owner is Side.MAXIMIZER)
    assert Evaluator.eval_pawn(pieces, rear) == 1
    assert Evaluator.eval_pawn(pieces, front) == 0
    assert Evaluator.pawn_penalty(position, Side.MAXIMIZER) == 0.5
    assert Evaluator.evaluate(position) == pytest.approx(1.5)


def test_black_pawns_advance_downwards():
    position = ChessPosition.from_fen("4k3/4p3/4p3/8/8/8/8/4K3 b - - 0 1")
    pieces = position.piece_inventory()
    rear = next(p for p in pieces if p.rank == 7)
    assert Evaluator.eval_pawn(pieces, rear) == 1
    assert Evaluator.pawn_penalty(position, Side.MINIMIZER) == 0.5


def test_tripled_pawns_penalise_every_pawn_but_the_front_one():
    position = ChessPosition.from_fen("4k3/8/8/8/4P3/4P3/4P3/4K3 w - - 0 1")
    assert Evaluator.pawn_penalty(position, Side.MAXIMIZER) == 1.0


def test_pawns_on_different_files_are_not_doubled():
    position = ChessPosition.from_fen("4k3/8/8/8/8/3P4/4P3/4K3 w - - 0 1")
    assert Evaluator.pawn_penalty(position, Side.MAXIMIZER) == 0


def test_enemy_pawn_in_front_does_not_count():
    position = ChessPosition.from_fen("4k3/8/8/8/4p3/8/4P3/4K3 w - - 0 1")
    assert Evaluator.pawn_penalty(position, Side.MAXIMIZER) == 0
    assert Evaluator.pawn_penalty(position, Side.MINIMIZER) == 0


def test_material_difference():
    # White is a rook up
    position = ChessPosition.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
    assert Evaluator.evaluate(position) == pytest.approx(5)


def test_mobility_is_shared_by_both_sides():
    position = ChessPosition(chess.Board())
    white = Evaluator.score(position, Side.MAXIMIZER)
    black = Evaluator.score(position, Side.MINIMIZER)
    assert white == black == pytest.approx(139 + 0.1 * 20)


@pytest.mark.parametrize(
    "fen",
    [
        chess.STARTING_FEN,
        "4k3/8/8/8/4P3/4P3/4P3/4K3 w - - 0 1",
        "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3",
        "4k3/8/8/8/8/8/8/R3K3 b - - 0 1",
        WHITE_MATES,
        FOOLS_MATE,
        STALEMATE,
    ],
)
def test_mirrored_position_negates_the_score(fen):
    position = ChessPosition.from_fen(fen)
    assert Evaluator.evaluate(position.mirror()) == pytest.approx(-Evaluator.evaluate(position))


def test_evaluate_is_deterministic():
    position = ChessPosition.from_fen("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3")
    assert Evaluator.evaluate(position) == Evaluator.evaluate(position)


class _TerminalWithMoves:
    def termination(self):
        return Termination.CHECKMATE

    def successor_count(self):
        return 3

    def side_to_move(self):
        return Side.MINIMIZER


def test_terminal_position_offering_moves_is_malformed():
    with pytest.raises(MalformedPositionError):
        Evaluator.evaluate(_TerminalWithMoves())
