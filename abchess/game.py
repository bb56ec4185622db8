from __future__ import annotations

from typing import Dict, Optional

import chess

from .evaluator import Evaluator
from .position import ChessPosition


class Game:
    """Mutable match state for the web harness.

    The search itself never sees this object; it gets an immutable
    ChessPosition snapshot from ``position()``.
    """

    def __init__(self, starting_fen: Optional[str] = None) -> None:
        self.reset(starting_fen)

    def reset(self, starting_fen: Optional[str] = None) -> None:
        self.board = chess.Board(fen=starting_fen) if starting_fen else chess.Board()
        self.last_move_was_capture = False

    def position(self) -> ChessPosition:
        return ChessPosition(self.board)

    def turn(self) -> str:
        return "white" if self.board.turn == chess.WHITE else "black"

    def is_game_over(self) -> bool:
        return self.position().is_terminal()

    def result(self) -> Optional[str]:
        position = self.position()
        if not position.is_terminal():
            return None
        value = Evaluator.evaluate(position)
        if value > 0:
            return "1-0"
        if value < 0:
            return "0-1"
        return "1/2-1/2"

    def push_uci(self, uci: str) -> chess.Move:
        """Play ``uci`` on the board; a bare pawn move to the last rank promotes to a queen."""
        try:
            move = chess.Move.from_uci(uci)
        except ValueError:
            raise ValueError(f"Illegal move: {uci}") from None

        if move not in self.board.legal_moves and move.promotion is None:
            promotion = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
            if promotion in self.board.legal_moves:
                move = promotion
        if move not in self.board.legal_moves:
            raise ValueError(f"Illegal move: {uci}")

        self.last_move_was_capture = self.board.is_capture(move)
        self.board.push(move)
        return move

    def snapshot(self) -> Dict[str, object]:
        position = self.position()
        last_uci = self.board.move_stack[-1].uci() if self.board.move_stack else None

        check_square: Optional[str] = None
        if self.board.is_check():
            king_sq = self.board.king(self.board.turn)
            if king_sq is not None:
                check_square = chess.SQUARE_NAMES[king_sq]

        return {
            "fen": self.board.fen(),
            "turn": self.turn(),
            "legal_moves": [] if position.is_terminal() else [m.uci() for m in self.board.legal_moves],
            "game_over": position.is_terminal(),
            "result": self.result(),
            "termination": position.termination().value,
            "evaluation": Evaluator.evaluate(position),
            "last_move": last_uci,
            "in_check": self.board.is_check(),
            "check_square": check_square,
            "last_move_capture": self.last_move_was_capture,
        }
