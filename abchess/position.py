from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Protocol, Sequence

import chess


# Half-moves without capture or pawn move before the game is drawn
DRAW_HALF_MOVES = 100


class MalformedPositionError(Exception):
    """A position broke its contract (e.g. terminal but still offering moves)."""


class Side(Enum):
    MAXIMIZER = "white"
    MINIMIZER = "black"

    @property
    def opponent(self) -> "Side":
        return Side.MINIMIZER if self is Side.MAXIMIZER else Side.MAXIMIZER

    @classmethod
    def from_color(cls, color: chess.Color) -> "Side":
        return cls.MAXIMIZER if color == chess.WHITE else cls.MINIMIZER


class Termination(Enum):
    NONE = "none"
    DRAW_BY_RULE = "draw"
    STALEMATE = "stalemate"
    CHECKMATE = "checkmate"


class PieceKind(Enum):
    PAWN = chess.PAWN
    KNIGHT = chess.KNIGHT
    BISHOP = chess.BISHOP
    ROOK = chess.ROOK
    QUEEN = chess.QUEEN
    KING = chess.KING

    @property
    def material(self) -> float:
        return MATERIAL_VALUES[self]


MATERIAL_VALUES: Dict[PieceKind, float] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 100,
}


@dataclass(frozen=True)
class PieceInfo:
    kind: PieceKind
    owner: Side
    file: int  # 1..8
    rank: int  # 1..8


class Position(Protocol):
    """What the search needs from a game state.

    Implementations are immutable. Children point back at their parent via
    ``previous()`` but parents never keep their children around.
    """

    def side_to_move(self) -> Side: ...

    def is_terminal(self) -> bool: ...

    def termination(self) -> Termination: ...

    def piece_inventory(self) -> Sequence[PieceInfo]: ...

    def legal_successors(self) -> Iterator["Position"]: ...

    def successor_count(self) -> int: ...

    def previous(self) -> Optional["Position"]: ...

    def remaining_half_moves_until_draw(self) -> int: ...


class ChessPosition:
    """Immutable snapshot of a python-chess board.

    The wrapped board is a private copy without move history, so repetition
    draws are not detected. Draw-by-rule covers the fifty-move counter and
    insufficient material.
    """

    __slots__ = ("_board", "_previous", "_move", "_termination", "_inventory")

    def __init__(
        self,
        board: chess.Board,
        previous: Optional["ChessPosition"] = None,
        move: Optional[chess.Move] = None,
        *,
        copy: bool = True,
    ) -> None:
        self._board = board.copy(stack=False) if copy else board
        self._previous = previous
        self._move = move
        self._termination: Optional[Termination] = None
        self._inventory: Optional[List[PieceInfo]] = None

    @classmethod
    def from_fen(cls, fen: str) -> "ChessPosition":
        return cls(chess.Board(fen))

    @property
    def move(self) -> Optional[chess.Move]:
        """The move that produced this position from ``previous()``."""
        return self._move

    def fen(self) -> str:
        return self._board.fen()

    def side_to_move(self) -> Side:
        return Side.from_color(self._board.turn)

    def termination(self) -> Termination:
        if self._termination is None:
            self._termination = self._compute_termination()
        return self._termination

    def _compute_termination(self) -> Termination:
        board = self._board
        # an exhausted draw counter wins over everything, mate included
        if board.halfmove_clock >= DRAW_HALF_MOVES:
            return Termination.DRAW_BY_RULE
        if board.is_checkmate():
            return Termination.CHECKMATE
        if board.is_stalemate():
            return Termination.STALEMATE
        if board.is_insufficient_material():
            return Termination.DRAW_BY_RULE
        return Termination.NONE

    def is_terminal(self) -> bool:
        return self.termination() is not Termination.NONE

    def piece_inventory(self) -> List[PieceInfo]:
        if self._inventory is None:
            self._inventory = [
                PieceInfo(
                    kind=PieceKind(piece.piece_type),
                    owner=Side.from_color(piece.color),
                    file=chess.square_file(square) + 1,
                    rank=chess.square_rank(square) + 1,
                )
                for square, piece in self._board.piece_map().items()
            ]
        return self._inventory

    def legal_successors(self) -> Iterator["ChessPosition"]:
        if self.is_terminal():
            return
        for move in self._board.legal_moves:
            child = self._board.copy(stack=False)
            child.push(move)
            yield ChessPosition(child, previous=self, move=move, copy=False)

    def successor_count(self) -> int:
        if self.is_terminal():
            return 0
        return self._board.legal_moves.count()

    def previous(self) -> Optional["ChessPosition"]:
        return self._previous

    def remaining_half_moves_until_draw(self) -> int:
        return max(0, DRAW_HALF_MOVES - self._board.halfmove_clock)

    def mirror(self) -> "ChessPosition":
        """Color-swapped, rank-flipped copy with no parent."""
        return ChessPosition(self._board.mirror())

    def __repr__(self) -> str:
        return f"ChessPosition({self.fen()!r})"
