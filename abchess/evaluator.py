from __future__ import annotations

from typing import Sequence

from .position import (
    MalformedPositionError,
    PieceInfo,
    PieceKind,
    Position,
    Side,
    Termination,
)


class Evaluator:
    """Static evaluation for positions.

    Positive scores favor the maximizing side (White), negative scores the
    minimizing side. Units are pawns; checkmates score +/-1000.
    """

    CHECKMATE_SCORE = 1000.0
    DRAW_SCORE = 0.0
    DOUBLED_PAWN_PENALTY = 0.5
    MOBILITY_WEIGHT = 0.1

    @classmethod
    def evaluate(cls, position: Position) -> float:
        termination = position.termination()
        if termination is not Termination.NONE:
            if position.successor_count() > 0:
                raise MalformedPositionError(
                    f"terminal position ({termination.value}) still offers successors"
                )
            if termination is Termination.CHECKMATE:
                # the side to move is the one that got mated
                if position.side_to_move() is Side.MINIMIZER:
                    return cls.CHECKMATE_SCORE
                return -cls.CHECKMATE_SCORE
            return cls.DRAW_SCORE

        return cls.score(position, Side.MAXIMIZER) - cls.score(position, Side.MINIMIZER)

    @classmethod
    def score(cls, position: Position, side: Side) -> float:
        """Material of ``side`` minus pawn-structure penalties, plus mobility.

        Mobility counts the replies available in ``position`` regardless of
        ``side``, so it is the same for both players.
        """
        pieces = position.piece_inventory()
        total = 0.0
        for piece in pieces:
            if piece.owner is not side:
                continue
            total += piece.kind.material
            if piece.kind is PieceKind.PAWN:
                total -= cls.DOUBLED_PAWN_PENALTY * cls.eval_pawn(pieces, piece)
        return total + cls.MOBILITY_WEIGHT * position.successor_count()

    @classmethod
    def pawn_penalty(cls, position: Position, side: Side) -> float:
        pieces = position.piece_inventory()
        return cls.DOUBLED_PAWN_PENALTY * sum(
            cls.eval_pawn(pieces, piece)
            for piece in pieces
            if piece.owner is side and piece.kind is PieceKind.PAWN
        )

    @staticmethod
    def eval_pawn(pieces: Sequence[PieceInfo], pawn: PieceInfo) -> int:
        """1 if ``pawn`` is doubled, else 0.

        A pawn counts as doubled when a friendly pawn stands further up the
        same file, so in a stack every pawn but the most advanced one counts.
        """
        return 1 if is_doubled_pawn(pieces, pawn) else 0


def is_doubled_pawn(pieces: Sequence[PieceInfo], pawn: PieceInfo) -> bool:
    for other in pieces:
        if other.kind is not PieceKind.PAWN or other.owner is not pawn.owner:
            continue
        if other.file != pawn.file:
            continue
        # White advances to higher ranks, Black to lower ones
        if pawn.owner is Side.MAXIMIZER and other.rank > pawn.rank:
            return True
        if pawn.owner is Side.MINIMIZER and other.rank < pawn.rank:
            return True
    return False
