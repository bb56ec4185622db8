from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import chess

from .budget import Budget
from .config import SearchConfig
from .position import ChessPosition
from .search import IterativeDeepening, NoCompletedIterationError, principal_child


logger = logging.getLogger(__name__)


@dataclass
class MoveDecision:
    move: Optional[chess.Move]
    value: Optional[float]
    depth: Optional[int]
    nodes: int
    elapsed: float
    fallback: bool = False


class AIPlayer:
    """Plays python-chess boards with budgeted iterative-deepening alpha-beta.

    A fresh Budget is created for every move decision.
    """

    def __init__(self, config: Optional[SearchConfig] = None) -> None:
        self.config = config or SearchConfig()
        self.last_decision: Optional[MoveDecision] = None

    def choose_move(self, board: chess.Board) -> Optional[str]:
        """Return the chosen move in UCI notation, or None if the game is over."""
        decision = self.decide(board)
        return decision.move.uci() if decision.move else None

    def decide(self, board: chess.Board) -> MoveDecision:
        budget = Budget(self.config.max_nodes, self.config.max_duration_s)
        root = ChessPosition(board)
        if root.is_terminal():
            decision = MoveDecision(None, None, None, 0, budget.elapsed)
            self.last_decision = decision
            return decision

        driver = IterativeDeepening(budget, self.config)
        try:
            child = self._select(root, driver)
            move = child.move
            value = self._accepted_value(driver)
            fallback = False
        except NoCompletedIterationError as exc:
            logger.warning("Falling back to a quick move: %s", exc)
            move = self._choose_quick_fallback_move(board)
            value = None
            fallback = True

        decision = MoveDecision(
            move=move,
            value=value,
            depth=driver.completed_depth,
            nodes=budget.visited,
            elapsed=budget.elapsed,
            fallback=fallback,
        )
        logger.info(
            "chose %s value=%s depth=%s nodes=%d elapsed=%.2fs",
            move.uci() if move else None,
            value,
            decision.depth,
            decision.nodes,
            decision.elapsed,
        )
        self.last_decision = decision
        return decision

    def _select(self, root: ChessPosition, driver: IterativeDeepening) -> ChessPosition:
        best = driver.search(root)
        if best is None:
            raise NoCompletedIterationError("no search iteration completed within budget")
        return principal_child(root, best.position)

    @staticmethod
    def _accepted_value(driver: IterativeDeepening) -> Optional[float]:
        for report in reversed(driver.iterations):
            if report.accepted:
                return report.value
        return None

    def _choose_quick_fallback_move(self, board: chess.Board) -> Optional[chess.Move]:
        """Pick a quick legal move without deep search.

        Preference: any capture; otherwise the first legal move.
        """
        for move in board.legal_moves:
            if board.is_capture(move):
                return move
        for move in board.legal_moves:
            return move
        return None
