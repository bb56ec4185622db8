"""Iterative-deepening minimax with alpha-beta pruning under a shared budget.

- ``AlphaBetaSearcher``: mutually recursive maximize/minimize
- ``IterativeDeepening``: runs the searcher at depth 2, 4, 6, ... and keeps
  the deepest iteration that finished inside the budget
- ``choose_move``: walks the best line back up to the root's direct child
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .budget import Budget
from .config import SearchConfig
from .evaluator import Evaluator
from .ordering import order_successors
from .position import MalformedPositionError, Position, Side


logger = logging.getLogger(__name__)

INF = float("inf")


class SearchError(Exception):
    pass


class NoCompletedIterationError(SearchError):
    """Not even the first iteration finished, so there is no trusted move."""


@dataclass(frozen=True)
class SearchResult:
    # deepest position on the best line found, not the root's child
    position: Position
    value: float


@dataclass(frozen=True)
class IterationReport:
    depth_limit: int
    value: Optional[float]
    nodes: int
    elapsed: float
    accepted: bool


class AlphaBetaSearcher:
    """Depth-limited minimax with alpha-beta pruning.

    Every generated successor is charged to the budget. Once the budget is
    exhausted no further successors are generated and each level returns the
    best result it has so far.
    """

    def __init__(
        self,
        budget: Budget,
        evaluate: Callable[[Position], float] = Evaluator.evaluate,
        order: Callable[[Position, Iterable[Position]], List[Position]] = order_successors,
    ) -> None:
        self.budget = budget
        self.evaluate = evaluate
        self.order = order
        self.nodes = 0
        self.cutoffs = 0

    def maximize(
        self,
        position: Position,
        current_depth: int,
        depth_limit: int,
        alpha: float,
        beta: float,
    ) -> SearchResult:
        if current_depth >= depth_limit or position.is_terminal():
            return SearchResult(position, self.evaluate(position))

        best = -INF
        best_result: Optional[SearchResult] = None
        for child in self._expand(position):
            child_result = self.minimize(child, current_depth + 1, depth_limit, alpha, beta)
            if child_result.value > best:
                best = child_result.value
                best_result = child_result
            if best >= beta:
                self.cutoffs += 1
                return best_result
            alpha = max(alpha, best)

        if best_result is None:
            return SearchResult(position, self.evaluate(position))
        return best_result

    def minimize(
        self,
        position: Position,
        current_depth: int,
        depth_limit: int,
        alpha: float,
        beta: float,
    ) -> SearchResult:
        if current_depth >= depth_limit or position.is_terminal():
            return SearchResult(position, self.evaluate(position))

        best = INF
        best_result: Optional[SearchResult] = None
        for child in self._expand(position):
            child_result = self.maximize(child, current_depth + 1, depth_limit, alpha, beta)
            if child_result.value < best:
                best = child_result.value
                best_result = child_result
            if best <= alpha:
                self.cutoffs += 1
                return best_result
            beta = min(beta, best)

        if best_result is None:
            return SearchResult(position, self.evaluate(position))
        return best_result

    def search(self, position: Position, depth_limit: int) -> SearchResult:
        """One full-window search from ``position`` for its side to move."""
        if position.side_to_move() is Side.MAXIMIZER:
            return self.maximize(position, 0, depth_limit, -INF, INF)
        return self.minimize(position, 0, depth_limit, -INF, INF)

    def _expand(self, position: Position) -> List[Position]:
        children, truncated = self._generate(position)
        if not children and not truncated:
            raise MalformedPositionError(
                f"non-terminal position has no legal successors: {position!r}"
            )
        return self.order(position, children)

    def _generate(self, position: Position) -> Tuple[List[Position], bool]:
        children: List[Position] = []
        successors = iter(position.legal_successors())
        while True:
            if self.budget.is_exhausted():
                return children, True
            child = next(successors, None)
            if child is None:
                return children, False
            self.budget.record_visit()
            self.nodes += 1
            if child.previous() is not position:
                raise MalformedPositionError(
                    f"successor {child!r} does not link back to its parent"
                )
            children.append(child)


def max_depth_limit_for(root: Position, config: SearchConfig) -> int:
    """Sparse endgames get a deeper ceiling."""
    if len(root.piece_inventory()) <= config.endgame_piece_threshold:
        return config.endgame_max_depth
    return config.max_depth


class IterativeDeepening:
    """Deepens two plies at a time until the ceiling or the budget is hit.

    An iteration interrupted by the budget may have seen an unrepresentative
    part of the tree, so its result is dropped and the previous one stands.
    """

    def __init__(
        self,
        budget: Budget,
        config: Optional[SearchConfig] = None,
        searcher: Optional[AlphaBetaSearcher] = None,
    ) -> None:
        self.budget = budget
        self.config = config or SearchConfig()
        self.searcher = searcher or AlphaBetaSearcher(budget)
        self.iterations: List[IterationReport] = []
        self.completed_depth: Optional[int] = None

    def search(self, root: Position) -> Optional[SearchResult]:
        self.iterations = []
        self.completed_depth = None
        max_depth_limit = max_depth_limit_for(root, self.config)
        depth_limit = self.config.initial_depth
        best_result: Optional[SearchResult] = None

        while depth_limit <= max_depth_limit and not self.budget.is_exhausted():
            nodes_before = self.searcher.nodes
            result = self.searcher.search(root, depth_limit)
            accepted = not self.budget.is_exhausted()
            report = IterationReport(
                depth_limit=depth_limit,
                value=result.value,
                nodes=self.searcher.nodes - nodes_before,
                elapsed=self.budget.elapsed,
                accepted=accepted,
            )
            self.iterations.append(report)
            logger.debug(
                "depth %d value %s nodes %d elapsed %.3fs accepted=%s",
                report.depth_limit,
                report.value,
                report.nodes,
                report.elapsed,
                report.accepted,
            )
            if not accepted:
                break
            best_result = result
            self.completed_depth = depth_limit
            depth_limit += self.config.depth_step

        return best_result


def choose_move(
    root: Position,
    budget: Optional[Budget] = None,
    config: Optional[SearchConfig] = None,
) -> Position:
    """Return the direct child of ``root`` that starts the best line found.

    Raises NoCompletedIterationError when no iteration finished in budget or
    when the root is already terminal.
    """
    config = config or SearchConfig()
    if budget is None:
        budget = Budget(config.max_nodes, config.max_duration_s)
    best_result = IterativeDeepening(budget, config).search(root)
    if best_result is None:
        raise NoCompletedIterationError(f"no search iteration completed within {budget!r}")
    return principal_child(root, best_result.position)


def principal_child(root: Position, leaf: Position) -> Position:
    """Follow ``previous()`` links from ``leaf`` up to the child of ``root``."""
    position = leaf
    if position is root:
        raise NoCompletedIterationError("root position is terminal; there is no move to choose")
    while position.previous() is not root:
        parent = position.previous()
        if parent is None:
            raise MalformedPositionError("best line does not lead back to the root")
        position = parent
    return position
