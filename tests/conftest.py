from __future__ import annotations

import random
from typing import Iterator, List, Optional, Sequence, Union

from abchess.position import PieceInfo, PieceKind, Side, Termination


class Capture:
    """Marks a subtree as reached by a capturing move (one piece fewer)."""

    def __init__(self, spec: "TreeSpec") -> None:
        self.spec = spec


TreeSpec = Union[float, int, Capture, Sequence["TreeSpec"]]


class TreePosition:
    """Hand-built game tree satisfying the Position protocol.

    A number is a terminal leaf with that value. A list is an interior node
    whose horizon value is ``static`` (0 by default). Children are rebuilt on
    every ``legal_successors()`` call, like a real move generator.
    """

    def __init__(
        self,
        spec: TreeSpec,
        side: Side = Side.MAXIMIZER,
        previous: Optional["TreePosition"] = None,
        pieces: int = 32,
        static: float = 0.0,
        label: str = "root",
    ) -> None:
        self.spec = spec
        self.side = side
        self._previous = previous
        self.pieces = pieces
        self.static = static
        self.label = label

    @property
    def value(self) -> float:
        if self.is_terminal():
            return float(self.spec)
        return self.static

    def side_to_move(self) -> Side:
        return self.side

    def is_terminal(self) -> bool:
        return isinstance(self.spec, (int, float))

    def termination(self) -> Termination:
        return Termination.DRAW_BY_RULE if self.is_terminal() else Termination.NONE

    def piece_inventory(self) -> List[PieceInfo]:
        return [PieceInfo(PieceKind.PAWN, Side.MAXIMIZER, 1, 2)] * self.pieces

    def legal_successors(self) -> Iterator["TreePosition"]:
        if self.is_terminal():
            return
        for index, child in enumerate(self.spec):
            pieces = self.pieces
            if isinstance(child, Capture):
                child = child.spec
                pieces -= 1
            yield TreePosition(
                child,
                side=self.side.opponent,
                previous=self,
                pieces=pieces,
                label=f"{self.label}.{index}",
            )

    def successor_count(self) -> int:
        return 0 if self.is_terminal() else len(self.spec)

    def previous(self) -> Optional["TreePosition"]:
        return self._previous

    def remaining_half_moves_until_draw(self) -> int:
        return 100

    def __repr__(self) -> str:
        return f"TreePosition({self.label})"


def tree_value(position: TreePosition) -> float:
    return position.value


def minimax(position: TreePosition, depth: int, depth_limit: int) -> float:
    """Plain minimax with the same horizon rule as the searcher."""
    if depth >= depth_limit or position.is_terminal():
        return position.value
    values = [minimax(child, depth + 1, depth_limit) for child in position.legal_successors()]
    if position.side_to_move() is Side.MAXIMIZER:
        return max(values)
    return min(values)


def random_tree(rng: random.Random, depth: int, branching: int = 3) -> TreeSpec:
    if depth == 0:
        return rng.randint(-20, 20)
    children: List[TreeSpec] = []
    for _ in range(rng.randint(1, branching)):
        subtree = random_tree(rng, depth - 1, branching)
        children.append(Capture(subtree) if rng.random() < 0.3 else subtree)
    return children
