from __future__ import annotations

from typing import Iterable, List

from .position import Position


def was_capture(parent: Position, child: Position) -> bool:
    return len(child.piece_inventory()) < len(parent.piece_inventory())


def order_successors(parent: Position, successors: Iterable[Position]) -> List[Position]:
    """Captures first, then quiet moves, each group in generation order.

    Captures tend to be either very good or very bad, which tightens the
    alpha-beta window early.
    """
    captures: List[Position] = []
    quiet: List[Position] = []
    for child in successors:
        if was_capture(parent, child):
            captures.append(child)
        else:
            quiet.append(child)
    return captures + quiet
