"""Budgeted adversarial search for chess-like games.

Modules:
- position: Position contract and the python-chess adapter
- budget: node/time ceilings shared across one move decision
- evaluator: material + pawn structure + mobility heuristic
- ordering: capture-first successor ordering
- search: alpha-beta, iterative deepening and move selection
- agent: python-chess front end with fallback move policy
- game: match state for the web app
"""

from .agent import AIPlayer
from .budget import Budget
from .config import SearchConfig
from .evaluator import Evaluator
from .game import Game
from .position import ChessPosition, MalformedPositionError, Position, Side, Termination
from .search import (
    AlphaBetaSearcher,
    IterativeDeepening,
    NoCompletedIterationError,
    SearchResult,
    choose_move,
)

__all__ = [
    "AIPlayer",
    "AlphaBetaSearcher",
    "Budget",
    "ChessPosition",
    "Evaluator",
    "Game",
    "IterativeDeepening",
    "MalformedPositionError",
    "NoCompletedIterationError",
    "Position",
    "SearchConfig",
    "SearchResult",
    "Side",
    "Termination",
    "choose_move",
]
