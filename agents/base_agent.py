"""
Base agent classes for the grid pursuit game.

This module defines the abstract base class for seeker agents and the movement
history they consult. All agents must inherit from SeekerAgent and implement
choose_move.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import List, Optional

from GridPursuit.core.game import GameState, PursuitGame
from GridPursuit.core.grid import Move, Position
from GridPursuit.core.random_source import RandomSource, ensure_rng
from .heuristics import GameHeuristics, HeuristicWeights

HISTORY_LENGTH = 5


class SeekerHistory:
    """
    The seeker's current position plus the last few positions it left.

    The stuck counter is maintained by the game stepper for oscillation
    detection.
    """

    def __init__(self, start: Position, length: int = HISTORY_LENGTH):
        self._current = tuple(start)
        self._earlier = deque(maxlen=length)
        self.stuck_counter = 0

    def record(self, position: Position):
        self._earlier.append(self._current)
        self._current = tuple(position)

    @property
    def current(self) -> Position:
        return self._current

    @property
    def previous(self) -> Optional[Position]:
        return self._earlier[-1] if self._earlier else None

    @property
    def two_back(self) -> Optional[Position]:
        return self._earlier[-2] if len(self._earlier) >= 2 else None

    def recent_positions(self) -> List[Position]:
        """Up to the last five positions before the current one, oldest first"""
        return list(self._earlier)

    def is_oscillating(self) -> bool:
        """True when the seeker is back where it stood two moves ago"""
        return self.two_back is not None and self.current == self.two_back


class SeekerAgent(ABC):
    """Abstract base class for all seeker agents"""

    def __init__(self, weights: HeuristicWeights = None, rng: Optional[RandomSource] = None):
        self.heuristics = GameHeuristics(weights)
        self.rng = ensure_rng(rng)

    @property
    def weights(self) -> HeuristicWeights:
        return self.heuristics.weights

    def choose_move(self, game: PursuitGame, state: GameState,
                    history: Optional[SeekerHistory] = None) -> Move:
        """
        Make a move based on the current game state.

        Args:
            game: Game rules
            state: Current state
            history: Seeker's recent positions (a fresh one if omitted)

        Returns:
            The chosen move, or a Stop move if the seeker has no legal moves
        """
        moves = game.legal_moves(state, 0)
        if not moves:
            return Move.stop(state.seeker)
        if history is None:
            history = SeekerHistory(state.seeker)
        return self.select_move(game, state, moves, history)

    @abstractmethod
    def select_move(self, game: PursuitGame, state: GameState, moves: List[Move],
                    history: SeekerHistory) -> Move:
        """Pick one of a non-empty list of legal moves"""
        pass
