"""
Heuristic evaluation of grid pursuit game states.

This module provides the leaf evaluation used by the game-tree agents and the
one-ply evaluation used by the reflex agent. All weights are carried in a
HeuristicWeights value that is passed in explicitly.
"""

import math
from dataclasses import dataclass, asdict, fields
from typing import Dict, Iterable, List, Optional

from GridPursuit.core.game import GameState
from GridPursuit.core.grid import Position, manhattan

# Fraction of revisit_penalty charged per revisit by the reflex evaluation
REFLEX_REVISIT_SCALE = 0.1


@dataclass(frozen=True)
class HeuristicWeights:
    """Weights of every term in the state evaluation"""
    score_weight: float = 1
    food_left_penalty: float = 5000
    closest_food_weight: float = 120
    capsule_left_penalty: float = 800
    closest_capsule_weight: float = 1500
    scared_ghost_weight: float = 1200
    ghost_danger_penalty: float = 2000
    ghost_danger_threshold: int = 2
    revisit_penalty: float = 5000

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'HeuristicWeights':
        """
        Build weights from a dict, filling unspecified weights with defaults.

        Args:
            data: Weight values keyed by snake_case or camelCase name

        Returns:
            HeuristicWeights instance

        Raises:
            ValueError: If a key does not name a weight
        """
        names = {f.name for f in fields(cls)}
        aliases = {_camel_case(name): name for name in names}
        values = {}
        for key, value in data.items():
            name = key if key in names else aliases.get(key)
            if name is None:
                raise ValueError(f"Unknown heuristic weight: {key}")
            values[name] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _camel_case(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _closest(origin: Position, targets: Iterable[Position]) -> Optional[int]:
    distances = [manhattan(origin, t) for t in targets]
    return min(distances) if distances else None


class GameHeuristics:
    """
    Heuristic calculator for grid pursuit game states.

    Distances are Manhattan distances from the seeker's cell.
    """

    def __init__(self, weights: HeuristicWeights = None):
        """
        Initialize the heuristics calculator.

        Args:
            weights: Evaluation weights (defaults if omitted)
        """
        self.weights = weights or HeuristicWeights()

    def evaluate_state(self, state: GameState) -> float:
        """
        Evaluate a state from the seeker's point of view.

        Returns:
            +inf for a win, -inf for a loss, otherwise a weighted sum of score,
            remaining items, proximity to items and scared chasers, and a
            penalty for a nearby dangerous chaser
        """
        if state.won:
            return math.inf
        if state.game_over:
            return -math.inf

        w = self.weights
        seeker = state.seeker
        value = state.score * w.score_weight
        value -= len(state.food) * w.food_left_penalty
        value -= len(state.capsules) * w.capsule_left_penalty

        d_food = _closest(seeker, state.food)
        if d_food is not None:
            value += w.closest_food_weight / max(1, d_food)

        d_capsule = _closest(seeker, state.capsules)
        if d_capsule is not None:
            value += w.closest_capsule_weight / max(1, d_capsule)

        active = state.active_chasers()
        d_scared = _closest(seeker, [c.position for c in active if c.scared])
        if d_scared is not None:
            value += w.scared_ghost_weight / max(1, d_scared)

        d_threat = _closest(seeker, [c.position for c in active if not c.scared])
        if d_threat is not None and d_threat <= w.ghost_danger_threshold:
            value -= w.ghost_danger_penalty

        return value

    def revisit_count(self, position: Position, recent_positions: List[Position]) -> int:
        return sum(1 for p in recent_positions if p == position)

    def evaluate_reflex(self, successor: GameState, recent_positions: List[Position]) -> float:
        """One-ply evaluation: state value minus a penalty for recently visited cells"""
        value = self.evaluate_state(successor)
        if math.isinf(value):
            return value
        revisits = self.revisit_count(successor.seeker, recent_positions)
        return value - revisits * self.weights.revisit_penalty * REFLEX_REVISIT_SCALE
