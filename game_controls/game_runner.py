"""
Stepping loops for terminal play.

Each controller advances one engine a single step at a time and hands back an
immutable snapshot, so the caller decides how fast to render.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Union

from GridPursuit.core.game import GameState, PursuitGame
from GridPursuit.core.grid import GridWorld, Move, Position
from GridPursuit.core.inference import (
    Belief, InferenceModule, JointParticleFilter, sample_noisy_distance
)
from GridPursuit.core.random_source import RandomSource, ensure_rng
from GridPursuit.core.search import SearchAlgorithm, SearchState, search
from agents.base_agent import SeekerAgent, SeekerHistory

logger = logging.getLogger(__name__)

DEFAULT_STUCK_THRESHOLD = 3


class GameController:
    """Handles game flow: agent decisions, anti-oscillation and full turns"""

    def __init__(self, game: PursuitGame, agent: SeekerAgent, state: GameState,
                 rng: Optional[RandomSource] = None,
                 stuck_threshold: int = DEFAULT_STUCK_THRESHOLD):
        self.game = game
        self.agent = agent
        self.state = state
        self.rng = ensure_rng(rng)
        self.stuck_threshold = stuck_threshold
        self.history = SeekerHistory(state.seeker)
        self.moves: List[Move] = []

    @property
    def is_finished(self) -> bool:
        return self.state.game_over

    def _update_stuck_counter(self):
        if self.history.is_oscillating():
            self.history.stuck_counter += 1
        else:
            self.history.stuck_counter = max(0, self.history.stuck_counter - 1)

    def _break_oscillation(self, move: Move) -> Move:
        """Swap the agent's move for a random one that does not step back"""
        options = [m for m in self.game.legal_moves(self.state, 0)
                   if m.destination != self.history.previous]
        if not options:
            return move
        override = self.rng.choice(options)
        logger.debug("Seeker oscillating at %s; overriding %s with %s",
                     self.state.seeker, move, override)
        self.history.stuck_counter = 0
        return override

    def choose_move(self) -> Move:
        self._update_stuck_counter()
        move = self.agent.choose_move(self.game, self.state, self.history)
        if self.history.stuck_counter > self.stuck_threshold:
            move = self._break_oscillation(move)
        return move

    def step(self) -> GameState:
        """
        Play one full turn.

        Returns:
            The state after the seeker and every chaser have moved

        Raises:
            ValueError: If the game is already over
        """
        if self.is_finished:
            raise ValueError("Game is already over")
        move = self.choose_move()
        self.moves.append(move)
        self.state = self.game.step(self.state, move, self.rng)
        self.history.record(self.state.seeker)
        return self.state

    def run(self, max_steps: Optional[int] = None) -> Iterator[GameState]:
        """Yield the state after each turn until the game ends"""
        steps = 0
        while not self.is_finished and (max_steps is None or steps < max_steps):
            yield self.step()
            steps += 1


class SearchController:
    """Steps through a search run one expansion at a time"""

    def __init__(self, grid: GridWorld, start: Position, goal: Position,
                 algorithm: Union[SearchAlgorithm, str] = SearchAlgorithm.BFS):
        self.grid = grid
        self.start = start
        self.goal = goal
        self.algorithm = SearchAlgorithm(algorithm)
        self._trace = search(grid, start, goal, self.algorithm)
        self.current: Optional[SearchState] = None

    @property
    def is_finished(self) -> bool:
        return self.current is not None and self.current.finished

    def step(self) -> SearchState:
        """Advance by one expansion; a finished run keeps returning its final snapshot"""
        if not self.is_finished:
            self.current = next(self._trace)
        return self.current

    def run(self) -> Iterator[SearchState]:
        while not self.is_finished:
            yield self.step()


@dataclass(frozen=True)
class TrackingStep:
    """What the tracker saw and believed after one sensing step"""
    step_count: int
    readings: List[Optional[int]]
    chaser_positions: List[Position]
    beliefs: List[Belief]


class TrackingController:
    """
    Drives a belief tracker against hidden chasers.

    Each step reads a noisy distance to every hidden chaser, conditions the
    tracker on it, advances the tracker in time, and then lets the hidden
    chasers wander. A single-chaser tracker follows chaser 0 only.
    """

    def __init__(self, grid: GridWorld, tracker: Union[InferenceModule, JointParticleFilter],
                 chaser_positions: Sequence[Position], seeker: Position,
                 rng: Optional[RandomSource] = None, move_chasers: bool = True):
        if not chaser_positions:
            raise ValueError("Tracking needs at least one chaser")
        for pos in chaser_positions:
            if not grid.is_legal(pos):
                raise ValueError(f"Chaser placed on illegal cell {pos}")
        if isinstance(tracker, JointParticleFilter) and tracker.num_chasers != len(chaser_positions):
            raise ValueError(f"Tracker follows {tracker.num_chasers} chasers, "
                             f"got {len(chaser_positions)} positions")
        self.grid = grid
        self.tracker = tracker
        self.chaser_positions: List[Position] = [tuple(p) for p in chaser_positions]
        self.seeker = tuple(seeker)
        self.rng = ensure_rng(rng)
        self.move_chasers = move_chasers
        self.step_count = 0

    @property
    def is_joint(self) -> bool:
        return isinstance(self.tracker, JointParticleFilter)

    def beliefs(self) -> List[Belief]:
        if self.is_joint:
            return self.tracker.get_beliefs()
        return [self.tracker.get_belief()]

    def sense(self) -> List[Optional[int]]:
        """Noisy distance readings for the chasers the tracker follows"""
        tracked = self.chaser_positions if self.is_joint else self.chaser_positions[:1]
        noise_range = self.tracker.config.noise_range
        return [sample_noisy_distance(self.seeker, pos, noise_range, self.rng) for pos in tracked]

    def _wander(self):
        allow_stay = self.tracker.config.allow_stay
        moved = []
        for pos in self.chaser_positions:
            options = self.grid.transition_neighbors(pos, allow_stay)
            moved.append(self.rng.choice(options) if options else pos)
        self.chaser_positions = moved

    def step(self) -> TrackingStep:
        readings = self.sense()
        if self.is_joint:
            self.tracker.observe(readings, self.seeker)
        else:
            self.tracker.observe(readings[0], self.seeker)
        self.tracker.elapse_time()
        if self.move_chasers:
            self._wander()
        self.step_count += 1
        return TrackingStep(self.step_count, readings, list(self.chaser_positions), self.beliefs())

    def run(self, steps: int) -> Iterator[TrackingStep]:
        for _ in range(steps):
            yield self.step()
