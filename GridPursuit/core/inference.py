"""
Belief tracking of hidden chasers from noisy distance readings.

Three filters share one observation model and one transition model:
ExactInference keeps a full probability table, ParticleFilter approximates it
with a fixed number of samples, and JointParticleFilter tracks several chasers
at once with particles that are tuples of positions.
"""

import itertools
import logging
import math
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .grid import GridWorld, Position, JAIL_POSITION, manhattan
from .random_source import RandomSource, ensure_rng

logger = logging.getLogger(__name__)

Belief = Dict[Position, float]

# Joint particles are drawn from the full Cartesian product only below this size
MAX_ENUMERATED_JOINT_STATES = 50_000


@dataclass(frozen=True)
class InferenceConfig:
    """Sensor and motion parameters shared by every filter"""
    num_particles: int = 1000
    observation_lambda: float = 0.3
    noise_range: int = 7
    allow_stay: bool = True

    def __post_init__(self):
        if self.num_particles <= 0:
            raise ValueError(f"num_particles must be positive, got {self.num_particles}")
        if self.noise_range < 0:
            raise ValueError(f"noise_range must be non-negative, got {self.noise_range}")
        if self.observation_lambda < 0:
            raise ValueError(f"observation_lambda must be non-negative, got {self.observation_lambda}")

    @classmethod
    def from_dict(cls, data: dict) -> 'InferenceConfig':
        aliases = {
            'numParticles': 'num_particles',
            'observationLambda': 'observation_lambda',
            'noiseRange': 'noise_range',
            'allowStay': 'allow_stay',
        }
        values = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown inference setting: {key}")
            values[name] = value
        return cls(**values)


def observation_probability(noisy_distance: Optional[int], seeker: Position,
                            target: Position, jail: Optional[Position],
                            config: InferenceConfig) -> float:
    """
    Likelihood of a distance reading given a hypothesised target cell.

    Args:
        noisy_distance: Sensor reading, or None when the target is jailed
        seeker: Seeker position the reading was taken from
        target: Hypothesised target position
        jail: Jail cell of the target, if one is defined
        config: Noise range and decay rate

    Returns:
        exp(-lambda * |d - t|) within the noise range, 0 outside it
    """
    if jail is not None and target == jail:
        return 1.0 if noisy_distance is None else 0.0
    if noisy_distance is None:
        return 0.0
    diff = abs(noisy_distance - manhattan(seeker, target))
    if diff > config.noise_range:
        return 0.0
    return math.exp(-config.observation_lambda * diff)


def sample_noisy_distance(seeker: Position, target: Position, noise_range: int,
                          rng: RandomSource) -> Optional[int]:
    """Simulated sensor: true distance plus uniform integer noise, clipped at 0"""
    if target == JAIL_POSITION:
        return None
    noise = rng.randint(-noise_range, noise_range)
    return max(0, manhattan(seeker, target) + noise)


def belief_heatmap(grid: GridWorld, belief: Belief) -> np.ndarray:
    """Belief as a (height, width) array, zero on walls"""
    heat = np.zeros((grid.height, grid.width), dtype=float)
    for (x, y), prob in belief.items():
        if grid.in_bounds((x, y)):
            heat[y, x] = prob
    return heat


def _resample_indices(weights: np.ndarray, count: int, rng: RandomSource) -> np.ndarray:
    """Draw `count` indices with replacement, proportionally to weights"""
    cumulative = np.cumsum(weights / weights.sum())
    draws = np.array([rng.random() for _ in range(count)])
    indices = np.searchsorted(cumulative, draws, side='left')
    return np.minimum(indices, len(weights) - 1)


class InferenceModule(ABC):
    """Common interface of single-chaser trackers"""

    def __init__(self, grid: GridWorld, config: InferenceConfig = None,
                 rng: Optional[RandomSource] = None, jail_position: Optional[Position] = None):
        self.grid = grid
        self.config = config or InferenceConfig()
        self.rng = ensure_rng(rng)
        self.jail_position = jail_position
        self.legal_positions: List[Position] = grid.legal_positions()
        if not self.legal_positions:
            raise ValueError("Grid has no legal positions to track over")
        self.initialize_uniformly()

    @abstractmethod
    def initialize_uniformly(self):
        pass

    @abstractmethod
    def observe(self, noisy_distance: Optional[int], seeker: Position):
        """Condition the belief on one distance reading"""
        pass

    @abstractmethod
    def elapse_time(self):
        """Advance the belief one step under the motion model"""
        pass

    @abstractmethod
    def get_belief(self) -> Belief:
        """Current belief as a fresh dict over legal positions"""
        pass

    def most_likely_position(self) -> Position:
        belief = self.get_belief()
        return max(self.legal_positions, key=lambda p: belief.get(p, 0.0))

    def _likelihood(self, noisy_distance: Optional[int], seeker: Position,
                    target: Position) -> float:
        return observation_probability(noisy_distance, seeker, target,
                                       self.jail_position, self.config)


class ExactInference(InferenceModule):
    """Forward-algorithm updates over an explicit probability table"""

    def initialize_uniformly(self):
        p = 1.0 / len(self.legal_positions)
        self.beliefs: Belief = {pos: p for pos in self.legal_positions}

    def observe(self, noisy_distance: Optional[int], seeker: Position):
        updated = {pos: self.beliefs[pos] * self._likelihood(noisy_distance, seeker, pos)
                   for pos in self.legal_positions}
        total = sum(updated.values())
        if total == 0:
            logger.debug("Reading %s from %s rules out every cell; resetting belief",
                         noisy_distance, seeker)
            self.initialize_uniformly()
            return
        self.beliefs = {pos: p / total for pos, p in updated.items()}

    def elapse_time(self):
        new_beliefs = {pos: 0.0 for pos in self.legal_positions}
        for pos in self.legal_positions:
            prob_old = self.beliefs[pos]
            if prob_old == 0:
                continue
            successors = self.grid.transition_neighbors(pos, self.config.allow_stay)
            if not successors:
                new_beliefs[pos] += prob_old
                continue
            mass = prob_old / len(successors)
            for nxt in successors:
                new_beliefs[nxt] += mass
        total = sum(new_beliefs.values())
        if total == 0:
            self.initialize_uniformly()
            return
        self.beliefs = {pos: p / total for pos, p in new_beliefs.items()}

    def get_belief(self) -> Belief:
        return dict(self.beliefs)


class ParticleFilter(InferenceModule):
    """Approximate tracking with a fixed-size particle set"""

    @property
    def num_particles(self) -> int:
        return self.config.num_particles

    def initialize_uniformly(self):
        n_legal = len(self.legal_positions)
        self.particles: List[Position] = [self.legal_positions[i % n_legal]
                                          for i in range(self.config.num_particles)]
        self.rng.shuffle(self.particles)

    def observe(self, noisy_distance: Optional[int], seeker: Position):
        weights = np.array([self._likelihood(noisy_distance, seeker, p) for p in self.particles])
        if weights.sum() == 0:
            logger.debug("All %d particles inconsistent with reading %s; reinitialising",
                         len(self.particles), noisy_distance)
            self.initialize_uniformly()
            return
        indices = _resample_indices(weights, self.config.num_particles, self.rng)
        self.particles = [self.particles[i] for i in indices]

    def elapse_time(self):
        moved = []
        for pos in self.particles:
            successors = self.grid.transition_neighbors(pos, self.config.allow_stay)
            moved.append(self.rng.choice(successors) if successors else pos)
        self.particles = moved

    def get_belief(self) -> Belief:
        counts = Counter(self.particles)
        total = len(self.particles)
        return {pos: counts.get(pos, 0) / total for pos in self.legal_positions}


class JointParticleFilter:
    """
    Tracks several chasers at once. Each particle holds one position per
    chaser; a chaser whose reading is None is placed in its jail cell.
    """

    def __init__(self, grid: GridWorld, num_chasers: int, config: InferenceConfig = None,
                 rng: Optional[RandomSource] = None,
                 jail_positions: Optional[Sequence[Position]] = None):
        if num_chasers <= 0:
            raise ValueError(f"num_chasers must be positive, got {num_chasers}")
        self.grid = grid
        self.num_chasers = num_chasers
        self.config = config or InferenceConfig()
        self.rng = ensure_rng(rng)
        if jail_positions is None:
            jail_positions = [JAIL_POSITION] * num_chasers
        if len(jail_positions) != num_chasers:
            raise ValueError(f"Expected {num_chasers} jail positions, got {len(jail_positions)}")
        self.jail_positions: List[Position] = [tuple(j) for j in jail_positions]
        self.legal_positions = grid.legal_positions()
        if not self.legal_positions:
            raise ValueError("Grid has no legal positions to track over")
        self.initialize_uniformly()

    @property
    def num_particles(self) -> int:
        return self.config.num_particles

    def initialize_uniformly(self):
        n = self.config.num_particles
        n_joint = len(self.legal_positions) ** self.num_chasers
        if n_joint <= MAX_ENUMERATED_JOINT_STATES:
            joint = list(itertools.product(self.legal_positions, repeat=self.num_chasers))
            self.rng.shuffle(joint)
            self.particles: List[Tuple[Position, ...]] = [joint[i % len(joint)] for i in range(n)]
        else:
            self.particles = [tuple(self.rng.choice(self.legal_positions)
                                    for _ in range(self.num_chasers))
                              for _ in range(n)]

    def observe(self, noisy_distances: Sequence[Optional[int]], seeker: Position):
        if len(noisy_distances) != self.num_chasers:
            raise ValueError(f"Expected {self.num_chasers} readings, got {len(noisy_distances)}")
        jailed = [i for i, d in enumerate(noisy_distances) if d is None]
        if jailed:
            self.particles = [self._send_to_jail(p, jailed) for p in self.particles]

        weights = np.ones(len(self.particles))
        for k, particle in enumerate(self.particles):
            for i in range(self.num_chasers):
                weights[k] *= observation_probability(noisy_distances[i], seeker, particle[i],
                                                      self.jail_positions[i], self.config)
        if weights.sum() == 0:
            logger.debug("Joint readings %s inconsistent with every particle; reinitialising",
                         list(noisy_distances))
            self.initialize_uniformly()
            return
        indices = _resample_indices(weights, self.config.num_particles, self.rng)
        self.particles = [self.particles[i] for i in indices]

    def _send_to_jail(self, particle: Tuple[Position, ...], jailed: List[int]) -> Tuple[Position, ...]:
        positions = list(particle)
        for i in jailed:
            positions[i] = self.jail_positions[i]
        return tuple(positions)

    def elapse_time(self):
        moved = []
        for particle in self.particles:
            nxt = []
            for i, pos in enumerate(particle):
                if pos == self.jail_positions[i]:
                    nxt.append(pos)
                    continue
                successors = self.grid.transition_neighbors(pos, self.config.allow_stay)
                nxt.append(self.rng.choice(successors) if successors else pos)
            moved.append(tuple(nxt))
        self.particles = moved

    def get_marginal(self, chaser_index: int) -> Belief:
        """Belief over one chaser's position, projected from the joint particles"""
        if not 0 <= chaser_index < self.num_chasers:
            raise ValueError(f"No chaser with index {chaser_index}")
        counts = Counter(p[chaser_index] for p in self.particles)
        total = len(self.particles)
        return {pos: count / total for pos, count in counts.items()}

    def get_beliefs(self) -> List[Belief]:
        return [self.get_marginal(i) for i in range(self.num_chasers)]
