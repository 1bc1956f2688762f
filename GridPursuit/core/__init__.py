"""
Core engines: maze representation, graph search, game rules and belief tracking.
"""

from .grid import GridWorld, Position, Direction, Move, JAIL_POSITION, manhattan
from .search import SearchAlgorithm, SearchState, search, run_search, run_all_searches
from .game import (
    GameState, ChaserState, PursuitGame,
    ChaserPolicy, DirectionalChaserPolicy, RandomChaserPolicy
)
from .inference import (
    InferenceConfig, InferenceModule, ExactInference, ParticleFilter, JointParticleFilter,
    observation_probability, sample_noisy_distance, belief_heatmap
)
from .random_source import RandomSource, make_rng

__all__ = [
    'GridWorld', 'Position', 'Direction', 'Move', 'JAIL_POSITION', 'manhattan',
    'SearchAlgorithm', 'SearchState', 'search', 'run_search', 'run_all_searches',
    'GameState', 'ChaserState', 'PursuitGame',
    'ChaserPolicy', 'DirectionalChaserPolicy', 'RandomChaserPolicy',
    'InferenceConfig', 'InferenceModule', 'ExactInference', 'ParticleFilter',
    'JointParticleFilter', 'observation_probability', 'sample_noisy_distance',
    'belief_heatmap',
    'RandomSource', 'make_rng',
]
