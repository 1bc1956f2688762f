"""
Grid Pursuit

Search, adversarial game-tree and belief-tracking algorithms for a grid-world
pursuit game: a seeker collecting food in a maze while chasers hunt it.
"""

from .core.grid import GridWorld, Position, Direction, Move, JAIL_POSITION, manhattan
from .core.search import SearchAlgorithm, SearchState, search, run_search, run_all_searches
from .core.game import GameState, ChaserState, PursuitGame, DirectionalChaserPolicy
from .core.inference import InferenceConfig, ExactInference, ParticleFilter, JointParticleFilter
from .core.random_source import make_rng
from .services.layout_loader import Layout, parse_layout, load_layout, available_layouts

__version__ = "1.0.0"

__all__ = [
    "GridWorld", "Position", "Direction", "Move", "JAIL_POSITION", "manhattan",
    "SearchAlgorithm", "SearchState", "search", "run_search", "run_all_searches",
    "GameState", "ChaserState", "PursuitGame", "DirectionalChaserPolicy",
    "InferenceConfig", "ExactInference", "ParticleFilter", "JointParticleFilter",
    "make_rng",
    "Layout", "parse_layout", "load_layout", "available_layouts",
]
