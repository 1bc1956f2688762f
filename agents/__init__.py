"""
Agents package for the grid pursuit game.

This package contains the seeker decision procedures: a one-ply reflex agent
and the minimax, alpha-beta and expectimax game-tree agents.
"""

from .base_agent import SeekerAgent, SeekerHistory
from .reflex_agent import ReflexAgent
from .game_tree import GameTreeSearch, TreeMode
from .adversarial_agents import GameTreeAgent, MinimaxAgent, AlphaBetaAgent, ExpectimaxAgent
from .agent_registry import AgentType, AgentRegistry, agent_registry, get_agent_registry
from .heuristics import GameHeuristics, HeuristicWeights

__all__ = [
    'SeekerAgent',
    'SeekerHistory',
    'ReflexAgent',
    'GameTreeSearch',
    'TreeMode',
    'GameTreeAgent',
    'MinimaxAgent',
    'AlphaBetaAgent',
    'ExpectimaxAgent',
    'AgentType',
    'AgentRegistry',
    'agent_registry',
    'get_agent_registry',
    'GameHeuristics',
    'HeuristicWeights',
]
