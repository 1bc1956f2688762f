"""
Agent Registry for the grid pursuit game.

This module provides a registry system for managing the seeker agent implementations.
It allows easy selection and instantiation of agents from the terminal.
"""

from typing import Dict, List, Optional, Tuple, Type
from enum import Enum

from GridPursuit.core.random_source import RandomSource
from .base_agent import SeekerAgent
from .reflex_agent import ReflexAgent
from .adversarial_agents import (
    AlphaBetaAgent, DEFAULT_DEPTH, ExpectimaxAgent, GameTreeAgent, MinimaxAgent
)
from .heuristics import HeuristicWeights


class AgentType(Enum):
    """Available agent types"""
    REFLEX = "reflex"
    MINIMAX = "minimax"
    ALPHABETA = "alphabeta"
    EXPECTIMAX = "expectimax"


class AgentRegistry:
    """Registry for managing the seeker agent implementations"""

    def __init__(self):
        """Initialize the agent registry with available agents"""
        self._agents: Dict[AgentType, Tuple[Type[SeekerAgent], str]] = {
            AgentType.REFLEX: (ReflexAgent, "Greedy evaluation of score, pellets, capsules, and chaser safety"),
            AgentType.MINIMAX: (MinimaxAgent, "Adversarial search that plans several plies ahead; chasers modeled as optimal minimizers"),
            AgentType.ALPHABETA: (AlphaBetaAgent, "Minimax with alpha-beta pruning for efficiency"),
            AgentType.EXPECTIMAX: (ExpectimaxAgent, "Search using expected values; chasers modeled as uniformly random"),
        }

    def get_available_agent_types(self) -> List[AgentType]:
        """Get list of available agent types"""
        return list(self._agents.keys())

    def get_agent_description(self, agent_type: AgentType) -> str:
        return self._agents[agent_type][1]

    def get_agent_display_name(self, agent_type: AgentType) -> str:
        """Get display name for an agent type"""
        display_names = {
            AgentType.REFLEX: "Reflex Agent",
            AgentType.MINIMAX: "Minimax Agent",
            AgentType.ALPHABETA: "Alpha-Beta Agent",
            AgentType.EXPECTIMAX: "Expectimax Agent",
        }
        return display_names.get(agent_type, str(agent_type.value).title())

    def create_agent(self, agent_type: AgentType, depth: int = DEFAULT_DEPTH,
                     weights: HeuristicWeights = None,
                     rng: Optional[RandomSource] = None) -> SeekerAgent:
        """
        Create a seeker agent of the specified type.

        Args:
            agent_type: Which decision procedure to use
            depth: Lookahead in full rounds (ignored by the reflex agent)
            weights: Evaluation weights
            rng: Random source for tie-breaking

        Returns:
            SeekerAgent instance
        """
        if agent_type not in self._agents:
            raise ValueError(f"Unknown agent type: {agent_type}")
        agent_class = self._agents[agent_type][0]
        if issubclass(agent_class, GameTreeAgent):
            return agent_class(depth=depth, weights=weights, rng=rng)
        return agent_class(weights=weights, rng=rng)

    def create_agent_from_string(self, agent_type_str: str, **kwargs) -> SeekerAgent:
        """Create an agent from the string value of its type"""
        try:
            agent_type = AgentType(agent_type_str.lower())
        except ValueError:
            valid = ", ".join(t.value for t in AgentType)
            raise ValueError(f"Unknown agent type '{agent_type_str}' (expected one of: {valid})") from None
        return self.create_agent(agent_type, **kwargs)

    def register_agent(self, agent_type: AgentType, agent_class: Type[SeekerAgent], description: str):
        """Register a new agent type"""
        self._agents[agent_type] = (agent_class, description)


# Global registry instance
agent_registry = AgentRegistry()


def get_agent_registry() -> AgentRegistry:
    """Get the global agent registry instance"""
    return agent_registry
