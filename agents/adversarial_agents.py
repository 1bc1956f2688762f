"""
Multi-agent search seekers: minimax, alpha-beta and expectimax.

Each agent evaluates every root move with a GameTreeSearch and picks the best.
Tiny penalties for stepping back to the previous cell or onto a recently
visited cell break ties between otherwise equal moves.
"""

import logging
import math
from typing import List, Optional, Tuple

from GridPursuit.core.game import GameState, PursuitGame
from GridPursuit.core.grid import Move
from GridPursuit.core.random_source import RandomSource
from .base_agent import SeekerAgent, SeekerHistory
from .game_tree import GameTreeSearch, TreeMode
from .heuristics import HeuristicWeights

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 2
BACKTRACK_TIE_PENALTY = 0.0001
REVISIT_TIE_PENALTY = 0.00005


class GameTreeAgent(SeekerAgent):
    """Seeker that looks `depth` full rounds ahead"""

    mode = TreeMode.MINIMAX

    def __init__(self, depth: int = DEFAULT_DEPTH, weights: HeuristicWeights = None,
                 rng: Optional[RandomSource] = None):
        super().__init__(weights, rng)
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth

    def _tree(self, game: PursuitGame) -> GameTreeSearch:
        return GameTreeSearch(game, self.heuristics, self.depth, self.mode)

    def evaluate_root_moves(self, game: PursuitGame, state: GameState,
                            moves: List[Move]) -> List[Tuple[Move, float]]:
        """
        Backed-up value of every root move.

        With alpha-beta the root's alpha grows across moves, so a pruned move
        reports an upper bound below the best value rather than its exact value.
        """
        tree = self._tree(game)
        alpha = -math.inf
        results = []
        for move in moves:
            successor = game.generate_successor(state, 0, move)
            next_agent, next_depth = tree.next_turn(state, 0, 0)
            value = tree.value(successor, next_agent, next_depth, alpha, math.inf)
            results.append((move, value))
            if self.mode == TreeMode.ALPHABETA:
                alpha = max(alpha, value)
        logger.debug("%s evaluated %d leaves over %d root moves",
                     self.mode.value, tree.nodes_evaluated, len(moves))
        return results

    def root_value(self, game: PursuitGame, state: GameState) -> float:
        """Best backed-up value over the seeker's moves"""
        moves = game.legal_moves(state, 0)
        if not moves:
            return self.heuristics.evaluate_state(state)
        return max(value for _, value in self.evaluate_root_moves(game, state, moves))

    def select_move(self, game: PursuitGame, state: GameState, moves: List[Move],
                    history: SeekerHistory) -> Move:
        recent = history.recent_positions()
        best_move = moves[0]
        best_adjusted = -math.inf
        for move, value in self.evaluate_root_moves(game, state, moves):
            adjusted = value
            if move.destination == history.previous:
                adjusted -= BACKTRACK_TIE_PENALTY
            if move.destination in recent:
                adjusted -= REVISIT_TIE_PENALTY
            if adjusted > best_adjusted:
                best_adjusted = adjusted
                best_move = move
        return best_move


class MinimaxAgent(GameTreeAgent):
    """Chasers are assumed to pick the move worst for the seeker"""
    mode = TreeMode.MINIMAX


class AlphaBetaAgent(GameTreeAgent):
    """Minimax with alpha-beta pruning; same values, fewer nodes"""
    mode = TreeMode.ALPHABETA


class ExpectimaxAgent(GameTreeAgent):
    """Chasers are modelled as choosing uniformly at random"""
    mode = TreeMode.EXPECTIMAX
