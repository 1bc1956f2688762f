"""
Reflex agent: one-ply lookahead over the seeker's legal moves.
"""

import math
from typing import List

from GridPursuit.core.game import GameState, PursuitGame
from GridPursuit.core.grid import Move
from .base_agent import SeekerAgent, SeekerHistory

# Moves scoring within this margin of the best are treated as ties
TIE_EPSILON = 0.01


class ReflexAgent(SeekerAgent):
    """Scores each successor and picks among the best, avoiding immediate backtracking"""

    def score_moves(self, game: PursuitGame, state: GameState, moves: List[Move],
                    history: SeekerHistory) -> List[float]:
        recent = history.recent_positions()
        return [self.heuristics.evaluate_reflex(game.generate_successor(state, 0, move), recent)
                for move in moves]

    def select_move(self, game: PursuitGame, state: GameState, moves: List[Move],
                    history: SeekerHistory) -> Move:
        scores = self.score_moves(game, state, moves, history)

        best_moves: List[Move] = []
        best_score = -math.inf
        for move, score in zip(moves, scores):
            if score > best_score:
                best_score = score
                best_moves = [move]
            elif score == best_score or abs(score - best_score) < TIE_EPSILON:
                best_moves.append(move)

        candidates = best_moves
        if history.previous is not None:
            forward = [m for m in best_moves if m.destination != history.previous]
            if forward:
                candidates = forward
        return self.rng.choice(candidates)
