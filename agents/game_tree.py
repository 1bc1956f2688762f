"""
Depth-limited game-tree evaluation for the seeker.

The seeker (agent 0) maximises; chasers either minimise (minimax, alpha-beta)
or are averaged over uniformly (expectimax). Depth counts full rounds: it
increases each time play wraps back to the seeker. Evaluation runs on an
explicit frame stack so deep trees do not hit the interpreter recursion limit.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from GridPursuit.core.game import GameState, PursuitGame
from GridPursuit.core.grid import Move
from .heuristics import GameHeuristics


class TreeMode(Enum):
    MINIMAX = "minimax"
    ALPHABETA = "alphabeta"
    EXPECTIMAX = "expectimax"


@dataclass
class _Frame:
    state: GameState
    agent_index: int
    depth: int
    moves: List[Move]
    alpha: float
    beta: float
    value: float
    next_move: int = 0
    total: float = 0.0
    cut: bool = False


class GameTreeSearch:
    """Evaluates states by searching the game tree to a fixed number of rounds"""

    def __init__(self, game: PursuitGame, heuristics: GameHeuristics, max_depth: int,
                 mode: TreeMode = TreeMode.MINIMAX):
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.game = game
        self.heuristics = heuristics
        self.max_depth = max_depth
        self.mode = TreeMode(mode)
        self.nodes_evaluated = 0

    def value(self, state: GameState, agent_index: int = 0, depth: int = 0,
              alpha: float = -math.inf, beta: float = math.inf) -> float:
        """
        Value of `state` with `agent_index` to move at round `depth`.

        Args:
            state: State to evaluate
            agent_index: Agent whose turn it is (0 is the seeker)
            depth: Rounds already searched
            alpha: Best value the maximiser can already guarantee (alpha-beta only)
            beta: Best value the minimiser can already guarantee (alpha-beta only)

        Returns:
            The backed-up value
        """
        node = self._open(state, agent_index, depth, alpha, beta)
        if not isinstance(node, _Frame):
            return node

        stack = [node]
        while True:
            frame = stack[-1]
            if frame.next_move < len(frame.moves) and not frame.cut:
                move = frame.moves[frame.next_move]
                frame.next_move += 1
                child_state = self.game.generate_successor(frame.state, frame.agent_index, move)
                child_agent, child_depth = self.next_turn(frame.state, frame.agent_index, frame.depth)
                child = self._open(child_state, child_agent, child_depth, frame.alpha, frame.beta)
                if isinstance(child, _Frame):
                    stack.append(child)
                else:
                    self._absorb(frame, child)
                continue

            stack.pop()
            result = self._result(frame)
            if not stack:
                return result
            self._absorb(stack[-1], result)

    def next_turn(self, state: GameState, agent_index: int, depth: int) -> Tuple[int, int]:
        """Agent to move after `agent_index`, and the round it moves in"""
        next_agent = (agent_index + 1) % self.game.num_agents(state)
        return next_agent, depth + 1 if next_agent == 0 else depth

    def _open(self, state: GameState, agent_index: int, depth: int,
              alpha: float, beta: float) -> Union[_Frame, float]:
        """A frame for an interior node, or the leaf value directly"""
        while True:
            if depth >= self.max_depth or state.game_over:
                self.nodes_evaluated += 1
                return self.heuristics.evaluate_state(state)
            moves = self.game.legal_moves(state, agent_index)
            if moves:
                break
            # agent cannot move: play passes to the next agent
            agent_index, depth = self.next_turn(state, agent_index, depth)

        initial = -math.inf if agent_index == 0 else math.inf
        return _Frame(state, agent_index, depth, moves, alpha, beta, initial)

    def _absorb(self, frame: _Frame, child_value: float):
        if frame.agent_index == 0:
            frame.value = max(frame.value, child_value)
            if self.mode == TreeMode.ALPHABETA:
                if frame.value > frame.beta:
                    frame.cut = True
                else:
                    frame.alpha = max(frame.alpha, frame.value)
        elif self.mode == TreeMode.EXPECTIMAX:
            frame.total += child_value
        else:
            frame.value = min(frame.value, child_value)
            if self.mode == TreeMode.ALPHABETA:
                if frame.value < frame.alpha:
                    frame.cut = True
                else:
                    frame.beta = min(frame.beta, frame.value)

    def _result(self, frame: _Frame) -> float:
        if frame.agent_index != 0 and self.mode == TreeMode.EXPECTIMAX:
            return frame.total / len(frame.moves)
        return frame.value
