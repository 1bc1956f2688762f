"""
Game rules for the grid pursuit game.

One seeker moves through a maze eating food and capsules while chasers pursue
it. Capsules scare every chaser for a fixed number of turns, during which the
seeker can capture them. Every transition produces a new immutable GameState.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .grid import GridWorld, Move, Position, JAIL_POSITION, manhattan
from .random_source import RandomSource, ensure_rng

logger = logging.getLogger(__name__)

MOVE_COST = 1
FOOD_REWARD = 10
CAPSULE_REWARD = 200
CHASER_REWARD = 200
SCARED_DURATION = 40
MAX_TURNS = 1000


@dataclass(frozen=True)
class ChaserState:
    """Position and scared status of one chaser"""
    position: Position
    scared: bool = False
    scared_timer: int = 0

    @property
    def is_active(self) -> bool:
        """Removed chasers sit in the jail cell and take no part in play"""
        return self.position != JAIL_POSITION

    def captured(self) -> 'ChaserState':
        return ChaserState(JAIL_POSITION, False, 0)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game in progress"""
    seeker: Position
    chasers: Tuple[ChaserState, ...]
    food: FrozenSet[Position]
    capsules: FrozenSet[Position]
    score: int = 0
    game_over: bool = False
    won: bool = False
    turn_count: int = 0

    @property
    def lost(self) -> bool:
        return self.game_over and not self.won

    def active_chasers(self) -> List[ChaserState]:
        return [c for c in self.chasers if c.is_active]

    def get_state_representation(self) -> dict:
        """Serializable view of the state for display or logging"""
        return {
            'seeker': self.seeker,
            'chasers': [(c.position, c.scared, c.scared_timer) for c in self.chasers],
            'food_left': len(self.food),
            'capsules_left': len(self.capsules),
            'score': self.score,
            'turn_count': self.turn_count,
            'game_over': self.game_over,
            'won': self.won,
        }


class ChaserPolicy(ABC):
    """How a chaser picks its move during a real (non-simulated) turn"""

    @abstractmethod
    def choose_move(self, grid: GridWorld, chaser: ChaserState,
                    seeker_position: Position, rng: RandomSource) -> Optional[Move]:
        """Return the chosen move, or None if the chaser does not move"""
        pass


class RandomChaserPolicy(ChaserPolicy):
    """Uniformly random legal move"""

    def choose_move(self, grid: GridWorld, chaser: ChaserState,
                    seeker_position: Position, rng: RandomSource) -> Optional[Move]:
        if not chaser.is_active:
            return None
        moves = grid.legal_moves(chaser.position)
        if not moves:
            return None
        return rng.choice(moves)


class DirectionalChaserPolicy(ChaserPolicy):
    """
    Biased pursuit: best moves (closest to the seeker, or farthest when scared)
    share probability p; all legal moves share the remaining 1 - p.
    """

    def __init__(self, prob_attack: float = 0.8, prob_scared_flee: float = 0.8):
        for name, value in (("prob_attack", prob_attack), ("prob_scared_flee", prob_scared_flee)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        self.prob_attack = prob_attack
        self.prob_scared_flee = prob_scared_flee

    def move_distribution(self, grid: GridWorld, chaser: ChaserState,
                          seeker_position: Position) -> List[Tuple[Move, float]]:
        """Probability of each legal move for this chaser"""
        moves = grid.legal_moves(chaser.position)
        if not moves:
            return []
        distances = [manhattan(m.destination, seeker_position) for m in moves]
        target = max(distances) if chaser.scared else min(distances)
        best = [i for i, d in enumerate(distances) if d == target]
        best_prob = self.prob_scared_flee if chaser.scared else self.prob_attack

        probs = [(1.0 - best_prob) / len(moves)] * len(moves)
        for i in best:
            probs[i] += best_prob / len(best)
        return list(zip(moves, probs))

    def choose_move(self, grid: GridWorld, chaser: ChaserState,
                    seeker_position: Position, rng: RandomSource) -> Optional[Move]:
        if not chaser.is_active:
            return None
        distribution = self.move_distribution(grid, chaser, seeker_position)
        if not distribution:
            return None
        r = rng.random()
        cumulative = 0.0
        for move, prob in distribution:
            cumulative += prob
            if r <= cumulative:
                return move
        return distribution[-1][0]


class PursuitGame:
    """Rules of the pursuit game: successor generation and full turns"""

    def __init__(self, grid: GridWorld, chaser_policy: ChaserPolicy = None,
                 max_turns: int = MAX_TURNS):
        if max_turns <= 0:
            raise ValueError(f"max_turns must be positive, got {max_turns}")
        self.grid = grid
        self.chaser_policy = chaser_policy or DirectionalChaserPolicy()
        self.max_turns = max_turns

    def initial_state(self, seeker: Position, chasers: Sequence[Position],
                      food: Iterable[Position] = (),
                      capsules: Iterable[Position] = ()) -> GameState:
        """Build the starting state, checking that every entity is on a legal cell"""
        food = frozenset(tuple(f) for f in food)
        capsules = frozenset(tuple(c) for c in capsules)
        placements = [("seeker", tuple(seeker))]
        placements += [(f"chaser {i}", tuple(c)) for i, c in enumerate(chasers)]
        placements += [("food", f) for f in food] + [("capsule", c) for c in capsules]
        for label, pos in placements:
            if not self.grid.is_legal(pos):
                raise ValueError(f"{label} placed on illegal cell {pos}")

        return GameState(
            seeker=tuple(seeker),
            chasers=tuple(ChaserState(tuple(c)) for c in chasers),
            food=food,
            capsules=capsules,
            won=len(food) == 0,
            game_over=len(food) == 0,
        )

    def from_layout(self, layout) -> GameState:
        """Initial state from a parsed layout (see services.layout_loader)"""
        return self.initial_state(layout.seeker_start, layout.chaser_starts,
                                  layout.food, layout.capsules)

    def num_agents(self, state: GameState) -> int:
        """Seeker is agent 0, chasers are agents 1..N"""
        return 1 + len(state.chasers)

    def legal_moves(self, state: GameState, agent_index: int) -> List[Move]:
        """Legal moves for an agent; empty for a removed chaser"""
        if agent_index == 0:
            return self.grid.legal_moves(state.seeker)
        chaser = state.chasers[agent_index - 1]
        if not chaser.is_active:
            return []
        return self.grid.legal_moves(chaser.position)

    def generate_successor(self, state: GameState, agent_index: int, move: Move) -> GameState:
        """
        Apply one agent's move and return the resulting state.

        A seeker move handles food, capsules, scared timers, collisions and the
        win check, but leaves chasers where they are. A chaser move relocates
        that chaser and resolves a collision with the seeker.

        Raises:
            ValueError: If the game is over or the move is not legal for the agent
        """
        if state.game_over:
            raise ValueError("Cannot generate a successor of a finished game")
        self._check_move(state, agent_index, move)
        if agent_index == 0:
            return self._seeker_successor(state, move)
        return self._chaser_successor(state, agent_index - 1, move)

    def _check_move(self, state: GameState, agent_index: int, move: Move):
        """Only a legal destination, or Stop in place for an agent with no moves, is accepted"""
        moves = self.legal_moves(state, agent_index)
        if any(m.destination == move.destination for m in moves):
            return
        current = state.seeker if agent_index == 0 else state.chasers[agent_index - 1].position
        if not moves and move.destination == current:
            return
        raise ValueError(f"Illegal move {move} for agent {agent_index} at {current}")

    def _seeker_successor(self, state: GameState, move: Move) -> GameState:
        new_pos = move.destination
        score = state.score - MOVE_COST
        food = state.food
        capsules = state.capsules

        if new_pos in food:
            food = food - {new_pos}
            score += FOOD_REWARD

        if new_pos in capsules:
            capsules = capsules - {new_pos}
            score += CAPSULE_REWARD
            chasers = [replace(c, scared=True, scared_timer=SCARED_DURATION) if c.is_active else c
                       for c in state.chasers]
        else:
            chasers = []
            for c in state.chasers:
                timer = max(0, c.scared_timer - 1)
                chasers.append(replace(c, scared_timer=timer, scared=timer > 0))

        score, chasers, lost = self._resolve_collisions(new_pos, chasers, score)
        won = not lost and len(food) == 0
        return GameState(
            seeker=new_pos,
            chasers=tuple(chasers),
            food=food,
            capsules=capsules,
            score=score,
            game_over=lost or won,
            won=won,
            turn_count=state.turn_count,
        )

    def _chaser_successor(self, state: GameState, chaser_index: int, move: Move) -> GameState:
        chaser = state.chasers[chaser_index]
        if not chaser.is_active:
            return state
        chasers = list(state.chasers)
        chasers[chaser_index] = replace(chaser, position=move.destination)
        score, chasers, lost = self._resolve_collisions(state.seeker, chasers, state.score)
        return replace(state, chasers=tuple(chasers), score=score,
                       game_over=state.game_over or lost)

    def _resolve_collisions(self, seeker: Position, chasers: List[ChaserState],
                            score: int) -> Tuple[int, List[ChaserState], bool]:
        """Scared chasers on the seeker's cell are captured; any other ends the game"""
        lost = False
        resolved = []
        for index, chaser in enumerate(chasers):
            if chaser.is_active and chaser.position == seeker:
                if chaser.scared:
                    score += CHASER_REWARD
                    logger.debug("Chaser %d captured at %s (+%d)", index, seeker, CHASER_REWARD)
                    chaser = chaser.captured()
                else:
                    lost = True
            resolved.append(chaser)
        return score, resolved, lost

    def step(self, state: GameState, seeker_move: Move,
             rng: Optional[RandomSource] = None) -> GameState:
        """
        Play one full turn: the seeker moves, then every active chaser moves
        under the chaser policy.

        Args:
            state: Current state
            seeker_move: The seeker's chosen move
            rng: Random source for chaser sampling

        Returns:
            The state after the turn
        """
        rng = ensure_rng(rng)
        next_state = self.generate_successor(state, 0, seeker_move)

        if not next_state.game_over:
            for index in range(len(next_state.chasers)):
                chaser = next_state.chasers[index]
                move = self.chaser_policy.choose_move(self.grid, chaser, next_state.seeker, rng)
                if move is None:
                    continue
                next_state = self._chaser_successor(next_state, index, move)
                if next_state.game_over:
                    break

        turn_count = state.turn_count + 1
        if not next_state.game_over and turn_count >= self.max_turns:
            logger.debug("Turn cap of %d reached", self.max_turns)
            next_state = replace(next_state, game_over=True, won=False)
        return replace(next_state, turn_count=turn_count)
