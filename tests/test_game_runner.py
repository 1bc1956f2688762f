"""Tests for the stepping loops in game_controls.game_runner."""

from random import Random
from typing import List

import pytest

from GridPursuit.core.game import PursuitGame
from GridPursuit.core.grid import GridWorld, Move
from GridPursuit.core.inference import (
    ExactInference,
    InferenceConfig,
    JointParticleFilter,
    ParticleFilter,
)
from GridPursuit.core.search import SearchAlgorithm, run_search
from GridPursuit.services.layout_loader import load_layout
from agents import ReflexAgent, SeekerAgent, SeekerHistory
from game_controls.game_runner import GameController, SearchController, TrackingController


class BouncingAgent(SeekerAgent):
    """Always steps back to where it came from."""

    def select_move(self, game, state, moves: List[Move], history: SeekerHistory) -> Move:
        for move in moves:
            if move.destination == history.previous:
                return move
        return moves[0]


class TestGameController:
    def test_oscillation_is_broken(self, corridor: GridWorld) -> None:
        game = PursuitGame(corridor)
        state = game.initial_state((3, 0), [], food=[(6, 0)])
        controller = GameController(game, BouncingAgent(), state, Random(0))
        positions = [s.seeker for s in controller.run(max_steps=5)]
        assert positions == [(4, 0), (3, 0), (4, 0), (3, 0), (4, 0)]
        assert controller.history.stuck_counter == 3

        controller.step()
        assert controller.state.seeker == (5, 0)
        assert controller.history.stuck_counter == 0

    def test_reflex_wins_simple_corridor(self, corridor: GridWorld) -> None:
        game = PursuitGame(corridor)
        state = game.initial_state((3, 0), [], food=[(4, 0), (5, 0), (6, 0)])
        controller = GameController(game, ReflexAgent(rng=Random(0)), state, Random(0))
        states = list(controller.run())
        assert controller.is_finished
        assert states[-1].won
        assert states[-1].score == 3 * 10 - 3
        assert len(controller.moves) == 3

    def test_step_after_game_over_raises(self, corridor: GridWorld) -> None:
        game = PursuitGame(corridor)
        state = game.initial_state((3, 0), [], food=[(4, 0)])
        controller = GameController(game, ReflexAgent(rng=Random(0)), state, Random(0))
        controller.step()
        with pytest.raises(ValueError):
            controller.step()

    def test_seeded_games_are_reproducible(self, small_classic) -> None:
        game = PursuitGame(small_classic.grid)
        traces = []
        for _ in range(2):
            rng = Random(11)
            controller = GameController(game, ReflexAgent(rng=rng), game.from_layout(small_classic), rng)
            traces.append(list(controller.run(max_steps=30)))
        assert traces[0] == traces[1]

    def test_turn_counts_advance(self, small_classic) -> None:
        game = PursuitGame(small_classic.grid)
        rng = Random(5)
        controller = GameController(game, ReflexAgent(rng=rng), game.from_layout(small_classic), rng)
        states = list(controller.run(max_steps=10))
        assert [s.turn_count for s in states] == list(range(1, len(states) + 1))


class TestSearchController:
    def test_steps_to_same_result_as_run_search(self, tiny_maze) -> None:
        start, goal = tiny_maze.search_endpoints()
        controller = SearchController(tiny_maze.grid, start, goal, "astar")
        states = list(controller.run())
        assert controller.is_finished
        assert states[-1] == run_search(tiny_maze.grid, start, goal, SearchAlgorithm.ASTAR)
        assert controller.step() is states[-1]

    def test_invalid_endpoints_raise_on_construction(self, tiny_maze) -> None:
        with pytest.raises(ValueError):
            SearchController(tiny_maze.grid, (0, 0), (1, 5))


class TestTrackingController:
    def test_exact_tracking_keeps_normalised_belief(self) -> None:
        layout = load_layout("smallClassic")
        rng = Random(0)
        tracker = ExactInference(layout.grid, InferenceConfig(noise_range=2), rng)
        controller = TrackingController(layout.grid, tracker, layout.chaser_starts[:1],
                                        layout.seeker_start, rng)
        for step in controller.run(5):
            assert len(step.readings) == 1
            assert len(step.beliefs) == 1
            assert sum(step.beliefs[0].values()) == pytest.approx(1.0)
        assert controller.step_count == 5

    def test_particle_tracking_follows_first_chaser(self) -> None:
        layout = load_layout("smallClassic")
        rng = Random(1)
        tracker = ParticleFilter(layout.grid, InferenceConfig(num_particles=100), rng)
        controller = TrackingController(layout.grid, tracker, layout.chaser_starts,
                                        layout.seeker_start, rng)
        step = controller.step()
        assert len(step.readings) == 1
        assert len(step.chaser_positions) == 2
        assert len(tracker.particles) == 100

    def test_joint_tracking(self) -> None:
        layout = load_layout("smallClassic")
        rng = Random(2)
        tracker = JointParticleFilter(layout.grid, 2, InferenceConfig(num_particles=100), rng)
        controller = TrackingController(layout.grid, tracker, layout.chaser_starts,
                                        layout.seeker_start, rng)
        steps = list(controller.run(3))
        legal = set(layout.grid.legal_positions())
        for step in steps:
            assert len(step.readings) == 2
            assert len(step.beliefs) == 2
            assert set(step.chaser_positions) <= legal

    def test_hidden_chasers_can_stay_put(self) -> None:
        layout = load_layout("smallClassic")
        rng = Random(3)
        tracker = ExactInference(layout.grid, rng=rng)
        controller = TrackingController(layout.grid, tracker, layout.chaser_starts,
                                        layout.seeker_start, rng, move_chasers=False)
        step = controller.step()
        assert step.chaser_positions == list(layout.chaser_starts)

    def test_mismatched_joint_tracker_raises(self) -> None:
        layout = load_layout("smallClassic")
        tracker = JointParticleFilter(layout.grid, 3, InferenceConfig(num_particles=10), Random(0))
        with pytest.raises(ValueError):
            TrackingController(layout.grid, tracker, layout.chaser_starts, layout.seeker_start)
