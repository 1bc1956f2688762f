"""Tests for GridPursuit.core.inference."""

import math
from random import Random

import numpy as np
import pytest

from GridPursuit.core.grid import GridWorld, JAIL_POSITION
from GridPursuit.core.inference import (
    ExactInference,
    InferenceConfig,
    JointParticleFilter,
    ParticleFilter,
    belief_heatmap,
    observation_probability,
    sample_noisy_distance,
)


class TestInferenceConfig:
    def test_defaults(self) -> None:
        config = InferenceConfig()
        assert config.num_particles == 1000
        assert config.observation_lambda == 0.3
        assert config.noise_range == 7
        assert config.allow_stay

    @pytest.mark.parametrize("kwargs", [
        {"num_particles": 0},
        {"noise_range": -1},
        {"observation_lambda": -0.1},
    ])
    def test_invalid_values_raise(self, kwargs) -> None:
        with pytest.raises(ValueError):
            InferenceConfig(**kwargs)

    def test_from_dict_accepts_camel_case(self) -> None:
        config = InferenceConfig.from_dict({"numParticles": 50, "noise_range": 2})
        assert config == InferenceConfig(num_particles=50, noise_range=2)

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError):
            InferenceConfig.from_dict({"particles": 50})


class TestObservationModel:
    config = InferenceConfig(observation_lambda=0.5, noise_range=2)

    def test_exact_reading(self) -> None:
        assert observation_probability(3, (0, 0), (1, 2), None, self.config) == 1.0

    def test_decays_with_error(self) -> None:
        p = observation_probability(5, (0, 0), (1, 2), None, self.config)
        assert p == pytest.approx(math.exp(-0.5 * 2))

    def test_outside_noise_range_is_impossible(self) -> None:
        assert observation_probability(6, (0, 0), (1, 2), None, self.config) == 0.0

    def test_jail_rules(self) -> None:
        jail = JAIL_POSITION
        assert observation_probability(None, (0, 0), jail, jail, self.config) == 1.0
        assert observation_probability(3, (0, 0), jail, jail, self.config) == 0.0
        assert observation_probability(None, (0, 0), (1, 2), jail, self.config) == 0.0

    def test_sensor_samples_within_range(self) -> None:
        rng = Random(0)
        readings = [sample_noisy_distance((0, 0), (1, 1), 3, rng) for _ in range(500)]
        assert min(readings) == 0
        assert max(readings) <= 5
        assert sample_noisy_distance((0, 0), JAIL_POSITION, 3, rng) is None


class TestExactInference:
    def test_uniform_start(self, open_grid: GridWorld) -> None:
        belief = ExactInference(open_grid).get_belief()
        assert len(belief) == 25
        assert all(p == pytest.approx(1 / 25) for p in belief.values())

    def test_observe_normalises(self, open_grid: GridWorld) -> None:
        module = ExactInference(open_grid, InferenceConfig(noise_range=1))
        module.observe(2, (0, 0))
        belief = module.get_belief()
        assert sum(belief.values()) == pytest.approx(1.0)
        assert belief[(4, 4)] == 0.0
        assert belief[(1, 1)] > belief[(0, 3)]

    def test_precise_reading_pins_position(self, open_grid: GridWorld) -> None:
        module = ExactInference(open_grid, InferenceConfig(noise_range=0))
        module.observe(0, (3, 1))
        assert module.get_belief()[(3, 1)] == pytest.approx(1.0)
        assert module.most_likely_position() == (3, 1)

    def test_impossible_reading_resets_to_uniform(self, open_grid: GridWorld) -> None:
        module = ExactInference(open_grid, InferenceConfig(noise_range=0))
        module.observe(0, (3, 1))
        module.observe(100, (0, 0))
        assert all(p == pytest.approx(1 / 25) for p in module.get_belief().values())

    def test_elapse_spreads_mass_to_neighbors(self, open_grid: GridWorld) -> None:
        module = ExactInference(open_grid, InferenceConfig(noise_range=0, allow_stay=False))
        module.observe(0, (0, 0))
        module.elapse_time()
        belief = module.get_belief()
        assert belief[(1, 0)] == pytest.approx(0.5)
        assert belief[(0, 1)] == pytest.approx(0.5)
        assert sum(belief.values()) == pytest.approx(1.0)

    def test_isolated_cell_keeps_mass(self) -> None:
        grid = GridWorld(3, 1, walls=[(1, 0)])
        module = ExactInference(grid, InferenceConfig(allow_stay=False))
        module.elapse_time()
        assert module.get_belief() == pytest.approx({(0, 0): 0.5, (2, 0): 0.5})

    def test_belief_is_a_copy(self, open_grid: GridWorld) -> None:
        module = ExactInference(open_grid)
        module.get_belief()[(0, 0)] = 5.0
        assert module.get_belief()[(0, 0)] == pytest.approx(1 / 25)


class TestParticleFilter:
    def test_initial_particles_cover_grid_evenly(self, open_grid: GridWorld) -> None:
        pf = ParticleFilter(open_grid, InferenceConfig(num_particles=100), Random(0))
        assert len(pf.particles) == 100
        assert all(p == pytest.approx(0.04) for p in pf.get_belief().values())

    def test_particle_count_is_constant(self, open_grid: GridWorld) -> None:
        pf = ParticleFilter(open_grid, InferenceConfig(num_particles=137, noise_range=1), Random(1))
        for step in range(5):
            pf.observe(3, (0, 0))
            assert len(pf.particles) == 137
            pf.elapse_time()
            assert len(pf.particles) == 137
        pf.observe(100, (0, 0))
        assert len(pf.particles) == 137

    def test_belief_sums_to_one(self, open_grid: GridWorld) -> None:
        pf = ParticleFilter(open_grid, InferenceConfig(num_particles=300, noise_range=2), Random(2))
        pf.observe(4, (0, 0))
        pf.elapse_time()
        assert sum(pf.get_belief().values()) == pytest.approx(1.0)

    def test_particles_stay_on_legal_cells(self, tiny_maze) -> None:
        pf = ParticleFilter(tiny_maze.grid, InferenceConfig(num_particles=200), Random(3))
        for _ in range(10):
            pf.elapse_time()
        legal = set(tiny_maze.grid.legal_positions())
        assert set(pf.particles) <= legal

    def test_converges_to_exact_posterior(self, open_grid: GridWorld) -> None:
        config = InferenceConfig(num_particles=25 * 800, noise_range=2, observation_lambda=0.5)
        exact = ExactInference(open_grid, config)
        pf = ParticleFilter(open_grid, config, Random(4))
        for reading, seeker in [(4, (0, 0)), (3, (4, 4))]:
            exact.observe(reading, seeker)
            pf.observe(reading, seeker)
        exact_belief = exact.get_belief()
        pf_belief = pf.get_belief()
        for pos in open_grid.legal_positions():
            assert pf_belief[pos] == pytest.approx(exact_belief[pos], abs=0.03)

    def test_same_seed_same_particles(self, open_grid: GridWorld) -> None:
        config = InferenceConfig(num_particles=50)
        runs = []
        for _ in range(2):
            pf = ParticleFilter(open_grid, config, Random(9))
            pf.observe(3, (0, 0))
            pf.elapse_time()
            runs.append(list(pf.particles))
        assert runs[0] == runs[1]


class TestJointParticleFilter:
    def test_small_product_is_enumerated(self) -> None:
        grid = GridWorld(3, 1)
        jpf = JointParticleFilter(grid, 2, InferenceConfig(num_particles=9), Random(0))
        assert len(set(jpf.particles)) == 9

    def test_particle_count_is_constant(self, open_grid: GridWorld) -> None:
        jpf = JointParticleFilter(open_grid, 2, InferenceConfig(num_particles=200), Random(1))
        jpf.observe([3, 5], (0, 0))
        jpf.elapse_time()
        assert len(jpf.particles) == 200
        assert all(len(p) == 2 for p in jpf.particles)

    def test_none_reading_jails_that_chaser(self, open_grid: GridWorld) -> None:
        jpf = JointParticleFilter(open_grid, 2, InferenceConfig(num_particles=200), Random(2))
        jpf.observe([4, None], (0, 0))
        assert jpf.get_marginal(1) == {JAIL_POSITION: 1.0}
        jpf.elapse_time()
        assert jpf.get_marginal(1) == {JAIL_POSITION: 1.0}
        assert JAIL_POSITION not in jpf.get_marginal(0)

    def test_marginals_sum_to_one(self, open_grid: GridWorld) -> None:
        jpf = JointParticleFilter(open_grid, 3, InferenceConfig(num_particles=300), Random(3))
        jpf.observe([2, 4, 6], (0, 0))
        beliefs = jpf.get_beliefs()
        assert len(beliefs) == 3
        for belief in beliefs:
            assert sum(belief.values()) == pytest.approx(1.0)

    def test_reading_count_must_match(self, open_grid: GridWorld) -> None:
        jpf = JointParticleFilter(open_grid, 2, InferenceConfig(num_particles=20), Random(4))
        with pytest.raises(ValueError):
            jpf.observe([3], (0, 0))

    def test_invalid_construction(self, open_grid: GridWorld) -> None:
        with pytest.raises(ValueError):
            JointParticleFilter(open_grid, 0)
        with pytest.raises(ValueError):
            JointParticleFilter(open_grid, 2, jail_positions=[JAIL_POSITION])
        with pytest.raises(ValueError):
            JointParticleFilter(open_grid, 2).get_marginal(2)


class TestHeatmap:
    def test_shape_and_values(self) -> None:
        grid = GridWorld(4, 2, walls=[(0, 0)])
        heat = belief_heatmap(grid, {(1, 0): 0.25, (3, 1): 0.75})
        assert heat.shape == (2, 4)
        assert heat[0, 1] == 0.25
        assert heat[1, 3] == 0.75
        assert heat[0, 0] == 0.0
        assert np.isclose(heat.sum(), 1.0)
