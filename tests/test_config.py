"""Tests for GridPursuit.services.config_loader."""

import json
from pathlib import Path

import pytest

import GridPursuit
from GridPursuit.core.inference import InferenceConfig
from GridPursuit.core.search import SearchAlgorithm
from GridPursuit.services.config_loader import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_GAME_SETTINGS,
    get_game_settings,
    get_heuristic_weights,
    get_inference_config,
    get_search_algorithm,
    load_config,
)
from agents.heuristics import HeuristicWeights


class TestLoadConfig:
    def test_default_config_ships_inside_the_package(self) -> None:
        package_dir = Path(GridPursuit.__file__).resolve().parent
        assert DEFAULT_CONFIG_PATH.parent.parent == package_dir
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_default_config_matches_defaults(self) -> None:
        config = load_config()
        assert get_heuristic_weights(config) == HeuristicWeights()
        assert get_inference_config(config) == InferenceConfig()
        assert get_game_settings(config) == DEFAULT_GAME_SETTINGS
        assert get_search_algorithm(config) == SearchAlgorithm.BFS

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_custom_file(self, tmp_path) -> None:
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "heuristic_weights": {"foodLeftPenalty": 500, "ghostDangerThreshold": 1},
            "inference": {"numParticles": 200},
            "game": {"depth": 3},
            "search": {"algorithm": "astar"},
        }))
        config = load_config(path)
        weights = get_heuristic_weights(config)
        assert weights.food_left_penalty == 500
        assert weights.ghost_danger_threshold == 1
        assert get_inference_config(config).num_particles == 200
        assert get_game_settings(config)["depth"] == 3
        assert get_game_settings(config)["max_turns"] == 1000
        assert get_search_algorithm(config) == SearchAlgorithm.ASTAR

    def test_non_object_config_raises(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            load_config(path)


class TestSections:
    def test_missing_sections_fall_back_to_defaults(self) -> None:
        assert get_heuristic_weights({}) == HeuristicWeights()
        assert get_inference_config(None) == InferenceConfig()
        assert get_game_settings({}) == DEFAULT_GAME_SETTINGS
        assert get_search_algorithm({}) == SearchAlgorithm.BFS

    def test_unknown_game_setting_raises(self) -> None:
        with pytest.raises(ValueError):
            get_game_settings({"game": {"lives": 3}})

    def test_unknown_algorithm_raises(self) -> None:
        with pytest.raises(ValueError):
            get_search_algorithm({"search": {"algorithm": "greedy"}})

    def test_invalid_inference_values_raise(self) -> None:
        with pytest.raises(ValueError):
            get_inference_config({"inference": {"noiseRange": -2}})
