"""
JSON configuration for heuristic weights, inference, game and search settings.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.inference import InferenceConfig
from ..core.search import SearchAlgorithm
from agents.heuristics import HeuristicWeights

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "default_config.json"

DEFAULT_GAME_SETTINGS: Dict[str, Any] = {
    'depth': 2,
    'max_turns': 1000,
    'stuck_threshold': 3,
    'prob_attack': 0.8,
    'prob_scared_flee': 0.8,
}


def load_config(config_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Load configuration from a JSON file (the project default if no path is given)."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found at {config_path}")

    with open(config_path, 'r') as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")
    return config


def get_inference_config(config: Optional[Dict[str, Any]] = None) -> InferenceConfig:
    section = (config or {}).get('inference', {})
    return InferenceConfig.from_dict(section)


def get_game_settings(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Game section merged over the defaults; unknown keys are rejected"""
    section = (config or {}).get('game', {})
    unknown = set(section) - set(DEFAULT_GAME_SETTINGS)
    if unknown:
        raise ValueError(f"Unknown game settings: {sorted(unknown)}")
    settings = dict(DEFAULT_GAME_SETTINGS)
    settings.update(section)
    return settings


def get_search_algorithm(config: Optional[Dict[str, Any]] = None) -> SearchAlgorithm:
    section = (config or {}).get('search', {})
    try:
        return SearchAlgorithm(section.get('algorithm', 'bfs'))
    except ValueError:
        raise ValueError(f"Unknown search algorithm: {section.get('algorithm')}") from None


def get_heuristic_weights(config: Optional[Dict[str, Any]] = None) -> HeuristicWeights:
    section = (config or {}).get('heuristic_weights', {})
    return HeuristicWeights.from_dict(section)
