"""
Batch game analysis for grid pursuit.

Plays many headless games per seeker agent and summarises the outcomes in a
pandas DataFrame for side-by-side comparison.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
from tqdm import tqdm

from ..core.game import DirectionalChaserPolicy, PursuitGame, MAX_TURNS
from ..core.random_source import make_rng
from .layout_loader import Layout
from agents.agent_registry import AgentType, get_agent_registry
from agents.heuristics import HeuristicWeights
from game_controls.game_runner import GameController, DEFAULT_STUCK_THRESHOLD

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['agent', 'games', 'wins', 'win_rate', 'mean_score',
                   'min_score', 'max_score', 'mean_turns']


def play_games(layout: Layout, agent_types: Sequence[Union[AgentType, str]], n_games: int,
               seed: Optional[int] = None, depth: int = 2,
               weights: HeuristicWeights = None, max_turns: int = MAX_TURNS,
               stuck_threshold: int = DEFAULT_STUCK_THRESHOLD,
               chaser_policy: DirectionalChaserPolicy = None,
               show_progress: bool = True) -> List[Dict[str, Any]]:
    """
    Play `n_games` games on one layout for each agent type.

    Game i of every agent uses the seed `seed + i`, so agents face the same
    random streams and results are reproducible.

    Args:
        layout: Layout to play on
        agent_types: Seeker agents to compare
        n_games: Games per agent
        seed: Base seed (None for unseeded play)
        depth: Lookahead for the game-tree agents
        weights: Evaluation weights
        max_turns: Turn cap per game
        stuck_threshold: Anti-oscillation threshold
        chaser_policy: Runtime chaser behaviour
        show_progress: Show a tqdm progress bar

    Returns:
        One result dict per game
    """
    if n_games <= 0:
        raise ValueError(f"n_games must be positive, got {n_games}")
    registry = get_agent_registry()
    game = PursuitGame(layout.grid, chaser_policy, max_turns=max_turns)
    types = [AgentType(t) for t in agent_types]

    results = []
    runs = [(agent_type, i) for agent_type in types for i in range(n_games)]
    for agent_type, i in tqdm(runs, desc=f"Games on {layout.name}", disable=not show_progress):
        rng = make_rng(None if seed is None else seed + i)
        agent = registry.create_agent(agent_type, depth=depth, weights=weights, rng=rng)
        controller = GameController(game, agent, game.from_layout(layout), rng, stuck_threshold)

        start_time = time.time()
        for _ in controller.run():
            pass
        final = controller.state
        results.append({
            'agent': agent_type.value,
            'game': i,
            'layout': layout.name,
            'won': final.won,
            'score': final.score,
            'turns': final.turn_count,
            'food_left': len(final.food),
            'execution_time_seconds': time.time() - start_time,
        })
        logger.debug("%s game %d: %s with score %d after %d turns", agent_type.value, i,
                     "won" if final.won else "lost", final.score, final.turn_count)
    return results


def summarize_results(results: List[Dict[str, Any]]) -> pd.DataFrame:
    """Per-agent games, wins, win rate, score range and mean game length"""
    if not results:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.DataFrame(results)
    summary = df.groupby('agent', sort=False).agg(
        games=('won', 'size'),
        wins=('won', 'sum'),
        mean_score=('score', 'mean'),
        min_score=('score', 'min'),
        max_score=('score', 'max'),
        mean_turns=('turns', 'mean'),
    ).reset_index()
    summary['wins'] = summary['wins'].astype(int)
    summary['win_rate'] = summary['wins'] / summary['games']
    return summary[SUMMARY_COLUMNS]
