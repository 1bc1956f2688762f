"""
Simple Grid Pursuit Terminal Runner

Terminal front-end for the three engines: maze search, seeker-vs-chasers play
and belief tracking, plus headless batch comparison of seeker agents.

Usage:
    python -m game_controls.simple_game search --layout tinyMaze --algorithm astar
    python -m game_controls.simple_game play --layout smallClassic --agent expectimax
    python -m game_controls.simple_game track --layout smallClassic --tracker particle
    python -m game_controls.simple_game batch --layout testClassic --games 20
"""
import argparse
import logging
import sys
import time

from GridPursuit.core.game import DirectionalChaserPolicy, PursuitGame
from GridPursuit.core.inference import ExactInference, JointParticleFilter, ParticleFilter
from GridPursuit.core.random_source import make_rng
from GridPursuit.core.search import SearchAlgorithm
from GridPursuit.services.analyze_games import play_games, summarize_results
from GridPursuit.services.config_loader import (
    get_game_settings, get_heuristic_weights, get_inference_config,
    get_search_algorithm, load_config
)
from GridPursuit.services.layout_loader import available_layouts, load_layout
from agents import AgentType, get_agent_registry
from game_controls.display_utils import GameDisplay, VerbosityLevel
from game_controls.game_runner import GameController, SearchController, TrackingController

LOG_LEVELS = {
    VerbosityLevel.SILENT: logging.WARNING,
    VerbosityLevel.BASIC: logging.WARNING,
    VerbosityLevel.MOVES: logging.INFO,
    VerbosityLevel.DETAILED: logging.INFO,
    VerbosityLevel.DEBUG: logging.DEBUG,
}


def parse_arguments(argv=None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--layout', default='smallClassic',
                        help='Bundled layout name or path to a .lay file')
    common.add_argument('--config', default=None, help='Path to a JSON config file')
    common.add_argument('--seed', type=int, default=None, help='Random seed')
    common.add_argument('--verbosity', type=int, default=VerbosityLevel.MOVES,
                        choices=range(VerbosityLevel.SILENT, VerbosityLevel.DEBUG + 1),
                        help='0 silent, 1 basic, 2 moves, 3 detailed, 4 debug')

    parser = argparse.ArgumentParser(description='Grid pursuit algorithm runner')
    parser.add_argument('--list-layouts', action='store_true', help='List bundled layouts and exit')
    subparsers = parser.add_subparsers(dest='command')

    search_parser = subparsers.add_parser('search', parents=[common], help='Run a maze search')
    search_parser.add_argument('--algorithm', choices=[a.value for a in SearchAlgorithm] + ['all'],
                               default=None, help='Search algorithm (default from config)')
    search_parser.add_argument('--delay', type=float, default=0.0, help='Seconds between frames')

    agent_choices = [t.value for t in AgentType]
    play_parser = subparsers.add_parser('play', parents=[common], help='Play one game')
    play_parser.add_argument('--agent', choices=agent_choices, default='reflex')
    play_parser.add_argument('--depth', type=int, default=None, help='Lookahead in rounds')
    play_parser.add_argument('--delay', type=float, default=0.0, help='Seconds between frames')

    track_parser = subparsers.add_parser('track', parents=[common], help='Track hidden chasers')
    track_parser.add_argument('--tracker', choices=['exact', 'particle', 'joint'], default='particle')
    track_parser.add_argument('--steps', type=int, default=20)

    batch_parser = subparsers.add_parser('batch', parents=[common], help='Compare agents over many games')
    batch_parser.add_argument('--agent', choices=agent_choices, nargs='+', default=agent_choices)
    batch_parser.add_argument('--depth', type=int, default=None, help='Lookahead in rounds')
    batch_parser.add_argument('--games', type=int, default=10, help='Games per agent')

    return parser.parse_args(argv)


def run_search_command(args, config, display: GameDisplay):
    layout = load_layout(args.layout)
    start, goal = layout.search_endpoints()
    if args.algorithm == 'all':
        algorithms = list(SearchAlgorithm)
    elif args.algorithm:
        algorithms = [SearchAlgorithm(args.algorithm)]
    else:
        algorithms = [get_search_algorithm(config)]

    for algorithm in algorithms:
        display.print_title(f"{algorithm.value} on {layout.name}")
        controller = SearchController(layout.grid, start, goal, algorithm)
        for snapshot in controller.run():
            display.print_search_step(layout.grid, snapshot, start, goal)
            if args.delay:
                time.sleep(args.delay)
        display.print_search_result(algorithm.value, controller.current)


def run_play_command(args, config, display: GameDisplay):
    layout = load_layout(args.layout)
    settings = get_game_settings(config)
    rng = make_rng(args.seed)
    policy = DirectionalChaserPolicy(settings['prob_attack'], settings['prob_scared_flee'])
    game = PursuitGame(layout.grid, policy, max_turns=settings['max_turns'])
    depth = args.depth if args.depth is not None else settings['depth']
    agent = get_agent_registry().create_agent_from_string(
        args.agent, depth=depth, weights=get_heuristic_weights(config), rng=rng)

    display.print_title(f"{args.agent} on {layout.name}")
    controller = GameController(game, agent, game.from_layout(layout), rng,
                                settings['stuck_threshold'])
    display.print_game_state(layout.grid, controller.state)
    for state in controller.run():
        display.print_game_state(layout.grid, state)
        if args.delay:
            time.sleep(args.delay)
    display.print_game_over(controller.state)


def run_track_command(args, config, display: GameDisplay):
    layout = load_layout(args.layout)
    if not layout.chaser_starts:
        raise ValueError(f"Layout '{layout.name}' has no chasers to track")
    inference_config = get_inference_config(config)
    rng = make_rng(args.seed)
    if args.tracker == 'joint':
        tracker = JointParticleFilter(layout.grid, len(layout.chaser_starts), inference_config, rng)
    elif args.tracker == 'exact':
        tracker = ExactInference(layout.grid, inference_config, rng)
    else:
        tracker = ParticleFilter(layout.grid, inference_config, rng)

    display.print_title(f"{args.tracker} tracking on {layout.name}")
    controller = TrackingController(layout.grid, tracker, layout.chaser_starts,
                                    layout.seeker_start, rng)
    for step in controller.run(args.steps):
        display.print_tracking_step(layout.grid, step.step_count, step.readings,
                                    step.chaser_positions, step.beliefs, layout.seeker_start)


def run_batch_command(args, config, display: GameDisplay):
    layout = load_layout(args.layout)
    settings = get_game_settings(config)
    policy = DirectionalChaserPolicy(settings['prob_attack'], settings['prob_scared_flee'])
    display.print_title(f"Batch: {args.games} games per agent on {layout.name}")
    results = play_games(
        layout, args.agent, args.games,
        seed=args.seed,
        depth=args.depth if args.depth is not None else settings['depth'],
        weights=get_heuristic_weights(config),
        max_turns=settings['max_turns'],
        stuck_threshold=settings['stuck_threshold'],
        chaser_policy=policy,
        show_progress=args.verbosity >= VerbosityLevel.BASIC,
    )
    print(summarize_results(results).to_string(index=False))


COMMANDS = {
    'search': run_search_command,
    'play': run_play_command,
    'track': run_track_command,
    'batch': run_batch_command,
}


def main(argv=None) -> int:
    """Main entry point"""
    args = parse_arguments(argv)
    if args.list_layouts:
        for name in available_layouts():
            print(name)
        return 0
    if args.command is None:
        print("Choose a command: search, play, track or batch (see --help)")
        return 2

    logging.basicConfig(level=LOG_LEVELS[args.verbosity],
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    display = GameDisplay(args.verbosity)
    try:
        config = load_config(args.config)
        COMMANDS[args.command](args, config, display)
    except (ValueError, FileNotFoundError) as e:
        display.print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\n\n👋 Interrupted by user. Goodbye!")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
