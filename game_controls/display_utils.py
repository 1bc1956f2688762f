"""
Display utilities for terminal-based grid pursuit play.
Renders mazes, game states, search traces and belief heatmaps as text.
"""
from typing import Dict, List, Optional

import numpy as np

from GridPursuit.core.game import GameState
from GridPursuit.core.grid import GridWorld, Position
from GridPursuit.core.inference import Belief, belief_heatmap
from GridPursuit.core.search import SearchState


class VerbosityLevel:
    """Verbosity level constants"""
    SILENT = 0     # Only errors and final results
    BASIC = 1      # Score and status each turn
    MOVES = 2      # + Maze rendering
    DETAILED = 3   # + Chaser details
    DEBUG = 4      # + Full state representation


# Heatmap shading from low to high probability
HEAT_SHADES = " .:-=+*#%@"


class GameDisplay:
    """Handles all display formatting with configurable verbosity"""

    def __init__(self, verbosity: int = VerbosityLevel.MOVES):
        self.verbosity = verbosity

        # Display symbols
        self.symbols = {
            'wall': '%',
            'food': '.',
            'capsule': 'o',
            'seeker': 'P',
            'chaser': 'G',
            'scared': 'S',
            'floor': ' ',
            'visited': '~',
            'path': '*',
        }

    def print_separator(self, char='=', length=60):
        """Print a separator line"""
        print(char * length)

    def print_title(self, title: str):
        """Print a formatted title"""
        self.print_separator()
        print(f"  {title.upper()}")
        self.print_separator()

    def print_error(self, message: str):
        """Print an error message"""
        print(f"❌ ERROR: {message}")

    def print_info(self, message: str):
        """Print an info message"""
        if self.verbosity >= VerbosityLevel.BASIC:
            print(f"ℹ️  {message}")

    def _base_rows(self, grid: GridWorld) -> List[List[str]]:
        return [[self.symbols['wall'] if grid.is_wall((x, y)) else self.symbols['floor']
                 for x in range(grid.width)] for y in range(grid.height)]

    def render_state(self, grid: GridWorld, state: GameState) -> str:
        """Text picture of the maze with items and agents"""
        rows = self._base_rows(grid)
        for x, y in state.food:
            rows[y][x] = self.symbols['food']
        for x, y in state.capsules:
            rows[y][x] = self.symbols['capsule']
        for chaser in state.active_chasers():
            x, y = chaser.position
            rows[y][x] = self.symbols['scared'] if chaser.scared else self.symbols['chaser']
        x, y = state.seeker
        rows[y][x] = self.symbols['seeker']
        return "\n".join("".join(row) for row in rows)

    def render_search(self, grid: GridWorld, snapshot: SearchState,
                      start: Position, goal: Position) -> str:
        """Text picture of explored cells and, once found, the path"""
        rows = self._base_rows(grid)
        for x, y in snapshot.visited:
            rows[y][x] = self.symbols['visited']
        for x, y in snapshot.path:
            rows[y][x] = self.symbols['path']
        rows[start[1]][start[0]] = 'S'
        rows[goal[1]][goal[0]] = 'G'
        return "\n".join("".join(row) for row in rows)

    def render_heatmap(self, grid: GridWorld, belief: Belief,
                       marks: Optional[Dict[Position, str]] = None) -> str:
        """Belief shading, scaled to the most likely cell"""
        heat = belief_heatmap(grid, belief)
        peak = heat.max()
        levels = np.zeros_like(heat, dtype=int)
        if peak > 0:
            levels = np.ceil(heat / peak * (len(HEAT_SHADES) - 1)).astype(int)
        rows = self._base_rows(grid)
        for y in range(grid.height):
            for x in range(grid.width):
                if not grid.is_wall((x, y)):
                    rows[y][x] = HEAT_SHADES[levels[y, x]]
        for (x, y), mark in (marks or {}).items():
            if grid.in_bounds((x, y)):
                rows[y][x] = mark
        return "\n".join("".join(row) for row in rows)

    def print_game_state(self, grid: GridWorld, state: GameState):
        """Print current game state based on verbosity level"""
        if self.verbosity < VerbosityLevel.BASIC:
            return

        status = "WON" if state.won else "LOST" if state.lost else "playing"
        print(f"\n🎯 TURN {state.turn_count} | score {state.score} | "
              f"food {len(state.food)} | capsules {len(state.capsules)} | {status}")

        if self.verbosity >= VerbosityLevel.MOVES:
            print(self.render_state(grid, state))

        if self.verbosity >= VerbosityLevel.DETAILED:
            for i, chaser in enumerate(state.chasers):
                if not chaser.is_active:
                    print(f"  Chaser {i + 1}: captured")
                elif chaser.scared:
                    print(f"  Chaser {i + 1}: {chaser.position} scared ({chaser.scared_timer} turns left)")
                else:
                    print(f"  Chaser {i + 1}: {chaser.position}")

        if self.verbosity >= VerbosityLevel.DEBUG:
            print(f"🔧 {state.get_state_representation()}")

    def print_search_step(self, grid: GridWorld, snapshot: SearchState,
                          start: Position, goal: Position):
        if self.verbosity >= VerbosityLevel.MOVES or (snapshot.finished and self.verbosity >= VerbosityLevel.BASIC):
            print(f"\n🔍 Expansions: {snapshot.total_expansions}")
            print(self.render_search(grid, snapshot, start, goal))

    def print_search_result(self, algorithm: str, snapshot: SearchState):
        if snapshot.reached_goal:
            print(f"✅ {algorithm.upper()}: path length {snapshot.path_length}, "
                  f"{snapshot.total_expansions} expansions")
        else:
            print(f"❌ {algorithm.upper()}: goal unreachable after {snapshot.total_expansions} expansions")

    def print_game_over(self, state: GameState):
        """Display game over information"""
        self.print_title("GAME OVER")
        if state.won:
            print(f"\n🏆 SEEKER WINS! Final score: {state.score}")
        else:
            print(f"\n💀 SEEKER LOSES. Final score: {state.score}")
        print(f"\nTotal turns played: {state.turn_count}")

    def print_tracking_step(self, grid: GridWorld, step_count: int, readings: List[Optional[int]],
                            chaser_positions: List[Position], beliefs: List[Belief],
                            seeker: Position):
        if self.verbosity < VerbosityLevel.BASIC:
            return
        print(f"\n📡 STEP {step_count} | readings {readings}")
        if self.verbosity < VerbosityLevel.MOVES:
            return
        for i, belief in enumerate(beliefs):
            marks = {seeker: self.symbols['seeker'], chaser_positions[i]: self.symbols['chaser']}
            print(f"Chaser {i + 1}:")
            print(self.render_heatmap(grid, belief, marks))
