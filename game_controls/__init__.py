"""
Game controls package for terminal-based grid pursuit.

Stepping loops for search, play and tracking, plus the text display used by
the command-line runner in simple_game.
"""

from .display_utils import GameDisplay, VerbosityLevel
from .game_runner import GameController, SearchController, TrackingController, TrackingStep

__all__ = [
    'GameDisplay',
    'VerbosityLevel',
    'GameController',
    'SearchController',
    'TrackingController',
    'TrackingStep',
]
