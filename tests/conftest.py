"""Shared fixtures for the grid pursuit test suite."""

from random import Random

import pytest

from GridPursuit.core.game import PursuitGame, RandomChaserPolicy
from GridPursuit.core.grid import GridWorld
from GridPursuit.services.layout_loader import load_layout, parse_layout

TINY_MAZE = """
%%%%%%%
%    P%
% %%% %
%  %  %
%%   %%
%. %%%%
%%%%%%%
"""


@pytest.fixture
def rng() -> Random:
    return Random(0)


@pytest.fixture
def open_grid() -> GridWorld:
    """5x5 grid with no walls."""
    return GridWorld(5, 5)


@pytest.fixture
def corridor() -> GridWorld:
    """Single row of seven open cells."""
    return GridWorld(7, 1)


@pytest.fixture
def tiny_maze():
    return parse_layout(TINY_MAZE, "tinyMaze")


@pytest.fixture
def small_classic():
    return load_layout("smallClassic")


@pytest.fixture
def random_game(open_grid) -> PursuitGame:
    return PursuitGame(open_grid, RandomChaserPolicy())
