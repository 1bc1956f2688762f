"""
Graph search over a GridWorld.

Runs DFS, BFS, uniform cost search and A* from a start cell to a goal cell and
exposes the run as a lazy sequence of snapshots, one per node expansion, so a
display loop can animate the exploration.
"""

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from .grid import GridWorld, Position, manhattan

logger = logging.getLogger(__name__)


class SearchAlgorithm(Enum):
    DFS = "dfs"
    BFS = "bfs"
    UCS = "ucs"
    ASTAR = "astar"


@dataclass(frozen=True)
class SearchState:
    """Snapshot of a search run after some number of expansions"""
    visited: FrozenSet[Position]
    expanded: Tuple[Tuple[Position, int], ...]
    path: Tuple[Position, ...]
    total_expansions: int
    finished: bool = False

    @property
    def path_length(self) -> int:
        """Number of moves along the path, or -1 if there is none"""
        return len(self.path) - 1 if self.path else -1

    @property
    def reached_goal(self) -> bool:
        return bool(self.path)


@dataclass
class _FrontierEntry:
    position: Position
    parent: Optional[Position]
    cost: int = 0


class Frontier(ABC):
    """Container of discovered but unexpanded cells"""

    @abstractmethod
    def push(self, entry: _FrontierEntry, priority: int = 0):
        pass

    @abstractmethod
    def pop(self) -> _FrontierEntry:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class StackFrontier(Frontier):
    """LIFO: last pushed is explored first"""

    def __init__(self):
        self._items: List[_FrontierEntry] = []

    def push(self, entry: _FrontierEntry, priority: int = 0):
        self._items.append(entry)

    def pop(self) -> _FrontierEntry:
        return self._items.pop()

    def __len__(self) -> int:
        return len(self._items)


class QueueFrontier(Frontier):
    """FIFO: cells are explored in discovery order"""

    def __init__(self):
        self._items = deque()

    def push(self, entry: _FrontierEntry, priority: int = 0):
        self._items.append(entry)

    def pop(self) -> _FrontierEntry:
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)


class PriorityFrontier(Frontier):
    """Lowest priority first; equal priorities come out in insertion order"""

    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def push(self, entry: _FrontierEntry, priority: int = 0):
        heapq.heappush(self._heap, (priority, next(self._counter), entry))

    def pop(self) -> _FrontierEntry:
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)


def _make_frontier(algorithm: SearchAlgorithm) -> Frontier:
    if algorithm == SearchAlgorithm.DFS:
        return StackFrontier()
    if algorithm == SearchAlgorithm.BFS:
        return QueueFrontier()
    return PriorityFrontier()


def reconstruct_path(parents: Dict[Position, Optional[Position]], goal: Position) -> List[Position]:
    """Follow parent pointers back from the goal; returns start..goal"""
    path = [goal]
    current = parents.get(goal)
    while current is not None:
        path.append(current)
        current = parents.get(current)
    path.reverse()
    return path


def search(grid: GridWorld, start: Position, goal: Position,
           algorithm: SearchAlgorithm) -> Iterator[SearchState]:
    """
    Start a search run.

    Args:
        grid: Maze to search
        start: Start cell
        goal: Goal cell
        algorithm: Frontier discipline to use

    Returns:
        Iterator of snapshots, one per expansion. Expanding the goal yields the
        final snapshot with finished=True and the path. If the frontier empties
        first, one extra closing snapshot with no new expansion is yielded: it
        repeats the last expansion count, has finished=True and an empty path.

    Raises:
        ValueError: If start or goal is a wall or outside the grid
    """
    algorithm = SearchAlgorithm(algorithm)
    for label, pos in (("start", start), ("goal", goal)):
        if not grid.is_legal(pos):
            raise ValueError(f"Search {label} {pos} is a wall or outside the grid")
    return _run(grid, tuple(start), tuple(goal), algorithm)


def _run(grid: GridWorld, start: Position, goal: Position,
         algorithm: SearchAlgorithm) -> Iterator[SearchState]:
    uses_cost = algorithm in (SearchAlgorithm.UCS, SearchAlgorithm.ASTAR)

    def priority(pos: Position, cost: int) -> int:
        if algorithm == SearchAlgorithm.ASTAR:
            return cost + manhattan(pos, goal)
        return cost

    frontier = _make_frontier(algorithm)
    frontier.push(_FrontierEntry(start, None, 0), priority(start, 0))
    best_cost: Dict[Position, int] = {start: 0}
    parents: Dict[Position, Optional[Position]] = {}
    visited = set()
    expanded: List[Tuple[Position, int]] = []

    while len(frontier) > 0:
        entry = frontier.pop()
        pos = entry.position
        if pos in visited:
            continue
        visited.add(pos)
        expanded.append((pos, len(expanded)))
        parents[pos] = entry.parent

        if pos == goal:
            path = reconstruct_path(parents, goal)
            logger.debug("%s reached %s after %d expansions (path length %d)",
                         algorithm.value, goal, len(expanded), len(path) - 1)
            yield SearchState(frozenset(visited), tuple(expanded), tuple(path),
                              len(expanded), finished=True)
            return

        yield SearchState(frozenset(visited), tuple(expanded), (), len(expanded))

        for nbr in grid.neighbors(pos):
            if nbr in visited:
                continue
            new_cost = entry.cost + 1
            if uses_cost:
                if nbr in best_cost and best_cost[nbr] <= new_cost:
                    continue
                best_cost[nbr] = new_cost
            frontier.push(_FrontierEntry(nbr, pos, new_cost), priority(nbr, new_cost))

    logger.debug("%s exhausted the frontier after %d expansions; %s unreachable",
                 algorithm.value, len(expanded), goal)
    yield SearchState(frozenset(visited), tuple(expanded), (), len(expanded), finished=True)


def run_search(grid: GridWorld, start: Position, goal: Position,
               algorithm: SearchAlgorithm) -> SearchState:
    """Run a search to completion and return the final snapshot"""
    final = None
    for final in search(grid, start, goal, algorithm):
        pass
    return final


def run_all_searches(grid: GridWorld, start: Position,
                     goal: Position) -> Dict[SearchAlgorithm, SearchState]:
    """Run every algorithm on the same maze for side-by-side comparison"""
    return {algorithm: run_search(grid, start, goal, algorithm)
            for algorithm in SearchAlgorithm}
