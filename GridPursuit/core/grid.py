"""
Static maze representation for the grid pursuit game.

A GridWorld knows its dimensions and walls and answers adjacency questions.
Food, capsules and agents are not part of it; they live in the game state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple
import networkx as nx

Position = Tuple[int, int]

# Reserved cell for a chaser that has been captured and removed from play
JAIL_POSITION: Position = (-1, -1)


def manhattan(a: Position, b: Position) -> int:
    """Manhattan distance between two grid cells"""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Direction(Enum):
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    STOP = "Stop"

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]


_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
    Direction.STOP: (0, 0),
}

# Neighbor expansion order used everywhere (search traces depend on it)
MOVE_ORDER = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


@dataclass(frozen=True)
class Move:
    """A direction label together with the cell it leads to"""
    direction: Direction
    destination: Position

    @classmethod
    def stop(cls, position: Position) -> 'Move':
        return cls(Direction.STOP, position)

    def __str__(self) -> str:
        return f"{self.direction.value}->{self.destination}"


class GridWorld:
    """Immutable maze: width, height and the set of wall cells"""

    def __init__(self, width: int, height: int, walls: Iterable[Position] = ()):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        walls = frozenset((int(x), int(y)) for x, y in walls)
        outside = [w for w in walls if not (0 <= w[0] < width and 0 <= w[1] < height)]
        if outside:
            raise ValueError(f"Walls outside the grid: {sorted(outside)[:5]}")
        self._walls = walls
        self._legal = tuple((x, y) for y in range(height) for x in range(width)
                            if (x, y) not in walls)
        self._graph = None
        self._distance_cache: Dict[Tuple[Position, Position], int] = {}

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def walls(self) -> FrozenSet[Position]:
        return self._walls

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos[0] < self._width and 0 <= pos[1] < self._height

    def is_wall(self, pos: Position) -> bool:
        return pos in self._walls

    def is_legal(self, pos: Position) -> bool:
        """A cell an agent or item may occupy: inside the grid and not a wall"""
        return self.in_bounds(pos) and pos not in self._walls

    def legal_positions(self) -> List[Position]:
        """All non-wall cells, row by row"""
        return list(self._legal)

    def legal_moves(self, pos: Position) -> List[Move]:
        """Moves to the 4-connected legal neighbors of pos (North, East, South, West)"""
        moves = []
        for direction in MOVE_ORDER:
            dx, dy = direction.delta
            dest = (pos[0] + dx, pos[1] + dy)
            if self.is_legal(dest):
                moves.append(Move(direction, dest))
        return moves

    def neighbors(self, pos: Position) -> List[Position]:
        return [move.destination for move in self.legal_moves(pos)]

    def transition_neighbors(self, pos: Position, allow_stay: bool) -> List[Position]:
        """Cells reachable in one time step, optionally including staying put"""
        cells = self.neighbors(pos)
        if allow_stay:
            cells.append(pos)
        return cells

    @property
    def graph(self) -> nx.Graph:
        """Adjacency graph over legal cells, built on first use"""
        if self._graph is None:
            graph = nx.Graph()
            graph.add_nodes_from(self._legal)
            for pos in self._legal:
                for nbr in self.neighbors(pos):
                    graph.add_edge(pos, nbr)
            self._graph = graph
        return self._graph

    def reachable_from(self, pos: Position) -> Set[Position]:
        """All legal cells connected to pos"""
        if not self.is_legal(pos):
            raise ValueError(f"Position {pos} is not a legal cell")
        return set(nx.node_connected_component(self.graph, pos))

    def maze_distance(self, source: Position, target: Position) -> int:
        """
        Shortest-path length through the maze.

        Returns:
            Number of steps, or -1 if no path exists
        """
        cache_key = (source, target)
        if cache_key in self._distance_cache:
            return self._distance_cache[cache_key]
        try:
            distance = nx.shortest_path_length(self.graph, source, target)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            distance = -1
        self._distance_cache[cache_key] = distance
        return distance

    def __repr__(self) -> str:
        return f"GridWorld({self._width}x{self._height}, walls={len(self._walls)})"
