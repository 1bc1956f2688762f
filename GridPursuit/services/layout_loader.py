#!/usr/bin/env python3
"""
Layout loader for grid pursuit mazes.

Reads the plain-text .lay format: '%' wall, '.' food, 'o' capsule,
'P' seeker start, 'G' chaser start, anything else open floor.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple, Union

from ..core.grid import GridWorld, Position

DEFAULT_LAYOUT_DIR = Path(__file__).resolve().parent.parent / "layouts"
LAYOUT_SUFFIX = ".lay"


@dataclass(frozen=True)
class Layout:
    """A parsed maze plus the initial placement of every entity"""
    name: str
    grid: GridWorld
    seeker_start: Position
    chaser_starts: Tuple[Position, ...]
    food: FrozenSet[Position]
    capsules: FrozenSet[Position]

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def search_endpoints(self) -> Tuple[Position, Position]:
        """
        Start and goal for maze search.

        The goal is the first food cell in reading order; mazes without food
        fall back to the cell just inside the bottom-left corner.
        """
        goal = min(self.food, key=lambda p: (p[1], p[0])) if self.food else (1, self.height - 2)
        return self.seeker_start, goal


def parse_layout(text: str, name: str = "layout") -> Layout:
    """
    Parse layout text into a Layout.

    Args:
        text: Layout rows separated by newlines
        name: Name to attach to the layout

    Returns:
        Layout: parsed maze and entity placements

    Raises:
        ValueError: If the text is empty or has no seeker start
    """
    lines = [line.rstrip('\r') for line in text.strip('\n').split('\n')]
    lines = [line for line in lines if line.strip()]
    if not lines:
        raise ValueError(f"Layout '{name}' is empty")

    height = len(lines)
    width = max(len(line) for line in lines)

    walls, food, capsules, chasers = [], [], [], []
    seeker: Optional[Position] = None
    for y, line in enumerate(lines):
        for x, char in enumerate(line):
            if char == '%':
                walls.append((x, y))
            elif char == '.':
                food.append((x, y))
            elif char == 'o':
                capsules.append((x, y))
            elif char == 'P':
                seeker = (x, y)
            elif char == 'G':
                chasers.append((x, y))

    if seeker is None:
        raise ValueError(f"Layout '{name}' has no seeker start ('P')")

    return Layout(
        name=name,
        grid=GridWorld(width, height, walls),
        seeker_start=seeker,
        chaser_starts=tuple(chasers),
        food=frozenset(food),
        capsules=frozenset(capsules),
    )


def load_layout(name_or_path: Union[str, Path], layout_dir: Union[str, Path, None] = None) -> Layout:
    """
    Load a layout by name (from the layouts directory) or by file path.

    Raises:
        FileNotFoundError: If no matching layout file exists
    """
    path = Path(name_or_path)
    if not path.exists():
        directory = Path(layout_dir) if layout_dir is not None else DEFAULT_LAYOUT_DIR
        filename = path.name if path.suffix == LAYOUT_SUFFIX else f"{path.name}{LAYOUT_SUFFIX}"
        path = directory / filename
    if not path.exists():
        raise FileNotFoundError(f"Layout not found: {name_or_path}")

    with open(path, 'r') as f:
        return parse_layout(f.read(), path.stem)


def available_layouts(layout_dir: Union[str, Path, None] = None) -> List[str]:
    """Names of the layouts in the layouts directory, sorted"""
    directory = Path(layout_dir) if layout_dir is not None else DEFAULT_LAYOUT_DIR
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob(f"*{LAYOUT_SUFFIX}"))
