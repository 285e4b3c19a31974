"""Shared constants and enumerations for the tile generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10


class Direction(str, Enum):
    """Compass sides of a tile, in the order edge signatures are stored."""

    TOP = "TOP"
    RIGHT = "RIGHT"
    BOTTOM = "BOTTOM"
    LEFT = "LEFT"

    @property
    def edge_index(self) -> int:
        return _EDGE_ORDER.index(self)

    @property
    def opposite(self) -> "Direction":
        return _EDGE_ORDER[(self.edge_index + 2) % 4]

    @property
    def step(self) -> Tuple[int, int]:
        """(d_row, d_col) offset of the neighbor on this side."""
        return _STEPS[self]


_EDGE_ORDER: Tuple[Direction, ...] = (
    Direction.TOP,
    Direction.RIGHT,
    Direction.BOTTOM,
    Direction.LEFT,
)

_STEPS = {
    Direction.TOP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.BOTTOM: (1, 0),
    Direction.LEFT: (0, -1),
}

# Neighbor visiting order during a propagation sweep.
ORTHOGONAL_DIRECTIONS: Tuple[Direction, ...] = _EDGE_ORDER


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def area(self) -> int:
        return self.rows * self.cols
