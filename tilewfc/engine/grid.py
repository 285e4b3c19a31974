"""Grid representation, constraint propagation and collapse selection."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, ORTHOGONAL_DIRECTIONS, Bounds, Direction
from ..core.exceptions import ContradictionError
from ..core.models import TileCatalog
from ..utils.logger import get_logger
from .cell import Cell
from .compatibility import AdjacencyRules


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    rng_seed: Optional[int] = None
    random_start: bool = False

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {self.width}x{self.height}")

    def bounds(self) -> Bounds:
        return Bounds(rows=self.height, cols=self.width)


@dataclass
class Selection:
    """The cell chosen for the next collapse."""

    row: int
    col: int
    cell: Cell


class TileGrid:
    """Encapsulates the cell array and drives propagation over it."""

    def __init__(
        self,
        catalog: TileCatalog,
        config: Optional[GridConfig] = None,
        rng: Optional[random.Random] = None,
        rules: Optional[AdjacencyRules] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or GridConfig()
        self.bounds = self.config.bounds()
        self.rng = rng or random.Random(self.config.rng_seed)
        self.rules = rules or AdjacencyRules(catalog)
        self.cells: List[List[Cell]] = [
            [Cell(self.rules) for _ in range(self.bounds.cols)] for _ in range(self.bounds.rows)
        ]
        self.finished = False
        self.steps_taken = 0
        if self.config.random_start and self.bounds.area:
            self._collapse_random_cell()

    # ------------------------------------------------------------------
    # Initialization helpers
    # ------------------------------------------------------------------
    def _collapse_random_cell(self) -> None:
        row = self.rng.randrange(self.bounds.rows)
        col = self.rng.randrange(self.bounds.cols)
        chosen = self.cells[row][col].collapse(self.rng)
        LOGGER.debug("Random start at (%s,%s) with tile %s", row, col, chosen)
        self.propagate()

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.bounds.cols

    @property
    def height(self) -> int:
        return self.bounds.rows

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for row, cells in enumerate(self.cells):
            for col, cell in enumerate(cells):
                yield row, col, cell

    def neighbors(self, row: int, col: int) -> Iterator[Tuple[Direction, Cell]]:
        """Yield the in-bounds neighbors of a position in sweep order."""

        for direction in ORTHOGONAL_DIRECTIONS:
            dr, dc = direction.step
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield direction, self.cells[nr][nc]

    @property
    def collapsed_count(self) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.is_collapsed())

    def is_resolved(self) -> bool:
        return all(cell.is_collapsed() for _, _, cell in self.iter_cells())

    # ------------------------------------------------------------------
    # Propagation and collapse
    # ------------------------------------------------------------------
    def propagate(self) -> bool:
        """Sweep the grid until no cell can be narrowed any further.

        Returns whether any cell changed. Raises :class:`ContradictionError`
        as soon as a cell loses its last candidate.
        """

        changed = False
        sweeps = 0
        while True:
            sweeps += 1
            constrained = False
            for row, col, cell in self.iter_cells():
                for direction, neighbor in self.neighbors(row, col):
                    if cell.constrain(neighbor, direction):
                        constrained = True
                        if cell.is_contradiction():
                            raise ContradictionError(
                                f"Cell ({row},{col}) has no tile compatible with its {direction.value.lower()} neighbor",
                                position=(row, col),
                            )
            if not constrained:
                break
            changed = True
        LOGGER.debug("Propagation settled after %d sweep(s)", sweeps)
        self._check_collapsed_pairs()
        return changed

    def _check_collapsed_pairs(self) -> None:
        # Collapsed cells are never constrained, so two of them can settle
        # side by side without fitting. Right and bottom cover each pair once.
        for row, col, cell in self.iter_cells():
            if not cell.is_collapsed():
                continue
            for direction in (Direction.RIGHT, Direction.BOTTOM):
                dr, dc = direction.step
                nr, nc = row + dr, col + dc
                if not self.bounds.contains(nr, nc):
                    continue
                neighbor = self.cells[nr][nc]
                if neighbor.is_collapsed() and not self.rules.supported(
                    cell.index, neighbor.possibilities, direction
                ):
                    raise ContradictionError(
                        f"Tile '{cell.image}' at ({row},{col}) does not fit "
                        f"'{neighbor.image}' at ({nr},{nc})",
                        position=(nr, nc),
                    )

    def next_lowest_entropy(self) -> Optional[Selection]:
        """Return the first uncollapsed cell with the fewest candidates, or ``None``."""

        best: Optional[Selection] = None
        lowest = len(self.catalog)
        for row, col, cell in self.iter_cells():
            if cell.is_collapsed():
                continue
            entropy = cell.entropy()
            if entropy < lowest:
                lowest = entropy
                best = Selection(row=row, col=col, cell=cell)
        return best

    def step(self) -> None:
        """Collapse one cell and propagate, or mark the grid finished."""

        if self.finished:
            return
        selection = self.next_lowest_entropy()
        if selection is None:
            self.finished = True
            LOGGER.debug("Grid resolved after %d step(s)", self.steps_taken)
            return

        chosen = selection.cell.collapse(self.rng)
        self.steps_taken += 1
        LOGGER.debug(
            "Step %d: collapsed (%s,%s) to '%s'",
            self.steps_taken,
            selection.row,
            selection.col,
            self.catalog[chosen].image,
        )
        self.propagate()

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def entropy_map(self) -> List[List[Optional[int]]]:
        """Per-cell entropy, ``None`` where the cell is in contradiction."""

        return [
            [None if cell.is_contradiction() else cell.entropy() for cell in row]
            for row in self.cells
        ]

    def to_jsonable(self) -> List[List[Optional[str]]]:
        serialized: List[List[Optional[str]]] = []
        for row in self.cells:
            serialized.append([cell.image if cell.is_collapsed() else None for cell in row])
        return serialized

    def tile_usage(self) -> Dict[str, int]:
        usage: Dict[str, int] = {}
        for _, _, cell in self.iter_cells():
            if cell.is_collapsed():
                usage[cell.image] = usage.get(cell.image, 0) + 1
        return usage
