"""Deterministic rule validation for generated tile grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.constants import Direction
from ..core.exceptions import ValidationError
from .compatibility import compatible
from .grid import TileGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs deterministic validation over the final grid."""

    def validate(self, grid: TileGrid) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_all_collapsed(grid)
            self._check_adjacency(grid)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_all_collapsed(self, grid: TileGrid) -> None:
        for row, col, cell in grid.iter_cells():
            if not cell.is_collapsed():
                raise ValidationError(
                    f"Cell ({row},{col}) is unresolved with {len(cell)} option(s) left"
                )

    def _check_adjacency(self, grid: TileGrid) -> None:
        # Checking right and bottom neighbors covers every adjacent pair once.
        for row, col, cell in grid.iter_cells():
            for direction in (Direction.RIGHT, Direction.BOTTOM):
                dr, dc = direction.step
                nr, nc = row + dr, col + dc
                if not grid.bounds.contains(nr, nc):
                    continue
                neighbor = grid.cell(nr, nc)
                if not compatible(cell.variant, neighbor.variant, direction):
                    raise ValidationError(
                        f"Tile '{cell.image}' at ({row},{col}) does not fit "
                        f"'{neighbor.image}' at ({nr},{nc})"
                    )
