"""Edge compatibility between tile variants."""

from __future__ import annotations

from typing import AbstractSet, Dict, FrozenSet, List

from ..core.constants import ORTHOGONAL_DIRECTIONS, Direction
from ..core.models import TileCatalog, TileVariant


def compatible(tile: TileVariant, other: TileVariant, direction: Direction) -> bool:
    """Return whether ``other`` may sit next to ``tile`` on its ``direction`` side.

    The facing edges must be mirror images: ``tile``'s right edge is read
    against ``other``'s left edge reversed, and so on.
    """

    return tile.edge(direction).mirrors(other.edge(direction.opposite))


class AdjacencyRules:
    """Precomputed ``compatible`` results for every pair of catalog indices."""

    def __init__(self, catalog: TileCatalog) -> None:
        self.catalog = catalog
        self._allowed: Dict[Direction, List[FrozenSet[int]]] = {}
        for direction in ORTHOGONAL_DIRECTIONS:
            self._allowed[direction] = [
                frozenset(
                    other_index
                    for other_index, other in enumerate(catalog.variants)
                    if compatible(tile, other, direction)
                )
                for tile in catalog.variants
            ]

    def allowed(self, index: int, direction: Direction) -> FrozenSet[int]:
        """Indices that may be placed on the ``direction`` side of tile ``index``."""
        return self._allowed[direction][index]

    def supported(self, index: int, neighbor_options: AbstractSet[int], direction: Direction) -> bool:
        return not self._allowed[direction][index].isdisjoint(neighbor_options)
