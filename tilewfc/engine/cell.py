"""Grid cell holding the set of tiles it may still become."""

from __future__ import annotations

import random
from typing import Iterable, Optional, Set

from ..core.constants import Direction
from ..core.exceptions import CellStateError, ContradictionError
from ..core.models import TileCatalog, TileVariant
from .compatibility import AdjacencyRules


class Cell:
    """Possibility set over catalog indices for one grid position.

    The set only ever shrinks through :meth:`constrain`; :meth:`collapse`
    replaces it with a single member drawn from the current set.
    """

    __slots__ = ("rules", "possibilities")

    def __init__(self, rules: AdjacencyRules, possibilities: Optional[Iterable[int]] = None) -> None:
        self.rules = rules
        if possibilities is None:
            self.possibilities: Set[int] = set(rules.catalog.indices())
        else:
            self.possibilities = set(possibilities)

    @property
    def catalog(self) -> TileCatalog:
        return self.rules.catalog

    def __repr__(self) -> str:
        return f"Cell({sorted(self.possibilities)!r})"

    def __len__(self) -> int:
        return len(self.possibilities)

    def entropy(self) -> int:
        if not self.possibilities:
            raise ContradictionError("Entropy of a cell with no remaining tiles")
        return len(self.possibilities) - 1

    def is_collapsed(self) -> bool:
        return len(self.possibilities) == 1

    def is_contradiction(self) -> bool:
        return not self.possibilities

    def constrain(self, neighbor: "Cell", direction: Direction) -> bool:
        """Drop candidates that no tile left in ``neighbor`` can sit against.

        ``neighbor`` lies on the ``direction`` side of this cell. Returns
        whether anything was removed. Collapsed cells are left untouched.
        """

        if self.is_collapsed():
            return False

        unreachable = [
            index
            for index in self.possibilities
            if not self.rules.supported(index, neighbor.possibilities, direction)
        ]
        for index in unreachable:
            self.possibilities.discard(index)
        return bool(unreachable)

    def collapse(self, rng: random.Random) -> int:
        """Commit to one remaining candidate chosen uniformly at random."""

        if not self.possibilities:
            raise ContradictionError("Cannot collapse a cell with no remaining tiles")
        chosen = rng.choice(sorted(self.possibilities))
        self.possibilities = {chosen}
        return chosen

    @property
    def index(self) -> int:
        if not self.is_collapsed():
            raise CellStateError(f"Cell is not collapsed ({len(self.possibilities)} options left)")
        return next(iter(self.possibilities))

    @property
    def variant(self) -> TileVariant:
        return self.catalog[self.index]

    @property
    def image(self) -> str:
        return self.variant.image
