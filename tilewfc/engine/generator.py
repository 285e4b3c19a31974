"""Main tile generation orchestration.

A run alternates two phases until every cell is resolved:
  1. Collapse: commit the least-certain unresolved cell to one tile.
  2. Propagate: narrow every other cell until the grid reaches a fixed point.

There is no backtracking. A contradiction aborts the attempt; with
``retry_limit > 1`` the grid is rebuilt from scratch with a fresh seed.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..core.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH
from ..core.exceptions import ContradictionError, IterationBudgetError, ValidationError
from ..core.models import TileCatalog
from .compatibility import AdjacencyRules
from .grid import GridConfig, TileGrid
from ..utils.logger import get_logger
from .validator import GridValidator


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: Optional[int] = None
    framerate: Optional[float] = None
    max_iterations: Optional[int] = None
    timeout_seconds: Optional[float] = None
    retry_limit: int = 1
    random_start: bool = False

    def __post_init__(self) -> None:
        if self.retry_limit < 1:
            raise ValueError("retry_limit must be at least 1")
        if self.framerate is not None and self.framerate <= 0:
            raise ValueError("framerate must be positive")

    def to_grid_config(self, seed_override: Optional[int] = None) -> GridConfig:
        return GridConfig(
            width=self.width,
            height=self.height,
            rng_seed=seed_override if seed_override is not None else self.seed,
            random_start=self.random_start,
        )

    def step_budget(self) -> int:
        # One collapse per cell plus the step that observes completion.
        if self.max_iterations is not None:
            return self.max_iterations
        return self.width * self.height + 1


@dataclass
class GenerationResult:
    grid: TileGrid
    steps: int
    attempts: int
    seed: Optional[int] = None
    attempt_seeds: List[int] = field(default_factory=list)
    validation_messages: List[str] = field(default_factory=list)


class WFCGenerator:
    """High-level orchestrator: repeated collapse and propagation until resolved."""

    def __init__(self, catalog: TileCatalog, config: Optional[GeneratorConfig] = None) -> None:
        self.catalog = catalog
        self.config = config or GeneratorConfig()
        self.rng = random.Random(self.config.seed)
        self.rules = AdjacencyRules(catalog)
        self.validator = GridValidator()
        self.grid: Optional[TileGrid] = None
        self._attempt_seeds: List[int] = []

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def run(self) -> GenerationResult:
        for _ in self.steps():
            pass
        return self.finish()

    def steps(self) -> Iterator[TileGrid]:
        """Drive the generation loop, yielding the grid after every step."""

        self._attempt_seeds = []
        last_error: Optional[ContradictionError] = None
        for attempt in range(1, self.config.retry_limit + 1):
            LOGGER.info(
                "Generation attempt %s/%s (%sx%s, %d tiles)",
                attempt,
                self.config.retry_limit,
                self.config.width,
                self.config.height,
                len(self.catalog),
            )
            try:
                self.grid = self._new_grid(attempt)
                yield from self._drive(self.grid)
                return
            except ContradictionError as exc:
                last_error = exc
                LOGGER.warning("Generation attempt failed: %s", exc)
                continue
        raise ContradictionError(
            f"No consistent grid after {self.config.retry_limit} attempt(s): {last_error}",
            position=last_error.position if last_error else None,
        ) from last_error

    # ------------------------------------------------------------------
    # Attempt handling
    # ------------------------------------------------------------------
    def _new_grid(self, attempt: int) -> TileGrid:
        # The first attempt uses the configured seed so single-attempt runs
        # reproduce exactly; later attempts draw theirs from the master RNG.
        if attempt == 1 and self.config.seed is not None:
            grid_seed = self.config.seed
        else:
            grid_seed = self.rng.randint(0, 1_000_000)
        self._attempt_seeds.append(grid_seed)
        grid_config = self.config.to_grid_config(seed_override=grid_seed)
        return TileGrid(self.catalog, grid_config, rules=self.rules)

    def _drive(self, grid: TileGrid) -> Iterator[TileGrid]:
        budget = self.config.step_budget()
        deadline = (
            time.monotonic() + self.config.timeout_seconds
            if self.config.timeout_seconds is not None
            else None
        )
        iterations = 0
        while not grid.finished:
            if iterations >= budget:
                raise IterationBudgetError(f"Grid not resolved within {budget} steps")
            if deadline is not None and time.monotonic() > deadline:
                raise IterationBudgetError(
                    f"Grid not resolved within {self.config.timeout_seconds:.1f}s"
                )
            grid.step()
            iterations += 1
            yield grid

    def finish(self) -> GenerationResult:
        """Validate the resolved grid of the last attempt and package the result."""

        grid = self.grid
        if grid is None or not grid.finished:
            raise ValidationError("Generation has not finished")
        validation = self.validator.validate(grid)
        if not validation.ok:
            raise ValidationError(f"Grid validation failed: {validation.messages}")
        LOGGER.info(
            "Tile generation completed in %d step(s) over %d attempt(s)",
            grid.steps_taken,
            len(self._attempt_seeds),
        )
        return GenerationResult(
            grid=grid,
            steps=grid.steps_taken,
            attempts=len(self._attempt_seeds),
            seed=self.config.seed,
            attempt_seeds=list(self._attempt_seeds),
            validation_messages=validation.messages,
        )
