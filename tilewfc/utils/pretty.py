"""Pretty-print helpers for tile grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.cell import Cell
    from ..engine.generator import GenerationResult
    from ..engine.grid import TileGrid


UNRESOLVED = "."
CONTRADICTION = "!"


def cell_symbol(cell: Cell) -> str:
    if cell.is_contradiction():
        return CONTRADICTION
    if cell.is_collapsed():
        return str(cell.index)
    return UNRESOLVED


def format_grid(grid: TileGrid) -> str:
    width = grid.width
    header_cells = [f"{c:>3}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * max(0, 4 * width - 1))
    for r, row in enumerate(grid.cells):
        row_render = " ".join(f"{cell_symbol(cell):>3}" for cell in row)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def pretty_print_grid(grid: TileGrid, *, label: str | None = None, stream=None) -> None:
    """Print the tile grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_generation_stats(result: GenerationResult, *, stream=None) -> None:
    """Print grid + stats for a completed run."""

    stream = stream or sys.stdout
    grid = result.grid
    print(format_grid(grid), file=stream)

    total_cells = grid.width * grid.height
    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.width} x {grid.height} ({total_cells} cells)", file=stream)
    print(f"  Catalog:       {len(grid.catalog)} tiles", file=stream)
    print(f"  Steps:         {result.steps}", file=stream)
    print(f"  Attempts:      {result.attempts}", file=stream)

    usage = grid.tile_usage()
    if usage:
        print(file=stream)
        print("--- Tiles ---", file=stream)
        for image, count in sorted(usage.items(), key=lambda item: (-item[1], item[0])):
            index = grid.catalog.index_of(image)
            print(f"  {index:>3} {image:<24} {count:>4} ({count / total_cells * 100:5.1f}%)", file=stream)

    if result.validation_messages:
        print(file=stream)
        print("--- Validation ---", file=stream)
        for msg in result.validation_messages:
            print(f"  {msg}", file=stream)

    if result.seed is not None:
        print(file=stream)
        print(f"Seed: {result.seed}", file=stream)
