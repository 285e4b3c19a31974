"""Wave function collapse tile generator.

This package exposes the public API surface via:

- ``tilewfc.engine.generator.WFCGenerator``: drives collapse and propagation.
- ``tilewfc.engine.grid.TileGrid``: the cell array and its propagation sweep.
- ``tilewfc.io.catalog.load_catalog``: reads a tileset into a ``TileCatalog``.
"""

from .core.models import EdgeSignature, TileCatalog, TileVariant
from .engine.generator import GenerationResult, GeneratorConfig, WFCGenerator
from .engine.grid import GridConfig, TileGrid
from .io.catalog import catalog_from_dict, load_catalog

__all__ = [
    "EdgeSignature",
    "TileCatalog",
    "TileVariant",
    "GenerationResult",
    "GeneratorConfig",
    "WFCGenerator",
    "GridConfig",
    "TileGrid",
    "catalog_from_dict",
    "load_catalog",
]

__version__ = "0.1.0"
