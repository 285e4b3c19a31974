"""Compose a resolved grid into a raster image with Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageChops

from ..core.exceptions import WFCError
from ..core.models import TileVariant
from ..engine.grid import TileGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

RGB = Tuple[int, int, int]
Tint = Union[bool, RGB, None]

BACKGROUND: RGB = (190, 120, 12)


def resolve_tint(grid: TileGrid, tint: Tint) -> Optional[RGB]:
    """``True`` picks a random colour from the grid RNG, a tuple is used as is."""

    if tint is None or tint is False:
        return None
    if tint is True:
        return (grid.rng.randrange(256), grid.rng.randrange(256), grid.rng.randrange(256))
    return tint


class TileImageCache:
    """Loads each tile image once and scales it to the catalog tile size.

    With a ``sheet`` every tile is cut from that one image at its variant's
    offset instead of being read from its own file.
    """

    def __init__(self, tiles_dir: Path | str, size: int, sheet: Optional[str] = None) -> None:
        self.tiles_dir = Path(tiles_dir)
        self.size = size
        self.sheet = sheet
        self._sheet_image: Optional[Image.Image] = None
        self._images: Dict[str, Image.Image] = {}

    def get(self, variant: TileVariant) -> Image.Image:
        cached = self._images.get(variant.image)
        if cached is None:
            if self.sheet is not None:
                cached = self._cut_sprite(variant)
            else:
                cached = self._open(variant.image)
                if cached.size != (self.size, self.size):
                    cached = cached.resize((self.size, self.size), resample=Image.NEAREST)
            self._images[variant.image] = cached
        return cached

    def _open(self, name: str) -> Image.Image:
        path = self.tiles_dir / name
        if not path.exists():
            raise WFCError(f"Missing tile image: {path}")
        try:
            with Image.open(path) as source:
                return source.convert("RGBA")
        except OSError as exc:
            raise WFCError(f"Unreadable tile image: {path}") from exc

    def _cut_sprite(self, variant: TileVariant) -> Image.Image:
        if self._sheet_image is None:
            self._sheet_image = self._open(self.sheet)
        x, y = variant.offset or (0, 0)
        width, height = self._sheet_image.size
        if x + self.size > width or y + self.size > height:
            raise WFCError(
                f"Sprite '{variant.image}' at ({x},{y}) lies outside the {width}x{height} spritesheet"
            )
        return self._sheet_image.crop((x, y, x + self.size, y + self.size))


def render_grid(grid: TileGrid, tiles_dir: Path | str, tint: Tint = None) -> Image.Image:
    size = grid.catalog.size
    canvas = Image.new("RGB", (grid.width * size, grid.height * size), BACKGROUND)
    cache = TileImageCache(tiles_dir, size, sheet=grid.catalog.sheet)

    for row, col, cell in grid.iter_cells():
        if not cell.is_collapsed():
            continue
        tile = cache.get(cell.variant)
        canvas.paste(tile, (col * size, row * size), tile)

    colour = resolve_tint(grid, tint)
    if colour is not None:
        canvas = ImageChops.multiply(canvas, Image.new("RGB", canvas.size, colour))
    return canvas


def save_render(grid: TileGrid, tiles_dir: Path | str, output: Path | str, tint: Tint = None) -> Path:
    destination = Path(output)
    destination.parent.mkdir(parents=True, exist_ok=True)
    render_grid(grid, tiles_dir, tint=tint).save(destination)
    LOGGER.info("Rendered %sx%s grid to %s", grid.width, grid.height, destination)
    return destination
