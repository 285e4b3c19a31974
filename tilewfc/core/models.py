"""Data models describing tiles and the tile catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from .constants import Direction
from .exceptions import CatalogError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

Socket = Union[int, str]


class EdgeSignature(NamedTuple):
    """Three sockets describing one side of a tile, read clockwise."""

    start: Socket
    mid: Socket
    end: Socket

    def mirrors(self, other: "EdgeSignature") -> bool:
        """True when ``other`` is this edge reversed, i.e. the two edges abut seamlessly."""
        return self.start == other.end and self.mid == other.mid and self.end == other.start


@dataclass(frozen=True)
class TileVariant:
    """A tile image together with its four edge signatures (top, right, bottom, left).

    ``image`` is the tile's identity: a file name for plain tilesets or the
    sprite id for spritesheets, where ``offset`` locates the sprite's top-left
    corner on the sheet. Only ``image`` takes part in equality.
    """

    image: str
    edges: Tuple[EdgeSignature, EdgeSignature, EdgeSignature, EdgeSignature] = field(compare=False)
    offset: Optional[Tuple[int, int]] = field(default=None, compare=False)

    def edge(self, direction: Direction) -> EdgeSignature:
        return self.edges[direction.edge_index]


@dataclass(frozen=True)
class TileCatalog:
    """Immutable, index-addressable collection of tile variants.

    Cells refer to variants by their index in :attr:`variants`. ``sheet`` names
    the spritesheet image when the variants are sprites cut from it.
    """

    size: int
    variants: Tuple[TileVariant, ...]
    sheet: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.variants:
            raise CatalogError("Tile catalog is empty")

    @classmethod
    def from_variants(
        cls, size: int, variants: Iterable[TileVariant], sheet: Optional[str] = None
    ) -> "TileCatalog":
        """Build a catalog, dropping variants whose image was already seen."""

        unique: List[TileVariant] = []
        seen: Dict[str, TileVariant] = {}
        for variant in variants:
            existing = seen.get(variant.image)
            if existing is not None:
                if existing.edges != variant.edges:
                    LOGGER.warning(
                        "Dropping duplicate tile '%s' with mismatched edges", variant.image
                    )
                continue
            seen[variant.image] = variant
            unique.append(variant)
        return cls(size=size, variants=tuple(unique), sheet=sheet)

    def __len__(self) -> int:
        return len(self.variants)

    def __getitem__(self, index: int) -> TileVariant:
        return self.variants[index]

    def __iter__(self) -> Iterator[TileVariant]:
        return iter(self.variants)

    def indices(self) -> range:
        return range(len(self.variants))

    def index_of(self, image: str) -> int:
        for index, variant in enumerate(self.variants):
            if variant.image == image:
                return index
        raise KeyError(image)

    def to_jsonable(self) -> dict:
        if self.sheet is not None:
            return {
                "size": self.size,
                "image": self.sheet,
                "sprites": [
                    {
                        "id": variant.image,
                        "offset": list(variant.offset or (0, 0)),
                        "sockets": [list(edge) for edge in variant.edges],
                    }
                    for variant in self.variants
                ],
            }
        return {
            "size": self.size,
            "tiles": [
                {"image": variant.image, "sockets": [list(edge) for edge in variant.edges]}
                for variant in self.variants
            ],
        }
