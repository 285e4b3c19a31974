"""Tileset loading into an in-memory :class:`TileCatalog`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Sequence, Tuple

from ..core.exceptions import CatalogError
from ..core.models import EdgeSignature, Socket, TileCatalog, TileVariant
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

EDGE_COUNT = 4
SOCKETS_PER_EDGE = 3


def load_catalog(path: Path | str) -> TileCatalog:
    """Read a ``tileset.json`` file.

    Two shapes are accepted, both with sockets in top, right, bottom, left
    order. A tileset lists one image per tile::

        {"size": 32, "tiles": [{"image": "a.png", "sockets": [[0, 1, 0], ...]}]}

    A spritesheet cuts every tile from a single image::

        {"size": 32, "image": "sheet.png",
         "sprites": [{"id": "road", "offset": [32, 0], "sockets": [[0, 1, 0], ...]}]}
    """

    source = Path(path)
    if not source.exists():
        raise CatalogError(f"Missing tileset: {source}")
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Tileset {source} is not valid JSON: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Tileset {source} could not be read: {exc}") from exc

    catalog = catalog_from_dict(data)
    LOGGER.info("Loaded %d tiles (size %spx) from %s", len(catalog), catalog.size, source)
    return catalog


def catalog_from_dict(data: Mapping[str, Any]) -> TileCatalog:
    if not isinstance(data, Mapping):
        raise CatalogError("Tileset root must be an object")
    size = data.get("size")
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        raise CatalogError(f"Tileset 'size' must be a positive integer, got {size!r}")

    if "sprites" in data:
        if "tiles" in data:
            raise CatalogError("Tileset must define either 'tiles' or 'sprites', not both")
        return _spritesheet_from_dict(size, data)

    tiles = data.get("tiles")
    if not isinstance(tiles, list) or not tiles:
        raise CatalogError("Tileset 'tiles' must be a non-empty list")

    variants: List[TileVariant] = []
    for position, record in enumerate(tiles):
        variants.append(_parse_tile(position, record))
    return TileCatalog.from_variants(size, variants)


def _spritesheet_from_dict(size: int, data: Mapping[str, Any]) -> TileCatalog:
    sheet = data.get("image")
    if not isinstance(sheet, str) or not sheet:
        raise CatalogError("Spritesheet is missing its 'image' reference")
    sprites = data.get("sprites")
    if not isinstance(sprites, list) or not sprites:
        raise CatalogError("Spritesheet 'sprites' must be a non-empty list")

    variants: List[TileVariant] = []
    for position, record in enumerate(sprites):
        if not isinstance(record, Mapping):
            raise CatalogError(f"Sprite #{position} must be an object")
        sprite_id = record.get("id")
        if not isinstance(sprite_id, str) or not sprite_id:
            raise CatalogError(f"Sprite #{position} is missing its 'id'")
        offset = _parse_offset(position, sprite_id, record.get("offset"))
        edges = _parse_sockets(f"Sprite #{position} ('{sprite_id}')", record.get("sockets"))
        variants.append(TileVariant(image=sprite_id, edges=edges, offset=offset))
    return TileCatalog.from_variants(size, variants, sheet=sheet)


def _parse_offset(position: int, sprite_id: str, offset: Any) -> Tuple[int, int]:
    if (
        not isinstance(offset, Sequence)
        or isinstance(offset, str)
        or len(offset) != 2
        or any(not isinstance(v, int) or isinstance(v, bool) or v < 0 for v in offset)
    ):
        raise CatalogError(
            f"Sprite #{position} ('{sprite_id}') needs an [x, y] offset of non-negative integers, got {offset!r}"
        )
    return offset[0], offset[1]


def _parse_tile(position: int, record: Any) -> TileVariant:
    if not isinstance(record, Mapping):
        raise CatalogError(f"Tile #{position} must be an object")
    image = record.get("image")
    if not isinstance(image, str) or not image:
        raise CatalogError(f"Tile #{position} is missing its 'image' reference")
    edges = _parse_sockets(f"Tile #{position} ('{image}')", record.get("sockets"))
    return TileVariant(image=image, edges=edges)


def _parse_sockets(label: str, sockets: Any):
    if not isinstance(sockets, Sequence) or isinstance(sockets, str) or len(sockets) != EDGE_COUNT:
        raise CatalogError(f"{label} needs exactly {EDGE_COUNT} socket triples")
    return tuple(_parse_edge(label, edge) for edge in sockets)


def _parse_edge(label: str, edge: Any) -> EdgeSignature:
    if not isinstance(edge, Sequence) or isinstance(edge, str) or len(edge) != SOCKETS_PER_EDGE:
        raise CatalogError(f"{label} has an edge that is not a {SOCKETS_PER_EDGE}-socket list: {edge!r}")
    for socket in edge:
        if not isinstance(socket, (int, str)) or isinstance(socket, bool):
            raise CatalogError(f"{label} has invalid socket {socket!r}")
    sockets: List[Socket] = list(edge)
    return EdgeSignature(*sockets)
