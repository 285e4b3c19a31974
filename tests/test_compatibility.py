import unittest

from tilewfc.core.constants import ORTHOGONAL_DIRECTIONS, Direction
from tilewfc.core.models import EdgeSignature, TileCatalog, TileVariant
from tilewfc.engine.compatibility import AdjacencyRules, compatible


BLANK = EdgeSignature(0, 0, 0)
ROAD = EdgeSignature(0, 1, 0)


def tile(image, top, right, bottom, left):
    return TileVariant(
        image=image,
        edges=(EdgeSignature(*top), EdgeSignature(*right), EdgeSignature(*bottom), EdgeSignature(*left)),
    )


def marching_catalog() -> TileCatalog:
    variants = []
    for mask in range(16):
        edges = tuple(ROAD if mask >> bit & 1 else BLANK for bit in range(4))
        variants.append(TileVariant(image=f"tile_{mask:02d}.png", edges=edges))
    return TileCatalog(size=8, variants=tuple(variants))


class DirectionTests(unittest.TestCase):
    def test_opposites(self) -> None:
        self.assertIs(Direction.TOP.opposite, Direction.BOTTOM)
        self.assertIs(Direction.RIGHT.opposite, Direction.LEFT)
        self.assertIs(Direction.BOTTOM.opposite, Direction.TOP)
        self.assertIs(Direction.LEFT.opposite, Direction.RIGHT)

    def test_edge_order_and_steps(self) -> None:
        self.assertEqual([d.edge_index for d in ORTHOGONAL_DIRECTIONS], [0, 1, 2, 3])
        self.assertEqual(Direction.TOP.step, (-1, 0))
        self.assertEqual(Direction.RIGHT.step, (0, 1))
        self.assertEqual(Direction.BOTTOM.step, (1, 0))
        self.assertEqual(Direction.LEFT.step, (0, -1))


class EdgeSignatureTests(unittest.TestCase):
    def test_mirror_reads_other_edge_reversed(self) -> None:
        self.assertTrue(EdgeSignature(1, 2, 3).mirrors(EdgeSignature(3, 2, 1)))
        self.assertFalse(EdgeSignature(1, 2, 3).mirrors(EdgeSignature(1, 2, 3)))

    def test_symmetric_edge_mirrors_itself(self) -> None:
        self.assertTrue(ROAD.mirrors(ROAD))

    def test_string_sockets(self) -> None:
        self.assertTrue(EdgeSignature("a", "b", "c").mirrors(EdgeSignature("c", "b", "a")))
        self.assertFalse(EdgeSignature("a", "b", "c").mirrors(EdgeSignature("c", "x", "a")))


class CompatibleTests(unittest.TestCase):
    def test_right_edge_pairs_with_left_edge(self) -> None:
        a = tile("a.png", (0, 0, 0), (1, 2, 3), (0, 0, 0), (4, 4, 4))
        b = tile("b.png", (0, 0, 0), (5, 5, 5), (0, 0, 0), (3, 2, 1))
        self.assertTrue(compatible(a, b, Direction.RIGHT))
        self.assertTrue(compatible(b, a, Direction.LEFT))
        self.assertFalse(compatible(b, a, Direction.RIGHT))
        self.assertFalse(compatible(a, a, Direction.RIGHT))

    def test_top_edge_pairs_with_bottom_edge(self) -> None:
        a = tile("a.png", (1, "x", 2), (0, 0, 0), (0, 0, 0), (0, 0, 0))
        b = tile("b.png", (0, 0, 0), (0, 0, 0), (2, "x", 1), (0, 0, 0))
        self.assertTrue(compatible(a, b, Direction.TOP))
        self.assertTrue(compatible(b, a, Direction.BOTTOM))
        self.assertFalse(compatible(a, a, Direction.TOP))

    def test_symmetry_over_catalog(self) -> None:
        catalog = marching_catalog()
        extra = [
            tile("odd_1.png", (1, 2, 3), (3, 2, 1), ("a", 0, "b"), ("b", 0, "a")),
            tile("odd_2.png", (3, 2, 1), (1, 2, 3), ("b", 0, "a"), ("a", 0, "b")),
        ]
        variants = list(catalog.variants) + extra
        for a in variants:
            for b in variants:
                self.assertEqual(
                    compatible(a, b, Direction.RIGHT), compatible(b, a, Direction.LEFT)
                )
                self.assertEqual(
                    compatible(a, b, Direction.TOP), compatible(b, a, Direction.BOTTOM)
                )


class AdjacencyRulesTests(unittest.TestCase):
    def test_table_matches_predicate(self) -> None:
        catalog = TileCatalog.from_variants(
            8,
            list(marching_catalog().variants)
            + [tile("odd.png", (1, 2, 3), (3, 2, 1), (0, 1, 0), (0, 0, 0))],
        )
        rules = AdjacencyRules(catalog)
        for direction in ORTHOGONAL_DIRECTIONS:
            for index, variant in enumerate(catalog.variants):
                expected = {
                    other_index
                    for other_index, other in enumerate(catalog.variants)
                    if compatible(variant, other, direction)
                }
                self.assertEqual(rules.allowed(index, direction), expected)

    def test_supported_checks_any_neighbor_option(self) -> None:
        catalog = marching_catalog()
        rules = AdjacencyRules(catalog)
        # tile_02 has a road on its right edge; tile_08 has a road on its left.
        self.assertTrue(rules.supported(2, {0, 8}, Direction.RIGHT))
        self.assertFalse(rules.supported(2, {0, 1}, Direction.RIGHT))
        self.assertFalse(rules.supported(2, set(), Direction.RIGHT))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
