import random
import unittest

from tilewfc.core.constants import ORTHOGONAL_DIRECTIONS, Direction
from tilewfc.core.exceptions import CellStateError, ContradictionError
from tilewfc.core.models import EdgeSignature, TileCatalog, TileVariant
from tilewfc.engine.cell import Cell
from tilewfc.engine.compatibility import AdjacencyRules


def marching_catalog() -> TileCatalog:
    blank, road = EdgeSignature(0, 0, 0), EdgeSignature(0, 1, 0)
    variants = []
    for mask in range(16):
        edges = tuple(road if mask >> bit & 1 else blank for bit in range(4))
        variants.append(TileVariant(image=f"tile_{mask:02d}.png", edges=edges))
    return TileCatalog(size=8, variants=tuple(variants))


def has_road(index: int, direction: Direction) -> bool:
    return bool(index >> direction.edge_index & 1)


class CellStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rules = AdjacencyRules(marching_catalog())

    def test_new_cell_holds_whole_catalog(self) -> None:
        cell = Cell(self.rules)
        self.assertEqual(cell.possibilities, set(range(16)))
        self.assertEqual(cell.entropy(), 15)
        self.assertFalse(cell.is_collapsed())
        self.assertFalse(cell.is_contradiction())

    def test_single_option_is_collapsed(self) -> None:
        cell = Cell(self.rules, [5])
        self.assertTrue(cell.is_collapsed())
        self.assertEqual(cell.entropy(), 0)
        self.assertEqual(cell.index, 5)
        self.assertEqual(cell.image, "tile_05.png")

    def test_empty_cell_is_contradiction(self) -> None:
        cell = Cell(self.rules, [])
        self.assertTrue(cell.is_contradiction())
        self.assertFalse(cell.is_collapsed())
        with self.assertRaises(ContradictionError):
            cell.entropy()
        with self.assertRaises(ContradictionError):
            cell.collapse(random.Random(0))

    def test_unresolved_cell_has_no_variant(self) -> None:
        with self.assertRaises(CellStateError):
            Cell(self.rules).variant


class CellConstrainTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rules = AdjacencyRules(marching_catalog())

    def test_constrain_keeps_only_supported_candidates(self) -> None:
        cell = Cell(self.rules)
        # Neighbor on the right only offers tiles with a road on their left edge.
        neighbor = Cell(self.rules, [8, 9])
        self.assertTrue(cell.constrain(neighbor, Direction.RIGHT))
        self.assertEqual(cell.possibilities, {i for i in range(16) if has_road(i, Direction.RIGHT)})

    def test_constrain_reports_no_change(self) -> None:
        cell = Cell(self.rules)
        neighbor = Cell(self.rules)
        self.assertFalse(cell.constrain(neighbor, Direction.TOP))
        self.assertEqual(len(cell), 16)

    def test_collapsed_cell_is_never_constrained(self) -> None:
        cell = Cell(self.rules, [0])
        neighbor = Cell(self.rules, [15])
        self.assertFalse(cell.constrain(neighbor, Direction.LEFT))
        self.assertEqual(cell.possibilities, {0})

    def test_constrain_against_empty_neighbor_empties_cell(self) -> None:
        cell = Cell(self.rules, [1, 2, 3])
        self.assertTrue(cell.constrain(Cell(self.rules, []), Direction.BOTTOM))
        self.assertTrue(cell.is_contradiction())

    def test_constrain_is_monotone(self) -> None:
        rng = random.Random(11)
        for _ in range(25):
            cell = Cell(self.rules)
            previous = set(cell.possibilities)
            for _ in range(8):
                neighbor = Cell(self.rules, rng.sample(range(16), rng.randint(1, 16)))
                cell.constrain(neighbor, rng.choice(ORTHOGONAL_DIRECTIONS))
                self.assertLessEqual(cell.possibilities, previous)
                previous = set(cell.possibilities)


class CellCollapseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rules = AdjacencyRules(marching_catalog())

    def test_collapse_picks_member_of_current_set(self) -> None:
        for seed in range(20):
            cell = Cell(self.rules, [3, 7, 11])
            before = set(cell.possibilities)
            chosen = cell.collapse(random.Random(seed))
            self.assertIn(chosen, before)
            self.assertEqual(cell.possibilities, {chosen})
            self.assertTrue(cell.is_collapsed())

    def test_collapse_is_reproducible_with_seed(self) -> None:
        first = Cell(self.rules).collapse(random.Random(42))
        second = Cell(self.rules).collapse(random.Random(42))
        self.assertEqual(first, second)

    def test_collapse_reaches_every_candidate(self) -> None:
        rng = random.Random(3)
        seen = {Cell(self.rules, [1, 2, 4]).collapse(rng) for _ in range(200)}
        self.assertEqual(seen, {1, 2, 4})


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
