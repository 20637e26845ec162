import unittest

import numpy as np

from stacking.engine import TowerEngine
from stacking.items import Cup, Lid
from stacking.ordering import rebuild, reorder, sort_by_id, split_items


def cup(i: int) -> Cup:
    return Cup(i, i, "red")


def lid(i: int) -> Lid:
    return Lid(i, i, "red")


def pairs(tower: TowerEngine):
    flat = tower.stacking_items()
    return list(zip(flat[0::2], (int(x) for x in flat[1::2])))


class OrderingFunctionsTest(unittest.TestCase):
    def test_split_keeps_relative_order(self) -> None:
        cups, lids = split_items([cup(2), lid(5), cup(1), lid(3)])
        self.assertEqual([c.id for c in cups], [2, 1])
        self.assertEqual([l.id for l in lids], [5, 3])

    def test_sort_by_id(self) -> None:
        items = [cup(2), cup(5), cup(1)]
        self.assertEqual([c.id for c in sort_by_id(items, descending=True)], [5, 2, 1])
        self.assertEqual([c.id for c in sort_by_id(items, descending=False)], [1, 2, 5])

    def test_rebuild_pairs_lids_with_cups_then_loose_lids(self) -> None:
        items, h = rebuild([cup(3), cup(2)], [lid(4), lid(3), lid(1)], max_height=100)
        self.assertEqual([(it.kind, it.id) for it in items],
                         [("cup", 3), ("lid", 3), ("cup", 2), ("lid", 4), ("lid", 1)])
        self.assertEqual(h, 5 + 1 + 3 + 1 + 1)

    def test_rebuild_skips_cups_that_overflow(self) -> None:
        # cup 4 (7) fits, cup 3 (5) would reach 12 and is skipped, cup 1 fits
        items, h = rebuild([cup(4), cup(3), cup(1)], [lid(3)], max_height=9)
        self.assertEqual([(it.kind, it.id) for it in items], [("cup", 4), ("cup", 1), ("lid", 3)])
        self.assertEqual(h, 9)

    def test_rebuild_skips_matching_lid_that_overflows(self) -> None:
        items, h = rebuild([cup(2)], [lid(2)], max_height=3)
        self.assertEqual([(it.kind, it.id) for it in items], [("cup", 2)])
        self.assertEqual(h, 3)

    def test_rebuild_drops_loose_lids_past_capacity(self) -> None:
        items, h = rebuild([cup(2)], [lid(5), lid(6)], max_height=4)
        self.assertEqual([(it.kind, it.id) for it in items], [("cup", 2), ("lid", 5)])
        self.assertEqual(h, 4)

    def test_reorder_empty(self) -> None:
        self.assertEqual(reorder([], 10, descending=True), ([], 0))


class OrderTowerTest(unittest.TestCase):
    def test_full_workflow(self) -> None:
        tower = TowerEngine(10, 50)
        tower.push_cup(1)
        tower.push_cup(3)
        tower.push_cup(2)
        tower.push_lid(1)
        tower.push_lid(3)
        self.assertTrue(tower.ok())
        self.assertEqual(tower.height(), 11)

        tower.order_tower()
        self.assertTrue(tower.ok())
        self.assertEqual(tower.stacking_items(),
                         ["cup", "3", "lid", "3", "cup", "2", "cup", "1", "lid", "1"])
        self.assertEqual(tower.lided_cups(), [1, 3])
        self.assertEqual(tower.height(), 11)

    def test_reverse_tower(self) -> None:
        tower = TowerEngine(10, 50)
        for i in (2, 4, 1):
            tower.push_cup(i)
        tower.push_lid(4)
        tower.push_lid(7)
        tower.reverse_tower()
        self.assertEqual(pairs(tower), [("cup", 1), ("cup", 2), ("cup", 4), ("lid", 4), ("lid", 7)])
        self.assertEqual(tower.lided_cups(), [4])

    def test_overflow_scenario(self) -> None:
        tower = TowerEngine(10, 10)
        tower.push_cup(1)
        tower.push_cup(2)
        tower.push_cup(3)
        self.assertEqual(tower.height(), 9)
        self.assertTrue(tower.push_lid(1))
        self.assertEqual(tower.height(), 10)
        self.assertFalse(tower.push_lid(3))
        self.assertFalse(tower.ok())
        self.assertEqual(tower.height(), 10)

        tower.order_tower()
        self.assertTrue(tower.ok())
        self.assertEqual(tower.height(), 10)
        self.assertEqual(pairs(tower), [("cup", 3), ("cup", 2), ("cup", 1), ("lid", 1)])

    def test_reorder_succeeds_after_a_failure(self) -> None:
        tower = TowerEngine(10, 10)
        tower.pop_cup()
        self.assertFalse(tower.ok())
        tower.reverse_tower()
        self.assertTrue(tower.ok())

    def test_ordering_properties_on_random_towers(self) -> None:
        rng = np.random.default_rng(7)
        for _ in range(50):
            tower = TowerEngine(9, 60)
            for i in rng.permutation(np.arange(1, 10)):
                if rng.random() < 0.5:
                    tower.push_cup(int(i))
                if rng.random() < 0.5:
                    tower.push_lid(int(i))
            cup_ids = sorted(it.id for it in tower.items() if it.kind == "cup")
            lid_ids = {it.id for it in tower.items() if it.kind == "lid"}

            for descending in (True, False):
                if descending:
                    tower.order_tower()
                else:
                    tower.reverse_tower()
                seq = pairs(tower)
                cups_seen = [i for k, i in seq if k == "cup"]
                self.assertEqual(cups_seen, sorted(cup_ids, reverse=descending))

                # every matched lid sits on its cup, loose lids follow the last cup
                expected_lided = sorted(set(cup_ids) & lid_ids)
                self.assertEqual(tower.lided_cups(), expected_lided)
                last_cup = max((n for n, (k, _) in enumerate(seq) if k == "cup"), default=-1)
                for n, (k, i) in enumerate(seq):
                    if k == "lid" and i not in cup_ids:
                        self.assertGreater(n, last_cup)
                self.assertEqual(tower.height(), sum(2 * c - 1 for c in cup_ids) + len(lid_ids))


if __name__ == "__main__":
    unittest.main()
