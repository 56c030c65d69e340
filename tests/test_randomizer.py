import random
import unittest

from tetromino_engine.game import SevenBag, TetrominoType

ALL_IDS = sorted(int(kind) for kind in TetrominoType)


class SevenBagTests(unittest.TestCase):
    def test_each_bag_is_a_permutation(self):
        bag = SevenBag(seed=1)
        for _ in range(20):
            draws = [bag.next() for _ in range(7)]
            self.assertEqual(sorted(draws), ALL_IDS)

    def test_repeat_gap_is_bounded(self):
        bag = SevenBag(rng=random.Random(5))
        last_seen = {}
        for i in range(7 * 50):
            type_id = bag.next()
            if type_id in last_seen:
                self.assertLessEqual(i - last_seen[type_id], 13)
            last_seen[type_id] = i

    def test_peek_matches_draw_order(self):
        bag = SevenBag(seed=3)
        first = bag.next()
        self.assertIn(first, ALL_IDS)
        self.assertEqual(len(bag), 6)
        remaining = bag.peek_bag()
        self.assertEqual(len(remaining), 6)
        self.assertNotIn(first, remaining)
        self.assertEqual(bag.next(), remaining[0])

    def test_refill_discards_partial_bag(self):
        bag = SevenBag(seed=9)
        bag.next()
        bag.refill()
        self.assertEqual(len(bag), 7)
        self.assertEqual(sorted(bag.peek_bag()), ALL_IDS)

    def test_same_seed_same_sequence(self):
        a = SevenBag(seed=42)
        b = SevenBag(seed=42)
        self.assertEqual([a.next() for _ in range(21)], [b.next() for _ in range(21)])


if __name__ == "__main__":
    unittest.main()
