"""
Tests for runes, palettes, scoring tables and rankings.
"""

import random
import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from alchemy.constants import (
    RUNE_COLORS,
    ZODIAC_SYMBOLS,
    board_clear_points,
    color_count_for_board,
    placement_points,
    row_clear_points,
    symbol_count_for_board,
)
from alchemy.rankings import get_ranking
from alchemy.runes import Rune, RuneKind, create_rune, shares_property


class FixedRoll(random.Random):
    """Random source whose kind roll is fixed; choices stay seeded."""

    def __init__(self, roll, seed=0):
        super().__init__(seed)
        self.roll = roll

    def random(self):
        return self.roll


class TestRune(unittest.TestCase):
    """Test rune construction."""

    def test_normal_rune(self):
        rune = Rune.normal('crimson', 'aries')
        self.assertTrue(rune.is_normal)
        self.assertFalse(rune.is_wild)
        self.assertFalse(rune.is_skull)
        self.assertEqual(rune.color, 'crimson')
        self.assertEqual(rune.symbol, 'aries')

    def test_special_runes(self):
        self.assertTrue(Rune.wild().is_wild)
        self.assertTrue(Rune.skull().is_skull)
        self.assertIsNone(Rune.wild().color)
        self.assertEqual(Rune.wild(), Rune.wild())

    def test_malformed_runes_rejected(self):
        with self.assertRaises(ValueError):
            Rune(RuneKind.NORMAL, 'crimson', None)
        with self.assertRaises(ValueError):
            Rune(RuneKind.WILD, 'grey', None)

    def test_rune_is_immutable(self):
        rune = Rune.normal('crimson', 'aries')
        with self.assertRaises(AttributeError):
            rune.color = 'azure'


class TestCreateRune(unittest.TestCase):
    """Test the rune factory."""

    def test_low_roll_gives_wild(self):
        self.assertTrue(create_rune(1, FixedRoll(0.01)).is_wild)

    def test_middle_roll_gives_skull(self):
        self.assertTrue(create_rune(1, FixedRoll(0.04)).is_skull)

    def test_high_roll_gives_normal_from_board_palette(self):
        for seed in range(50):
            rune = create_rune(1, FixedRoll(0.5, seed))
            self.assertTrue(rune.is_normal)
            self.assertIn(rune.color, RUNE_COLORS[:4])
            self.assertIn(rune.symbol, ZODIAC_SYMBOLS[:5])

    def test_late_boards_use_full_palette(self):
        rng = FixedRoll(0.9, seed=7)
        colors = set()
        symbols = set()
        for _ in range(2000):
            rune = create_rune(7, rng)
            colors.add(rune.color)
            symbols.add(rune.symbol)
        self.assertEqual(colors, set(RUNE_COLORS))
        self.assertEqual(symbols, set(ZODIAC_SYMBOLS))

    def test_seeded_draws_repeat(self):
        rng_a = random.Random(42)
        rng_b = random.Random(42)
        first = [create_rune(3, rng_a) for _ in range(20)]
        second = [create_rune(3, rng_b) for _ in range(20)]
        self.assertEqual(first, second)


class TestSharesProperty(unittest.TestCase):
    """Test rune compatibility."""

    def test_missing_rune(self):
        self.assertFalse(shares_property(None, Rune.wild()))
        self.assertFalse(shares_property(Rune.wild(), None))

    def test_wild_matches_both_ways(self):
        rune = Rune.normal('crimson', 'aries')
        self.assertTrue(shares_property(rune, Rune.wild()))
        self.assertTrue(shares_property(Rune.wild(), rune))

    def test_skull_never_matches(self):
        rune = Rune.normal('crimson', 'aries')
        self.assertFalse(shares_property(Rune.skull(), rune))
        self.assertFalse(shares_property(rune, Rune.skull()))

    def test_color_or_symbol(self):
        rune = Rune.normal('crimson', 'aries')
        self.assertTrue(shares_property(rune, Rune.normal('crimson', 'leo')))
        self.assertTrue(shares_property(rune, Rune.normal('azure', 'aries')))
        self.assertFalse(shares_property(rune, Rune.normal('azure', 'leo')))


class TestTables(unittest.TestCase):
    """Test tier lookups and scoring formulas."""

    def test_palette_tiers(self):
        self.assertEqual([symbol_count_for_board(b) for b in (1, 3, 4, 6, 7, 20)], [5, 5, 8, 8, 12, 12])
        self.assertEqual([color_count_for_board(b) for b in (1, 3, 4, 6, 7, 20)], [4, 4, 5, 5, 8, 8])

    def test_palettes_never_shrink(self):
        for board in range(1, 30):
            self.assertLessEqual(symbol_count_for_board(board), symbol_count_for_board(board + 1))
            self.assertLessEqual(color_count_for_board(board), color_count_for_board(board + 1))

    def test_scoring(self):
        self.assertEqual([placement_points(b) for b in (1, 3, 4, 7)], [10, 10, 12, 14])
        self.assertEqual([row_clear_points(b) for b in (1, 3, 4, 7)], [25, 25, 30, 35])
        self.assertEqual([board_clear_points(b) for b in (1, 2, 5)], [50, 60, 90])


class TestRankings(unittest.TestCase):
    """Test score rankings."""

    def test_lowest_band(self):
        ranking = get_ranking(0)
        self.assertEqual(ranking.title, 'Cursed')
        self.assertEqual(ranking.next_at, 400)

    def test_middle_band(self):
        self.assertEqual(get_ranking(450).title, 'Bungler')
        self.assertEqual(get_ranking(3499).next_at, 3500)

    def test_top_band(self):
        ranking = get_ranking(123456)
        self.assertEqual(ranking.title, 'Grand Alchemical Emperor')
        self.assertIsNone(ranking.next_at)

    def test_negative_score(self):
        self.assertEqual(get_ranking(-5).title, 'Cursed')


if __name__ == '__main__':
    unittest.main()
