#!/usr/bin/env python3
"""
Unit tests for the display color pool.

Covers:
- Distinct colors for concurrently held identities
- Exhaustion signalling
- Release and reuse, including guarded releases
"""

import random
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import COLOR_PALETTE
from server.chat.identity_pool import IdentityPool, IdentityPoolExhausted


class TestIdentityPool(unittest.TestCase):
    """Test cases for IdentityPool."""

    def setUp(self):
        self.pool = IdentityPool(COLOR_PALETTE, rng=random.Random(42))

    def test_acquired_colors_are_distinct(self):
        """Every color handed out while held is unique and from the palette."""
        held = [self.pool.acquire() for _ in range(len(COLOR_PALETTE))]

        self.assertEqual(len(set(held)), len(held))
        self.assertEqual(set(held), set(COLOR_PALETTE))
        self.assertEqual(self.pool.free_count(), 0)

    def test_exhausted_pool_raises(self):
        """Acquiring from an empty pool raises IdentityPoolExhausted."""
        for _ in COLOR_PALETTE:
            self.pool.acquire()

        with self.assertRaises(IdentityPoolExhausted):
            self.pool.acquire()

    def test_released_color_is_acquirable_again(self):
        """A released color comes back once the rest of the pool is used up."""
        first = self.pool.acquire()
        self.pool.release(first)

        remaining = [self.pool.acquire() for _ in range(len(COLOR_PALETTE))]
        self.assertIn(first, remaining)

    def test_release_none_is_ignored(self):
        """Releasing for a session that never got a color changes nothing."""
        self.pool.release(None)
        self.assertEqual(self.pool.free_count(), len(COLOR_PALETTE))

    def test_double_release_does_not_duplicate(self):
        """Releasing a color that is already free must not add a second copy."""
        color = self.pool.acquire()
        self.pool.release(color)
        self.pool.release(color)

        self.assertEqual(self.pool.free_count(), len(COLOR_PALETTE))

    def test_unknown_color_release_is_ignored(self):
        self.pool.release('chartreuse')
        self.assertEqual(self.pool.free_count(), len(COLOR_PALETTE))

    def test_free_and_held_cover_palette(self):
        """Free colors plus held colors always equal the palette."""
        held = {self.pool.acquire() for _ in range(3)}
        self.assertEqual(self.pool.held_count(), 3)
        self.assertEqual(self.pool.free_count() + len(held), len(COLOR_PALETTE))

    def test_shuffle_uses_supplied_rng(self):
        """Two pools seeded alike hand out colors in the same order."""
        other = IdentityPool(COLOR_PALETTE, rng=random.Random(42))
        order_a = [self.pool.acquire() for _ in COLOR_PALETTE]
        order_b = [other.acquire() for _ in COLOR_PALETTE]
        self.assertEqual(order_a, order_b)

    def test_empty_palette_rejected(self):
        with self.assertRaises(ValueError):
            IdentityPool([])


if __name__ == '__main__':
    unittest.main()
