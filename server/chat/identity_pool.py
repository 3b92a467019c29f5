"""
Identity pool module.

Hands out display colors to named sessions and takes them back on disconnect.
"""

import random
from collections import deque
from typing import Iterable, Optional, Tuple

from common.constants import COLOR_PALETTE
from server.utils.logger import logger


class IdentityPoolExhausted(Exception):
    """Raised when every color in the palette is held by a session."""


class IdentityPool:
    """Finite pool of reusable display colors."""

    def __init__(self, palette: Iterable[str] = COLOR_PALETTE, rng: Optional[random.Random] = None):
        self.palette: Tuple[str, ...] = tuple(dict.fromkeys(palette))
        if not self.palette:
            raise ValueError("Color palette must not be empty")

        # Uniform Fisher-Yates shuffle; pool order is then first-free-first-out
        colors = list(self.palette)
        (rng or random).shuffle(colors)
        self._free = deque(colors)

    def acquire(self) -> str:
        """Remove and return the next free color."""
        if not self._free:
            raise IdentityPoolExhausted(f"All {len(self.palette)} colors are in use")
        return self._free.popleft()

    def release(self, color: Optional[str]):
        """Return a previously acquired color to the pool."""
        if color is None:
            return
        if color not in self.palette:
            logger.warning(f"Ignoring release of unknown color '{color}'")
            return
        if color in self._free:
            logger.warning(f"Ignoring double release of color '{color}'")
            return
        self._free.append(color)

    def free_count(self) -> int:
        """Get the number of colors available for acquisition."""
        return len(self._free)

    def held_count(self) -> int:
        """Get the number of colors currently assigned to sessions."""
        return len(self.palette) - len(self._free)
