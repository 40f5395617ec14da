"""
Bubble field: the ordered set of live bubbles and the placement search
that keeps them from overlapping.
"""

import logging
from typing import List, Optional, Tuple

from .config import PLACEMENT_ATTEMPTS
from .models import Bubble, BubbleColor
from .random_source import RandomSource

logger = logging.getLogger(__name__)


class BubbleField:
    """Owns live bubbles, oldest first."""

    def __init__(self, rng: Optional[RandomSource] = None,
                 attempts: int = PLACEMENT_ATTEMPTS):
        self.rng = rng or RandomSource()
        self.attempts = attempts
        self._bubbles: List[Bubble] = []

    def __len__(self) -> int:
        return len(self._bubbles)

    @property
    def bubbles(self) -> Tuple[Bubble, ...]:
        return tuple(self._bubbles)

    def clear(self) -> None:
        self._bubbles = []

    def refresh(
        self,
        max_bubbles: int,
        field_width: float,
        field_height: float,
        diameter: float
    ) -> List[Bubble]:
        """
        Cull up to half of the live bubbles from the front, then top the
        field back up towards a random target no larger than max_bubbles.
        Returns the bubbles that were added.
        """
        cull = self.rng.randint(0, len(self._bubbles) // 2)
        if cull > 0:
            del self._bubbles[:cull]

        current = len(self._bubbles)
        if max_bubbles <= current:
            return []

        target = self.rng.randint(current, max_bubbles)
        added = []
        for _ in range(target - current):
            position = self.find_position(field_width, field_height, diameter)
            if position is None:
                continue
            bubble = Bubble(
                x=position[0],
                y=position[1],
                color=BubbleColor.from_draw(self.rng.random()),
                diameter=diameter
            )
            self._bubbles.append(bubble)
            added.append(bubble)

        if len(added) < target - current:
            logger.debug(
                "placed %d of %d bubbles (field %sx%s)",
                len(added), target - current, field_width, field_height
            )
        return added

    def find_position(
        self,
        field_width: float,
        field_height: float,
        diameter: float
    ) -> Optional[Tuple[float, float]]:
        """
        Search for a center at least one diameter away from every live
        bubble. Gives up after a fixed number of attempts.
        """
        if field_width < diameter or field_height < diameter:
            return None

        margin = diameter / 2
        for _ in range(self.attempts):
            x = self.rng.uniform(margin, field_width - margin)
            y = self.rng.uniform(margin, field_height - margin)
            if self._is_free(x, y, diameter):
                return (x, y)

        return None

    def _is_free(self, x: float, y: float, diameter: float) -> bool:
        for bubble in self._bubbles:
            if bubble.distance_to(x, y) < max(diameter, bubble.diameter):
                return False
        return True

    def remove_at(self, index: int) -> Bubble:
        """Remove and return the bubble at index. Raises IndexError."""
        if not 0 <= index < len(self._bubbles):
            raise IndexError(f"bubble index {index} out of range")
        return self._bubbles.pop(index)

