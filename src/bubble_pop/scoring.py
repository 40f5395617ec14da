"""Points and combo bookkeeping for a single pop."""

import math
from typing import Optional

from .config import COMBO_MULTIPLIER
from .models import Bubble, BubbleColor


class ScoringPolicy:
    """Pure scoring rules. Popping the same color twice in a row pays 1.5x."""

    @staticmethod
    def is_combo(color: BubbleColor, last_popped_color: Optional[BubbleColor]) -> bool:
        return last_popped_color is not None and last_popped_color is color

    @staticmethod
    def points_for(bubble: Bubble, last_popped_color: Optional[BubbleColor]) -> int:
        """
        Points earned for popping bubble right after last_popped_color.
        The combo bonus is floored to a whole number of points.
        """
        points = bubble.points
        if ScoringPolicy.is_combo(bubble.color, last_popped_color):
            points = math.floor(points * COMBO_MULTIPLIER)
        return points

    @staticmethod
    def next_combo_streak(
        streak: int,
        color: BubbleColor,
        last_popped_color: Optional[BubbleColor]
    ) -> int:
        """Streak after popping color. Informational only; the bonus is binary."""
        if ScoringPolicy.is_combo(color, last_popped_color):
            return streak + 1
        return 0
