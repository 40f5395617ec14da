"""
Data model for the game: bubble colors, bubbles, leaderboard entries,
settings and the immutable round snapshot handed to the presentation layer.
"""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .config import (
    BUBBLE_RGB,
    DEFAULT_GAME_DURATION,
    DEFAULT_MAX_BUBBLES,
    GAME_DURATION_RANGE,
    MAX_BUBBLES_RANGE,
)
from .errors import InvalidInput


# =============================================================================
# BUBBLE COLORS
# =============================================================================

class BubbleColor(Enum):
    """Bubble palette. Each value is (points, spawn probability)."""
    RED = (1, 0.40)
    PINK = (2, 0.30)
    GREEN = (5, 0.15)
    BLUE = (8, 0.10)
    BLACK = (10, 0.05)

    @property
    def points(self) -> int:
        return self.value[0]

    @property
    def probability(self) -> float:
        return self.value[1]

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return BUBBLE_RGB[self.name.lower()]

    @classmethod
    def from_draw(cls, draw: float) -> "BubbleColor":
        """
        Map a uniform draw in [0, 1) to a color via the cumulative
        probability bounds 0.4, 0.7, 0.85, 0.95, 1.0.
        """
        for color, bound in _CUMULATIVE_BOUNDS:
            if draw < bound:
                return color
        return cls.BLACK


def _cumulative_bounds():
    bounds = []
    total = 0.0
    for color in BubbleColor:
        # Rounded so 0.4 + 0.3 + 0.15 lands exactly on 0.85
        total = round(total + color.probability, 10)
        bounds.append((color, total))
    return tuple(bounds)


_CUMULATIVE_BOUNDS = _cumulative_bounds()


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class Bubble:
    """A live bubble on the play field."""
    x: float
    y: float
    color: BubbleColor
    diameter: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def points(self) -> int:
        return self.color.points

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.x - x, self.y - y)

    def contains(self, x: float, y: float) -> bool:
        """Check whether a point lies inside the bubble's circle."""
        return self.distance_to(x, y) <= self.diameter / 2


@dataclass(frozen=True)
class LeaderboardEntry:
    """A single leaderboard row."""
    name: str
    score: int

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score}

    @classmethod
    def from_dict(cls, data: dict) -> "LeaderboardEntry":
        name = data["name"]
        score = data["score"]
        if not isinstance(name, str) or isinstance(score, bool) or not isinstance(score, int):
            raise TypeError(f"malformed leaderboard entry: {data!r}")
        return cls(name=name, score=score)


@dataclass(frozen=True)
class GameSettings:
    """Round duration (seconds) and maximum number of live bubbles."""
    game_duration: int = DEFAULT_GAME_DURATION
    max_bubbles: int = DEFAULT_MAX_BUBBLES

    def __post_init__(self):
        _check_range("game_duration", self.game_duration, GAME_DURATION_RANGE)
        _check_range("max_bubbles", self.max_bubbles, MAX_BUBBLES_RANGE)

    def to_dict(self) -> dict:
        return {"gameDuration": self.game_duration, "maxBubbles": self.max_bubbles}

    @classmethod
    def from_dict(cls, data: dict) -> "GameSettings":
        return cls(game_duration=data["gameDuration"], max_bubbles=data["maxBubbles"])


def _check_range(name: str, value, bounds: Tuple[int, int]) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise InvalidInput(f"{name} must be between {low} and {high}, got {value}")


# =============================================================================
# ROUND STATE
# =============================================================================

class RoundPhase(Enum):
    """Round lifecycle phases."""
    IDLE = "idle"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    OVER = "over"


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of the round published after every mutating call."""
    phase: RoundPhase
    bubbles: Tuple[Bubble, ...]
    score: int
    time_remaining: int
    combo_streak: int
    last_popped_color: Optional[BubbleColor]
    player_name: str
    countdown: int
    leaderboard: Tuple[LeaderboardEntry, ...]
    settings: GameSettings

    @property
    def active(self) -> bool:
        return self.phase is RoundPhase.ACTIVE

    @property
    def best_score(self) -> Optional[int]:
        return self.leaderboard[0].score if self.leaderboard else None
