"""BubblePop: a timed bubble-popping arcade game."""

from .controller import RoundController, create_controller
from .errors import BubblePopError, InvalidInput, InvalidState, PersistenceUnavailable
from .field import BubbleField
from .leaderboard import LeaderboardStore
from .models import (
    Bubble,
    BubbleColor,
    GameSettings,
    LeaderboardEntry,
    RoundPhase,
    RoundSnapshot,
)
from .random_source import RandomSource
from .scoring import ScoringPolicy
from .settings import SettingsStore
from .storage import JsonFileStore, KeyValueStore, MemoryStore
from .ticks import IntervalTickSource, ManualTickSource, TickSource

__version__ = "1.0.0"
