"""
Round controller
================
Owns the round lifecycle (idle -> countdown -> active -> over), runs the
bubble field on every tick, applies scoring on pops and hands finished
rounds to the leaderboard.

All public operations are safe to call at any time: invalid requests are
logged and reported through the return value, never raised. After every
state change an immutable RoundSnapshot is pushed to subscribers.
"""

import logging
from typing import Callable, List, Optional, Tuple

from .config import BUBBLE_DIAMETER, COUNTDOWN_SECONDS, FIELD_HEIGHT, FIELD_WIDTH
from .errors import BubblePopError, InvalidInput, InvalidState
from .field import BubbleField
from .leaderboard import LeaderboardStore
from .models import (
    BubbleColor,
    GameSettings,
    LeaderboardEntry,
    RoundPhase,
    RoundSnapshot,
)
from .random_source import RandomSource
from .scoring import ScoringPolicy
from .settings import SettingsStore
from .storage import KeyValueStore
from .ticks import ManualTickSource, TickSource

logger = logging.getLogger(__name__)

Subscriber = Callable[[RoundSnapshot], None]


class RoundController:
    """Single-player round state machine."""

    def __init__(
        self,
        settings_store: SettingsStore,
        leaderboard: LeaderboardStore,
        rng: Optional[RandomSource] = None,
        tick_source: Optional[TickSource] = None,
        field_size: Tuple[float, float] = (FIELD_WIDTH, FIELD_HEIGHT),
        bubble_diameter: float = BUBBLE_DIAMETER
    ):
        self.settings_store = settings_store
        self.leaderboard = leaderboard
        self.field = BubbleField(rng or RandomSource())
        self.tick_source = tick_source or ManualTickSource()
        self.tick_source.on_tick(self.tick)
        self.field_width, self.field_height = field_size
        self.bubble_diameter = bubble_diameter

        self.phase = RoundPhase.IDLE
        self.player_name = ""
        self.score = 0
        self.time_remaining = self.settings.game_duration
        self.combo_streak = 0
        self.last_popped_color: Optional[BubbleColor] = None
        self.countdown = 0

        # Captured at round start so mid-round setting edits apply next round
        self.round_duration = self.settings.game_duration
        self.round_max_bubbles = self.settings.max_bubbles

        self._subscribers: List[Subscriber] = []

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> GameSettings:
        return self.settings_store.settings

    @property
    def active(self) -> bool:
        return self.phase is RoundPhase.ACTIVE

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            phase=self.phase,
            bubbles=self.field.bubbles,
            score=self.score,
            time_remaining=self.time_remaining,
            combo_streak=self.combo_streak,
            last_popped_color=self.last_popped_color,
            player_name=self.player_name,
            countdown=self.countdown,
            leaderboard=tuple(self.leaderboard.entries),
            settings=self.settings
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback for snapshots. Returns a function that unsubscribes."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _validate_start(self, player_name: str) -> str:
        if self.phase in (RoundPhase.ACTIVE, RoundPhase.COUNTDOWN):
            raise InvalidState(f"cannot start a round while {self.phase.value}")
        name = (player_name or "").strip()
        if not name:
            raise InvalidInput("player name must not be empty")
        return name

    def start_round(self, player_name: str) -> bool:
        """Reset the round and go straight to active play."""
        try:
            name = self._validate_start(player_name)
        except BubblePopError as exc:
            logger.debug("start_round rejected: %s", exc)
            return False

        self._begin_active(name)
        self._publish()
        return True

    def begin_countdown(self, player_name: str, seconds: int = COUNTDOWN_SECONDS) -> bool:
        """Run a short countdown on the tick source, then start the round."""
        try:
            name = self._validate_start(player_name)
            if seconds < 1:
                raise InvalidInput(f"countdown must be at least 1 second, got {seconds}")
        except BubblePopError as exc:
            logger.debug("begin_countdown rejected: %s", exc)
            return False

        self._clear_round()
        self.player_name = name
        self.countdown = seconds
        self.phase = RoundPhase.COUNTDOWN
        self.tick_source.start()
        self._publish()
        return True

    def _clear_round(self) -> None:
        self.score = 0
        self.time_remaining = self.settings.game_duration
        self.combo_streak = 0
        self.last_popped_color = None
        self.countdown = 0
        self.field.clear()

    def _begin_active(self, name: str) -> None:
        self.player_name = name
        self.round_duration = self.settings.game_duration
        self.round_max_bubbles = self.settings.max_bubbles
        self._clear_round()
        self.phase = RoundPhase.ACTIVE

        self._refresh_field()
        self.tick_source.start()
        logger.info(
            "round started for %s (%ds, up to %d bubbles)",
            name, self.round_duration, self.round_max_bubbles
        )

    def tick(self) -> None:
        """Advance the round clock by one second."""
        if self.phase is RoundPhase.COUNTDOWN:
            self.countdown -= 1
            if self.countdown <= 0:
                self._begin_active(self.player_name)
            self._publish()
            return

        if self.phase is not RoundPhase.ACTIVE:
            return

        self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.time_remaining = 0
            self._finish_round()
        else:
            self._refresh_field()
        self._publish()

    def end_round(self) -> bool:
        """End the active round early, recording the score as usual."""
        if self.phase is not RoundPhase.ACTIVE:
            logger.debug("end_round rejected: round is %s", self.phase.value)
            return False
        self._finish_round()
        self._publish()
        return True

    def _finish_round(self) -> None:
        self.phase = RoundPhase.OVER
        self.tick_source.stop()
        entry = LeaderboardEntry(name=self.player_name, score=self.score)
        rank = self.leaderboard.record(entry)
        logger.info(
            "round over for %s: %d points (rank %s)",
            self.player_name, self.score, rank if rank > 0 else "unranked"
        )

    def reset(self) -> bool:
        """Return to idle after a round (or abandon a countdown)."""
        if self.phase is RoundPhase.ACTIVE:
            logger.debug("reset rejected: round is active")
            return False
        self.tick_source.stop()
        self.phase = RoundPhase.IDLE
        self._clear_round()
        self._publish()
        return True

    # -------------------------------------------------------------------------
    # Play
    # -------------------------------------------------------------------------

    def _refresh_field(self) -> None:
        self.field.refresh(
            self.round_max_bubbles,
            self.field_width,
            self.field_height,
            self.bubble_diameter
        )

    def _validate_pop(self, index: int) -> None:
        if not self.active:
            raise InvalidState(f"cannot pop while {self.phase.value}")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInput(f"bubble index must be an integer, got {index!r}")
        if not 0 <= index < len(self.field):
            raise InvalidInput(f"bubble index {index} out of range")

    def preview_points(self, index: int) -> Optional[int]:
        """Points that popping index would earn right now, without popping it."""
        try:
            self._validate_pop(index)
        except BubblePopError as exc:
            logger.debug("preview rejected: %s", exc)
            return None
        bubble = self.field.bubbles[index]
        return ScoringPolicy.points_for(bubble, self.last_popped_color)

    def pop(self, index: int) -> Optional[int]:
        """Pop the bubble at index. Returns the points earned, or None if rejected."""
        try:
            self._validate_pop(index)
        except BubblePopError as exc:
            logger.debug("pop rejected: %s", exc)
            return None

        bubble = self.field.bubbles[index]
        points = ScoringPolicy.points_for(bubble, self.last_popped_color)
        self.combo_streak = ScoringPolicy.next_combo_streak(
            self.combo_streak, bubble.color, self.last_popped_color
        )
        self.last_popped_color = bubble.color
        self.score += points
        self.field.remove_at(index)
        self._publish()
        return points

    def set_field_size(self, width: float, height: float) -> None:
        self.field_width = width
        self.field_height = height

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_settings(self, game_duration: int, max_bubbles: int) -> bool:
        try:
            self.settings_store.update(game_duration, max_bubbles)
        except InvalidInput as exc:
            logger.debug("settings rejected: %s", exc)
            return False
        if self.phase is RoundPhase.IDLE:
            self.time_remaining = self.settings.game_duration
        self._publish()
        return True

    def save_settings(self) -> bool:
        return self.settings_store.save()


def create_controller(
    store: KeyValueStore,
    tick_source: Optional[TickSource] = None,
    rng: Optional[RandomSource] = None,
    field_size: Tuple[float, float] = (FIELD_WIDTH, FIELD_HEIGHT)
) -> RoundController:
    """Wire settings, leaderboard and controller over one key-value store."""
    return RoundController(
        SettingsStore(store),
        LeaderboardStore(store),
        rng=rng,
        tick_source=tick_source,
        field_size=field_size
    )
