"""
Tick sources drive the round clock.

The controller registers a callback with ``on_tick`` and starts/stops the
source; what actually produces ticks is up to the implementation.
"""

from typing import Callable, List

TickCallback = Callable[[], None]


class TickSource:
    """Base tick source: holds callbacks and a running flag."""

    def __init__(self):
        self._callbacks: List[TickCallback] = []
        self.running = False

    def on_tick(self, callback: TickCallback) -> None:
        self._callbacks.append(callback)

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def _fire(self) -> None:
        for callback in list(self._callbacks):
            if not self.running:
                break
            callback()


class ManualTickSource(TickSource):
    """Ticks only when told to. Used by tests and scripted harnesses."""

    def advance(self, count: int = 1) -> int:
        """Fire up to count ticks, stopping early if the source is stopped.
        Returns the number of ticks fired."""
        fired = 0
        for _ in range(count):
            if not self.running:
                break
            self._fire()
            fired += 1
        return fired


class IntervalTickSource(TickSource):
    """Turns frame deltas (e.g. from pygame.time.Clock.tick) into fixed ticks."""

    def __init__(self, interval_ms: int = 1000):
        super().__init__()
        self.interval_ms = interval_ms
        self._elapsed = 0

    def start(self) -> None:
        self._elapsed = 0
        super().start()

    def stop(self) -> None:
        self._elapsed = 0
        super().stop()

    def update(self, dt_ms: int) -> int:
        """Accumulate dt_ms and fire one tick per whole interval.
        Returns the number of ticks fired."""
        if not self.running:
            return 0
        self._elapsed += dt_ms
        fired = 0
        while self.running and self._elapsed >= self.interval_ms:
            self._elapsed -= self.interval_ms
            self._fire()
            fired += 1
        return fired
