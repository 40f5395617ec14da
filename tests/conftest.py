import os
import sys

import pytest

# Make the src/ layout importable without installing the package
SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from bubble_pop.controller import create_controller
from bubble_pop.random_source import RandomSource
from bubble_pop.storage import MemoryStore
from bubble_pop.ticks import ManualTickSource


class ScriptedRandom(RandomSource):
    """Replays fixed draws. ``floats`` feed random() and uniform() as
    fractions of the requested range, ``ints`` feed randint()."""

    def __init__(self, ints=(), floats=()):
        super().__init__(seed=0)
        self.ints = list(ints)
        self.floats = list(floats)

    def random(self):
        return self.floats.pop(0)

    def uniform(self, low, high):
        return low + self.floats.pop(0) * (high - low)

    def randint(self, low, high):
        value = self.ints.pop(0)
        assert low <= value <= high, f"scripted {value} outside [{low}, {high}]"
        return value


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def ticker():
    return ManualTickSource()


@pytest.fixture()
def make_controller(store, ticker):
    """Build a controller over the shared memory store and manual ticker."""
    def _make(game_duration=60, max_bubbles=15, rng=None, field_size=(800, 580)):
        controller = create_controller(
            store,
            tick_source=ticker,
            rng=rng or RandomSource(seed=1234),
            field_size=field_size
        )
        assert controller.update_settings(game_duration, max_bubbles)
        return controller
    return _make


@pytest.fixture()
def scripted():
    return ScriptedRandom
