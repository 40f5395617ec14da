import itertools

import pytest

from bubble_pop.field import BubbleField
from bubble_pop.models import BubbleColor
from bubble_pop.random_source import RandomSource

DIAMETER = 80.0


class GreedyRandom(RandomSource):
    """Real position draws, but always the largest cull and target."""

    def randint(self, low, high):
        return high


def assert_no_overlap(field):
    for a, b in itertools.combinations(field.bubbles, 2):
        assert a.distance_to(b.x, b.y) >= max(a.diameter, b.diameter)


def assert_in_bounds(field, width, height):
    for bubble in field.bubbles:
        assert DIAMETER / 2 <= bubble.x <= width - DIAMETER / 2
        assert DIAMETER / 2 <= bubble.y <= height - DIAMETER / 2


def test_refresh_never_overlaps():
    field = BubbleField(RandomSource(seed=7))
    for _ in range(300):
        field.refresh(15, 800, 580, DIAMETER)
        assert len(field) <= 15
        assert_no_overlap(field)
        assert_in_bounds(field, 800, 580)


def test_refresh_fills_to_max_when_area_is_ample():
    field = BubbleField(GreedyRandom(seed=3))
    for _ in range(10):
        field.refresh(15, 2000, 2000, DIAMETER)
        assert len(field) == 15
        assert_no_overlap(field)


def test_field_too_small_places_nothing(scripted):
    rng = scripted(ints=[0, 5])
    field = BubbleField(rng)
    assert field.refresh(5, 50, 50, DIAMETER) == []
    assert len(field) == 0
    assert rng.floats == []


def test_cull_removes_oldest_first(scripted):
    rng = scripted(
        ints=[0, 4],
        floats=[
            0.0, 0.0, 0.0,
            0.5, 0.0, 0.3,
            1.0, 0.0, 0.5,
            0.0, 1.0, 0.9,
        ]
    )
    field = BubbleField(rng)
    field.refresh(4, 800, 580, DIAMETER)
    original = field.bubbles
    assert [b.position for b in original] == [(40, 40), (400, 40), (760, 40), (40, 540)]
    assert [b.color for b in original] == [
        BubbleColor.RED, BubbleColor.RED, BubbleColor.PINK, BubbleColor.BLUE
    ]

    # Cull two; max is below what is left, so no target is drawn
    rng.ints = [2]
    field.refresh(2, 800, 580, DIAMETER)
    assert field.bubbles == original[2:]
    assert rng.ints == []


def test_colliding_candidate_is_retried(scripted):
    rng = scripted(ints=[0, 1], floats=[0.0, 0.0, 0.0])
    field = BubbleField(rng)
    field.refresh(1, 800, 580, DIAMETER)

    rng.ints = [0, 2]
    rng.floats = [0.0, 0.0, 0.5, 0.5, 0.95]
    added = field.refresh(2, 800, 580, DIAMETER)
    assert len(added) == 1
    assert added[0].position == (400, 290)
    assert added[0].color is BubbleColor.BLACK


def test_placement_gives_up_after_attempt_limit(scripted):
    rng = scripted(ints=[0, 1], floats=[0.0, 0.0, 0.0])
    field = BubbleField(rng, attempts=3)
    field.refresh(1, 800, 580, DIAMETER)

    # Every candidate lands on the existing bubble
    rng.ints = [0, 2]
    rng.floats = [0.0] * 6
    assert field.refresh(2, 800, 580, DIAMETER) == []
    assert len(field) == 1
    assert rng.floats == []


def test_remove_at(scripted):
    rng = scripted(ints=[0, 2], floats=[0.0, 0.0, 0.0, 1.0, 1.0, 0.5])
    field = BubbleField(rng)
    field.refresh(2, 800, 580, DIAMETER)
    first, second = field.bubbles

    assert field.remove_at(0) == first
    assert field.bubbles == (second,)
    with pytest.raises(IndexError):
        field.remove_at(1)
    with pytest.raises(IndexError):
        field.remove_at(-1)


def test_clear():
    field = BubbleField(RandomSource(seed=1))
    field.refresh(15, 800, 580, DIAMETER)
    field.clear()
    assert len(field) == 0
