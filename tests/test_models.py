import pytest

from bubble_pop.errors import InvalidInput
from bubble_pop.models import Bubble, BubbleColor, GameSettings, LeaderboardEntry


def test_palette_points_and_probabilities():
    assert [c.points for c in BubbleColor] == [1, 2, 5, 8, 10]
    assert [c.probability for c in BubbleColor] == [0.40, 0.30, 0.15, 0.10, 0.05]
    assert sum(c.probability for c in BubbleColor) == pytest.approx(1.0)


@pytest.mark.parametrize("draw, expected", [
    (0.0, BubbleColor.RED),
    (0.3999, BubbleColor.RED),
    (0.4, BubbleColor.PINK),
    (0.6999, BubbleColor.PINK),
    (0.7, BubbleColor.GREEN),
    (0.85, BubbleColor.BLUE),
    (0.9499, BubbleColor.BLUE),
    (0.95, BubbleColor.BLACK),
    (0.9999, BubbleColor.BLACK),
])
def test_color_from_draw_uses_cumulative_bounds(draw, expected):
    assert BubbleColor.from_draw(draw) is expected


def test_bubble_points_follow_color():
    bubble = Bubble(x=10, y=10, color=BubbleColor.BLUE, diameter=80)
    assert bubble.points == 8
    assert bubble.position == (10, 10)
    assert bubble.contains(40, 10)
    assert not bubble.contains(60, 10)


def test_bubbles_get_distinct_ids():
    a = Bubble(x=0, y=0, color=BubbleColor.RED, diameter=80)
    b = Bubble(x=0, y=0, color=BubbleColor.RED, diameter=80)
    assert a.id != b.id


def test_settings_defaults_and_ranges():
    settings = GameSettings()
    assert (settings.game_duration, settings.max_bubbles) == (60, 15)
    GameSettings(game_duration=1, max_bubbles=0)
    with pytest.raises(InvalidInput):
        GameSettings(game_duration=0)
    with pytest.raises(InvalidInput):
        GameSettings(max_bubbles=16)
    with pytest.raises(InvalidInput):
        GameSettings(game_duration="30")


def test_settings_wire_format():
    settings = GameSettings(game_duration=30, max_bubbles=5)
    assert settings.to_dict() == {"gameDuration": 30, "maxBubbles": 5}
    assert GameSettings.from_dict({"gameDuration": 30, "maxBubbles": 5}) == settings


def test_leaderboard_entry_rejects_bad_types():
    assert LeaderboardEntry.from_dict({"name": "amy", "score": 3}) == LeaderboardEntry("amy", 3)
    with pytest.raises(TypeError):
        LeaderboardEntry.from_dict({"name": "amy", "score": "3"})
    with pytest.raises(KeyError):
        LeaderboardEntry.from_dict({"name": "amy"})
