import json

from bubble_pop.errors import PersistenceUnavailable
from bubble_pop.leaderboard import LeaderboardStore, rank_entries
from bubble_pop.models import LeaderboardEntry
from bubble_pop.storage import KeyValueStore, MemoryStore


class BrokenStore(KeyValueStore):
    def get(self, key):
        raise PersistenceUnavailable("disk gone")

    def set(self, key, value):
        raise PersistenceUnavailable("disk gone")


def test_record_keeps_descending_order_and_cap():
    board = LeaderboardStore(MemoryStore())
    for score in [5, 40, 12, 7, 99, 3, 18, 60, 1, 33, 21, 8]:
        board.record(LeaderboardEntry(name=f"p{score}", score=score))

    scores = [entry.score for entry in board.entries]
    assert scores == [99, 60, 40, 33, 21, 18, 12, 8, 7, 5]
    assert len(board.entries) == 10


def test_ties_keep_recording_order():
    board = LeaderboardStore(MemoryStore())
    board.record(LeaderboardEntry("first", 10))
    board.record(LeaderboardEntry("top", 20))
    board.record(LeaderboardEntry("second", 10))
    board.record(LeaderboardEntry("third", 10))
    assert [e.name for e in board.entries] == ["top", "first", "second", "third"]


def test_record_returns_rank():
    board = LeaderboardStore(MemoryStore())
    assert board.record(LeaderboardEntry("a", 10)) == 1
    assert board.record(LeaderboardEntry("b", 30)) == 1
    assert board.record(LeaderboardEntry("c", 10)) == 3
    for i in range(10):
        board.record(LeaderboardEntry(f"x{i}", 50))
    assert board.record(LeaderboardEntry("late", 0)) == -1


def test_record_persists_and_reloads(store):
    board = LeaderboardStore(store)
    board.record(LeaderboardEntry("amy", 12))
    board.record(LeaderboardEntry("bob", 30))

    assert json.loads(store.get("highScores").decode("utf-8")) == [
        {"name": "bob", "score": 30},
        {"name": "amy", "score": 12},
    ]
    assert LeaderboardStore(store).entries == board.entries


def test_load_sorts_and_truncates_stored_data():
    data = [{"name": f"p{i}", "score": i} for i in range(15)]
    store = MemoryStore({"highScores": json.dumps(data).encode("utf-8")})
    board = LeaderboardStore(store)
    assert [e.score for e in board.entries] == list(range(14, 4, -1))


def test_missing_or_corrupt_data_loads_empty():
    assert LeaderboardStore(MemoryStore()).entries == []
    deeply_nested = b"[" * 100000 + b"]" * 100000
    for raw in [b"not json", b'{"name": "x"}', b'[{"name": "x"}]', b'[1, 2]', b"\xff\xfe", deeply_nested]:
        assert LeaderboardStore(MemoryStore({"highScores": raw})).entries == []


def test_persistence_failure_is_not_fatal():
    board = LeaderboardStore(BrokenStore())
    assert board.entries == []
    assert board.save() is False
    board.record(LeaderboardEntry("amy", 5))
    assert board.entries == [LeaderboardEntry("amy", 5)]


def test_high_score_helpers():
    board = LeaderboardStore(MemoryStore())
    assert board.best_score is None
    assert board.is_high_score(0)
    for i in range(10):
        board.record(LeaderboardEntry(f"p{i}", 10 + i))
    assert board.best_score == 19
    assert not board.is_high_score(10)
    assert board.is_high_score(11)
    assert board.get_top_scores() == board.entries


def test_rank_entries_is_stable():
    entries = [LeaderboardEntry("a", 1), LeaderboardEntry("b", 2), LeaderboardEntry("c", 1)]
    assert [e.name for e in rank_entries(entries)] == ["b", "a", "c"]
    assert [e.name for e in rank_entries(entries, limit=2)] == ["b", "a"]
