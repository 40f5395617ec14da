"""Top-10 leaderboard kept sorted by score and persisted as JSON."""

import json
import logging
from typing import List, Optional, Sequence

from .config import HIGH_SCORES_KEY, MAX_HIGH_SCORES
from .errors import PersistenceUnavailable
from .models import LeaderboardEntry
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


def rank_entries(
    entries: Sequence[LeaderboardEntry],
    limit: int = MAX_HIGH_SCORES
) -> List[LeaderboardEntry]:
    """Sort by score descending and keep the top entries. Ties keep their order."""
    return sorted(entries, key=lambda entry: entry.score, reverse=True)[:limit]


class LeaderboardStore:
    """Manages high scores on top of a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = HIGH_SCORES_KEY,
        limit: int = MAX_HIGH_SCORES
    ):
        self.store = store
        self.key = key
        self.limit = limit
        self.entries: List[LeaderboardEntry] = self.load()

    def load(self) -> List[LeaderboardEntry]:
        """
        Read persisted entries. Missing, unreadable or malformed data
        yields an empty leaderboard.
        """
        try:
            raw = self.store.get(self.key)
        except PersistenceUnavailable as exc:
            logger.warning("leaderboard unavailable, starting empty: %s", exc)
            return []
        if raw is None:
            return []

        try:
            data = json.loads(raw.decode('utf-8'))
            if not isinstance(data, list):
                raise TypeError("leaderboard payload is not a list")
            entries = [LeaderboardEntry.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError, RecursionError) as exc:
            logger.warning("discarding corrupt leaderboard data: %s", exc)
            return []

        return rank_entries(entries, self.limit)

    def save(self, entries: Optional[Sequence[LeaderboardEntry]] = None) -> bool:
        """Persist entries (the in-memory list by default). Returns False on failure."""
        if entries is None:
            entries = self.entries
        payload = json.dumps([entry.to_dict() for entry in entries], indent=2)
        try:
            self.store.set(self.key, payload.encode('utf-8'))
        except PersistenceUnavailable as exc:
            logger.warning("could not save leaderboard: %s", exc)
            return False
        return True

    def record(self, entry: LeaderboardEntry) -> int:
        """
        Add an entry, re-rank and persist.
        Returns the 1-based rank of the entry, or -1 if it did not make the cut.
        """
        self.entries = rank_entries(self.entries + [entry], self.limit)
        self.save()
        return self.rank_of(entry)

    def rank_of(self, entry: LeaderboardEntry) -> int:
        # Identity, not equality: equal name/score rows are distinct entries
        for i, existing in enumerate(self.entries):
            if existing is entry:
                return i + 1
        return -1

    def is_high_score(self, score: int) -> bool:
        """Check if the score would make the leaderboard."""
        if len(self.entries) < self.limit:
            return True
        return score > self.entries[-1].score

    @property
    def best_score(self) -> Optional[int]:
        return self.entries[0].score if self.entries else None

    def get_top_scores(self) -> List[LeaderboardEntry]:
        return list(self.entries)
