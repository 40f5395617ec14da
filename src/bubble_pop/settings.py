"""Loading, validating and saving game settings."""

import json
import logging

from .config import SETTINGS_KEY
from .errors import InvalidInput, PersistenceUnavailable
from .models import GameSettings
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class SettingsStore:
    """Holds the current GameSettings and persists them on request."""

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_KEY):
        self.store = store
        self.key = key
        self.settings = self.load()

    def load(self) -> GameSettings:
        """Persisted settings, or defaults when absent, unreadable or out of range."""
        try:
            raw = self.store.get(self.key)
        except PersistenceUnavailable as exc:
            logger.warning("settings unavailable, using defaults: %s", exc)
            return GameSettings()
        if raw is None:
            return GameSettings()

        try:
            data = json.loads(raw.decode('utf-8'))
            return GameSettings.from_dict(data)
        except (ValueError, KeyError, TypeError, RecursionError, InvalidInput) as exc:
            logger.warning("discarding invalid settings, using defaults: %s", exc)
            return GameSettings()

    def update(self, game_duration: int, max_bubbles: int) -> GameSettings:
        """Replace the current settings. Raises InvalidInput when out of range."""
        self.settings = GameSettings(game_duration=game_duration, max_bubbles=max_bubbles)
        return self.settings

    def save(self) -> bool:
        payload = json.dumps(self.settings.to_dict())
        try:
            self.store.set(self.key, payload.encode('utf-8'))
        except PersistenceUnavailable as exc:
            logger.warning("could not save settings: %s", exc)
            return False
        return True
