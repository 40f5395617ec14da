import json

import pytest

from bubble_pop.errors import InvalidInput
from bubble_pop.models import GameSettings
from bubble_pop.settings import SettingsStore
from bubble_pop.storage import MemoryStore


def test_defaults_when_nothing_saved():
    assert SettingsStore(MemoryStore()).settings == GameSettings(60, 15)


def test_save_and_reload(store):
    settings = SettingsStore(store)
    settings.update(30, 8)
    assert settings.save()
    assert json.loads(store.get("gameSettings").decode("utf-8")) == {
        "gameDuration": 30, "maxBubbles": 8
    }
    assert SettingsStore(store).settings == GameSettings(30, 8)


def test_update_rejects_out_of_range_values():
    settings = SettingsStore(MemoryStore())
    with pytest.raises(InvalidInput):
        settings.update(0, 8)
    with pytest.raises(InvalidInput):
        settings.update(30, 16)
    assert settings.settings == GameSettings()


@pytest.mark.parametrize("raw", [
    b"garbage",
    b"[]",
    b'{"gameDuration": 30}',
    b'{"gameDuration": 90, "maxBubbles": 5}',
    b'{"gameDuration": "30", "maxBubbles": 5}',
    b"[" * 100000 + b"]" * 100000,
])
def test_invalid_stored_settings_fall_back_to_defaults(raw):
    store = MemoryStore({"gameSettings": raw})
    assert SettingsStore(store).settings == GameSettings()
