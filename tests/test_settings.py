import json
import os

import pytest

from macleftovers.python.utils.settings import FinderSettings, SettingsError, load_settings


def test_defaults() -> None:
    settings = FinderSettings()
    assert settings.name_search_strict is True
    assert settings.spotlight is True
    assert settings.spotlight_timeout == 5.0
    assert settings.size_chunk_size == 10
    assert 1 <= settings.size_max_workers <= 8
    assert settings.locations
    assert not any(location.startswith("~") for location in settings.locations)


def test_from_dict_expands_locations() -> None:
    settings = FinderSettings.from_dict({"locations": ["~/Library/Caches"], "spotlight": False})
    assert settings.locations == [os.path.expanduser("~/Library/Caches")]
    assert settings.spotlight is False


@pytest.mark.parametrize("data", [
    {"spotlite": True},
    {"spotlight_timeout": 0},
    {"spotlight_timeout": "soon"},
    {"size_chunk_size": 0},
    {"size_max_workers": -1},
])
def test_from_dict_rejects_bad_values(data) -> None:
    with pytest.raises(SettingsError):
        FinderSettings.from_dict(data)


def test_to_dict_round_trips() -> None:
    settings = FinderSettings(locations=["/Library/Caches"], size_max_workers=2)
    assert FinderSettings.from_dict(settings.to_dict()) == settings


def test_load_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"name_search_strict": False, "locations": ["/tmp"]}))
    settings = load_settings(path)
    assert settings.name_search_strict is False
    assert settings.locations == ["/tmp"]


def test_load_settings_errors(tmp_path) -> None:
    with pytest.raises(SettingsError, match="not found"):
        load_settings(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(SettingsError, match="Invalid JSON"):
        load_settings(bad)

    listing = tmp_path / "list.json"
    listing.write_text("[]")
    with pytest.raises(SettingsError, match="JSON object"):
        load_settings(listing)
