"""Unit tests for PreferencesStore."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock
from pydantic import ValidationError
from models.preferences import ViewerPreferences
from services.key_value_store import InMemoryKeyValueStore, KeyValueStore, StorageError
from services.preferences_store import PreferencesStore, PREFERENCES_KEY


class TestPreferencesStore:
    """Test suite for PreferencesStore."""

    def test_defaults_when_nothing_stored(self):
        prefs = PreferencesStore(InMemoryKeyValueStore()).load()

        assert prefs.font_size == 16
        assert prefs.dark_mode is False
        assert prefs.line_spacing == 1.5
        assert prefs.text_wrap is True
        assert prefs.show_line_numbers is False

    def test_partial_blob_merged_over_defaults(self):
        store = InMemoryKeyValueStore({PREFERENCES_KEY: {"dark_mode": True, "retired_option": 1}})

        prefs = PreferencesStore(store).load()

        assert prefs.dark_mode is True
        assert prefs.font_size == 16

    def test_camel_case_blob_loaded(self):
        store = InMemoryKeyValueStore({PREFERENCES_KEY: {
            "fontSize": 22,
            "darkMode": True,
            "lineSpacing": 2.0,
            "textWrap": False,
            "showLineNumbers": True,
        }})

        prefs = PreferencesStore(store).load()

        assert prefs.font_size == 22
        assert prefs.dark_mode is True
        assert prefs.line_spacing == 2.0
        assert prefs.text_wrap is False
        assert prefs.show_line_numbers is True

    def test_saved_blob_uses_camel_case_keys(self):
        store = InMemoryKeyValueStore()
        PreferencesStore(store, initial_delay=0).update(dark_mode=True)

        assert set(store.get(PREFERENCES_KEY)) == {
            "fontSize", "darkMode", "lineSpacing", "textWrap", "showLineNumbers"
        }

    def test_invalid_blob_falls_back_to_defaults(self):
        """Test that a stored shape from an older release does not break loading."""
        store = InMemoryKeyValueStore({PREFERENCES_KEY: {"font_size": "huge"}})

        prefs = PreferencesStore(store).load()

        assert prefs == ViewerPreferences()

    def test_update_saves(self):
        store = InMemoryKeyValueStore()
        preferences = PreferencesStore(store, initial_delay=0)

        updated = preferences.update(font_size=20, dark_mode=None)

        assert updated.font_size == 20
        assert updated.dark_mode is False
        assert store.get(PREFERENCES_KEY)["fontSize"] == 20
        assert PreferencesStore(store).load().font_size == 20

    def test_update_rejects_out_of_range(self):
        preferences = PreferencesStore(InMemoryKeyValueStore())
        with pytest.raises(ValidationError):
            preferences.update(font_size=200)
        assert preferences.preferences.font_size == 16

    def test_storage_failures_logged_not_raised(self):
        failing = Mock(spec=KeyValueStore)
        failing.get.side_effect = StorageError("unreachable")
        failing.set.side_effect = StorageError("unreachable")
        preferences = PreferencesStore(failing, max_retries=1, initial_delay=0)

        assert preferences.load() == ViewerPreferences()
        assert preferences.update(line_spacing=2.0).line_spacing == 2.0
