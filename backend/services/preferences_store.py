"""Viewer preference persistence."""
import logging
from pydantic import ValidationError

from models.preferences import ViewerPreferences
from services.key_value_store import KeyValueStore, StorageError, persist_with_retry

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "document_viewer_prefs"


class PreferencesStore:
    """Loads and saves the viewer's reading preferences."""

    def __init__(self, store: KeyValueStore, **retry_kwargs):
        self.store = store
        self._retry_kwargs = retry_kwargs
        self.preferences = ViewerPreferences()

    def load(self) -> ViewerPreferences:
        """
        Read stored preferences merged over the defaults.

        Stored data with an outdated or invalid shape is discarded in favour
        of the defaults rather than failing the viewer.
        """
        try:
            raw = self.store.get(PREFERENCES_KEY)
        except StorageError as e:
            logger.error(f"Error loading preferences: {e}")
            return self.preferences

        if raw is None:
            return self.preferences

        try:
            self.preferences = ViewerPreferences.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored preferences are invalid, using defaults: {e}")
            self.preferences = ViewerPreferences()

        return self.preferences

    def save(self, preferences: ViewerPreferences) -> None:
        self.preferences = preferences
        try:
            persist_with_retry(
                self.store, PREFERENCES_KEY, preferences.model_dump(by_alias=True), **self._retry_kwargs
            )
        except StorageError as e:
            logger.error(f"Error saving preferences: {e}")

    def update(self, **changes) -> ViewerPreferences:
        """
        Apply a partial update and save the result.

        Raises:
            ValidationError: If a changed value is out of range
        """
        merged = {**self.preferences.model_dump(), **{k: v for k, v in changes.items() if v is not None}}
        preferences = ViewerPreferences.model_validate(merged)
        self.save(preferences)
        return preferences
