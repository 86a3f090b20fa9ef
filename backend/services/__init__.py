"""Services for the Document Viewer service."""
from .key_value_store import (
    KeyValueStore,
    InMemoryKeyValueStore,
    SupabaseKeyValueStore,
    StorageError,
    create_key_value_store,
)
from .document_loader import DocumentLoader, ContentUnavailableError
from .search_engine import SearchEngine
from .search_navigator import SearchNavigator
from .debounced_search import DebouncedSearch
from .reading_progress import ReadingProgressTracker, ScrollMetrics
from .bookmark_store import BookmarkStore
from .viewing_history import ViewingHistory
from .preferences_store import PreferencesStore
from .viewer_event_logger import ViewerEventLogger
from .viewer_session import DocumentViewerSession

__all__ = ['KeyValueStore', 'InMemoryKeyValueStore', 'SupabaseKeyValueStore', 'StorageError', 'create_key_value_store', 'DocumentLoader', 'ContentUnavailableError', 'SearchEngine', 'SearchNavigator', 'DebouncedSearch', 'ReadingProgressTracker', 'ScrollMetrics', 'BookmarkStore', 'ViewingHistory', 'PreferencesStore', 'ViewerEventLogger', 'DocumentViewerSession']
