"""Viewer session: the reading state of one opened document."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from models.bookmark import Bookmark, BookmarkToggleResult
from models.document import ViewerDocument, DocumentStats
from models.history import ViewingHistoryEntry
from models.preferences import ViewerPreferences
from models.search import SearchMatch
from services.bookmark_store import BookmarkStore
from services.debounced_search import DebouncedSearch
from services.document_inspector import calculate_document_stats, detect_file_type, get_file_type_info
from services.document_loader import DocumentLoader, ContentUnavailableError
from services.key_value_store import KeyValueStore
from services.preferences_store import PreferencesStore
from services.reading_progress import ReadingProgressTracker, ScrollMetrics
from services.search_engine import SearchEngine
from services.search_navigator import SearchNavigator
from services.viewer_event_logger import ViewerEventLogger
from services.viewing_history import ViewingHistory
from config import ESTIMATED_CONTENT_HEIGHT, SEARCH_DEBOUNCE_MS

logger = logging.getLogger(__name__)

STATE_LOADING = "loading"
STATE_READY = "ready"
STATE_DOWNLOAD = "download"
STATE_ERROR = "error"

LOAD_FAILURE_MESSAGE = "Failed to load document"


class DocumentViewerSession:
    """
    Owns everything the viewer knows about one opened document.

    Content and search results live only as long as the session. Bookmarks,
    preferences and viewing history are read on open and written back after
    every change. Failures are recovered here: a content-load error becomes
    a retryable error state and storage errors are logged.
    """

    def __init__(
        self,
        document: ViewerDocument,
        loader: DocumentLoader,
        store: KeyValueStore,
        preferences: Optional[PreferencesStore] = None,
        history: Optional[ViewingHistory] = None,
        event_logger: Optional[ViewerEventLogger] = None,
        search_engine: Optional[SearchEngine] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        **retry_kwargs
    ):
        """
        Initialize a viewer session.

        Args:
            document: Document being viewed
            loader: Content source for the document text
            store: Key-value store for bookmarks
            preferences: Shared preference store (created on the same store if omitted)
            history: Shared viewing history (created on the same store if omitted)
            event_logger: Optional analytics event sink
            search_engine: Engine used for in-document search
            debounce_ms: Quiet period for keystroke searches
            **retry_kwargs: Passed to persist_with_retry for every write
        """
        self.document = document
        self.loader = loader
        self.file_type = detect_file_type(document.file_type, document.name)
        self.file_info = get_file_type_info(self.file_type)

        self.state = STATE_LOADING
        self.view_mode: Optional[str] = None
        self.url: Optional[str] = None
        self.content: Optional[str] = None
        self.stats: Optional[DocumentStats] = None
        self.error: Optional[str] = None

        self.search_engine = search_engine or SearchEngine()
        self.navigator = SearchNavigator()
        self.query = ""
        self.debounced_search = DebouncedSearch(self.search_engine, self._apply_search_results, debounce_ms)

        self.progress = ReadingProgressTracker()
        self.bookmarks = BookmarkStore(store, document.document_id, **retry_kwargs)
        self.preferences = preferences or PreferencesStore(store, **retry_kwargs)
        self.history = history or ViewingHistory(store, **retry_kwargs)
        self.event_logger = event_logger

    @property
    def document_id(self) -> str:
        return self.document.document_id

    @property
    def retryable(self) -> bool:
        return self.state == STATE_ERROR

    def open(self) -> "DocumentViewerSession":
        """Load persisted state, then the document content."""
        self.load_state()
        self.load_content()
        self._log_event("document_viewed", document_type=self.file_type, document_size=self.document.size)
        return self

    def load_state(self) -> None:
        self.preferences.load()
        self.bookmarks.load()
        self.history.load()

    def load_content(self) -> bool:
        """
        Load (or reload) the document content.

        Returns:
            True on success; on failure the session enters the error state
            and can be retried by calling this again
        """
        self.state = STATE_LOADING
        self.error = None

        try:
            loaded = self.loader.load(self.document)
        except ContentUnavailableError as e:
            logger.error(f"Error loading document {self.document_id}: {e}")
            self.state = STATE_ERROR
            self.error = str(e) or LOAD_FAILURE_MESSAGE
            self._set_content(None)
            self._log_event("document_load_error", document_type=self.file_type, error=self.error)
            return False

        self.view_mode = loaded.view_mode
        self.url = loaded.url
        self._set_content(loaded.content)
        self.state = STATE_READY if loaded.content is not None else STATE_DOWNLOAD
        return True

    # Search

    def search(self, query: Optional[str]) -> List[SearchMatch]:
        """Search immediately, superseding any pending debounced search."""
        self.debounced_search.cancel()
        self.query = query or ""
        matches = self.search_engine.search(self.content, self.query)
        self._apply_search_results(self.query, matches)
        return matches

    def search_debounced(self, query: Optional[str]) -> bool:
        """
        Schedule a search after the debounce period.

        Must be called from a running event loop.

        Returns:
            True if a scan was scheduled, False if the result was empty and applied at once
        """
        self.query = query or ""
        return self.debounced_search.submit(self.content, self.query)

    @property
    def matches(self) -> List[SearchMatch]:
        return self.navigator.matches

    def next_match(self) -> Optional[float]:
        """Move to the next match; returns its approximate scroll offset."""
        if self.navigator.next() is None:
            return None
        return self._match_scroll_target()

    def previous_match(self) -> Optional[float]:
        """Move to the previous match; returns its approximate scroll offset."""
        if self.navigator.previous() is None:
            return None
        return self._match_scroll_target()

    # Reading progress

    def scroll_update(self, metrics: ScrollMetrics) -> float:
        return self.progress.update(metrics)

    @property
    def content_height(self) -> float:
        """Last reported content height, or the fixed estimate before any scroll."""
        if self.progress.content_height is None:
            return ESTIMATED_CONTENT_HEIGHT
        return self.progress.content_height

    # Bookmarks

    def toggle_bookmark(self, position: int) -> BookmarkToggleResult:
        result = self.bookmarks.toggle(position, self.content)
        self._log_event(
            "bookmark_toggled",
            action=result.action,
            position=position,
            persisted=result.persisted
        )
        return result

    def bookmark_scroll_target(self, bookmark_id: str) -> Optional[float]:
        """Approximate scroll offset of a saved bookmark."""
        bookmark: Optional[Bookmark] = next(
            (b for b in self.bookmarks.bookmarks if b.id == bookmark_id), None
        )
        if bookmark is None or not self.content:
            return None
        return (bookmark.position / len(self.content)) * self.content_height

    # Preferences and history

    def update_preferences(self, **changes) -> ViewerPreferences:
        return self.preferences.update(**changes)

    def record_view(self) -> ViewingHistoryEntry:
        """Write the current reading position to the viewing history."""
        entry = ViewingHistoryEntry(
            document_id=self.document_id,
            document_name=self.document.name,
            viewed_at=datetime.now(timezone.utc),
            reading_progress=self.progress.progress,
            scroll_position=self.progress.scroll_position
        )
        self.history.record(entry)
        return entry

    def close(self) -> ViewingHistoryEntry:
        """Stop pending work and record the final reading position."""
        self.debounced_search.cancel()
        entry = self.record_view()
        self._log_event("document_closed", reading_progress=entry.reading_progress)
        return entry

    # Internals

    def _set_content(self, content: Optional[str]) -> None:
        self.content = content
        self.stats = calculate_document_stats(content)
        # New content invalidates any scan still running against the old text
        self.debounced_search.cancel()
        self.navigator.set_matches(self.search_engine.search(content, self.query))

    def _apply_search_results(self, query: str, matches: List[SearchMatch]) -> None:
        self.navigator.set_matches(matches)
        if query:
            self._log_event("search_performed", query_length=len(query), match_count=len(matches))

    def _match_scroll_target(self) -> Optional[float]:
        return self.navigator.scroll_target(len(self.content or ""), self.content_height)

    def _log_event(self, event: str, **properties) -> None:
        if self.event_logger is not None:
            self.event_logger.log_event(event, document_id=self.document_id, **properties)
