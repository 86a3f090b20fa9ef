"""Recently viewed documents, newest first."""
import logging
from typing import List

from models.history import ViewingHistoryEntry
from services.key_value_store import KeyValueStore, StorageError, persist_with_retry
from config import HISTORY_LIMIT

logger = logging.getLogger(__name__)

HISTORY_KEY = "document_viewing_history"


class ViewingHistory:
    """Bounded viewing history holding at most one entry per document."""

    def __init__(self, store: KeyValueStore, limit: int = HISTORY_LIMIT, **retry_kwargs):
        self.store = store
        self.limit = limit
        self._retry_kwargs = retry_kwargs
        self.entries: List[ViewingHistoryEntry] = []
        self.loaded = False

    def load(self) -> List[ViewingHistoryEntry]:
        """
        Read the persisted history.

        A read failure is logged and leaves the entries already in memory
        untouched; the history then counts as not loaded.
        """
        try:
            raw = self.store.get(HISTORY_KEY)
        except StorageError as e:
            logger.error(f"Error loading viewing history: {e}")
            self.loaded = False
            return list(self.entries)

        entries = []
        for item in raw or []:
            try:
                entries.append(ViewingHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed history entry: {e}")

        self.entries = self._normalize(entries)
        self.loaded = True
        return list(self.entries)

    def record(self, entry: ViewingHistoryEntry) -> List[ViewingHistoryEntry]:
        """
        Add or replace the entry for a document and persist the list.

        Write failures are logged, not raised; the in-memory list keeps the
        new entry either way. The stored list is re-read first if it has not
        been read yet, and is left alone if that read fails too.
        """
        if not self.loaded:
            self.load()

        others = [e for e in self.entries if e.document_id != entry.document_id]
        self.entries = self._normalize(others + [entry])

        if not self.loaded:
            logger.error("Stored viewing history could not be read; not overwriting it")
            return list(self.entries)

        try:
            persist_with_retry(
                self.store,
                HISTORY_KEY,
                [e.to_dict() for e in self.entries],
                **self._retry_kwargs
            )
        except StorageError as e:
            logger.error(f"Error updating viewing history: {e}")

        return list(self.entries)

    def get(self, document_id: str):
        for entry in self.entries:
            if entry.document_id == document_id:
                return entry
        return None

    def _normalize(self, entries: List[ViewingHistoryEntry]) -> List[ViewingHistoryEntry]:
        ordered = sorted(entries, key=lambda e: e.viewed_at, reverse=True)
        # Keep only the newest entry per document
        seen = set()
        unique = []
        for entry in ordered:
            if entry.document_id in seen:
                continue
            seen.add(entry.document_id)
            unique.append(entry)
        return unique[:self.limit]
