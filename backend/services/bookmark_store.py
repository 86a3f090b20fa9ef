"""Per-document bookmark set with toggle semantics."""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from models.bookmark import Bookmark, BookmarkToggleResult
from services.key_value_store import KeyValueStore, StorageError, persist_with_retry
from config import BOOKMARK_PROXIMITY_CHARS, BOOKMARK_PREVIEW_CHARS

logger = logging.getLogger(__name__)

BOOKMARK_FAILURE_MESSAGE = "Could not save bookmark changes"


def bookmarks_key(document_id: str) -> str:
    return f"bookmarks_{document_id}"


class BookmarkStore:
    """
    Bookmarks for one document, kept sorted by position.

    Toggling near an existing bookmark removes it instead of adding a
    second one, so no two bookmarks closer than the proximity window
    coexist. Every mutation writes the full set back to storage; a failed
    write is reported but the in-memory change is kept.
    """

    def __init__(
        self,
        store: KeyValueStore,
        document_id: str,
        proximity: int = BOOKMARK_PROXIMITY_CHARS,
        preview_length: int = BOOKMARK_PREVIEW_CHARS,
        **retry_kwargs
    ):
        self.store = store
        self.document_id = document_id
        self.proximity = proximity
        self.preview_length = preview_length
        self._retry_kwargs = retry_kwargs
        self.bookmarks: List[Bookmark] = []
        # False until a read succeeds; the stored set is never overwritten before that
        self.loaded = False

    def load(self) -> List[Bookmark]:
        """
        Read the persisted bookmark set.

        Missing data yields an empty set. Unreadable storage is logged, the
        bookmarks already in memory are kept and the store is marked as not
        loaded.
        """
        try:
            raw = self.store.get(bookmarks_key(self.document_id))
        except StorageError as e:
            logger.error(f"Error loading bookmarks for {self.document_id}: {e}")
            self.loaded = False
            return list(self.bookmarks)

        bookmarks = []
        for item in raw or []:
            try:
                bookmarks.append(Bookmark.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed bookmark for {self.document_id}: {e}")

        self.bookmarks = sorted(bookmarks, key=lambda b: b.position)
        self.loaded = True
        logger.debug(f"Loaded {len(self.bookmarks)} bookmarks for {self.document_id}")
        return list(self.bookmarks)

    def find_near(self, position: int) -> Optional[Bookmark]:
        """First bookmark strictly closer than the proximity window."""
        for bookmark in self.bookmarks:
            if abs(bookmark.position - position) < self.proximity:
                return bookmark
        return None

    def toggle(self, position: int, content: Optional[str] = None) -> BookmarkToggleResult:
        """
        Remove the bookmark near position, or add a new one there.

        Args:
            position: Character offset into the document content
            content: Document text used for the bookmark preview

        Returns:
            BookmarkToggleResult describing the change and whether it was saved
        """
        if not self.loaded:
            self.load()

        existing = self.find_near(position)

        if existing is not None:
            self.bookmarks = [b for b in self.bookmarks if b.id != existing.id]
            action, bookmark, message = "removed", existing, "Bookmark removed"
        else:
            bookmark = Bookmark(
                id=self._generate_bookmark_id(),
                position=position,
                timestamp=datetime.now(timezone.utc).isoformat(),
                preview=content[position:position + self.preview_length] if content else ""
            )
            self.bookmarks.append(bookmark)
            action, message = "added", "Bookmark added"

        self.bookmarks.sort(key=lambda b: b.position)
        logger.info(f"Bookmark {action} at {position} in {self.document_id}")

        try:
            self.save()
        except StorageError as e:
            logger.error(f"Error managing bookmark for {self.document_id}: {e}")
            return BookmarkToggleResult(
                action=action,
                bookmark=bookmark,
                persisted=False,
                message=BOOKMARK_FAILURE_MESSAGE,
                error=str(e)
            )

        return BookmarkToggleResult(action=action, bookmark=bookmark, persisted=True, message=message)

    def save(self) -> None:
        """
        Write the full bookmark set, retrying transient failures.

        Raises:
            StorageError: If the stored set was never read, or every write attempt fails
        """
        if not self.loaded:
            raise StorageError(
                f"Stored bookmarks for {self.document_id} could not be read; not overwriting them"
            )
        persist_with_retry(
            self.store,
            bookmarks_key(self.document_id),
            [b.to_dict() for b in self.bookmarks],
            **self._retry_kwargs
        )

    def _generate_bookmark_id(self) -> str:
        return f"bm_{uuid.uuid4().hex[:12]}"
