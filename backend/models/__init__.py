"""Data models for the Document Viewer service."""
from .document import ViewerDocument, LoadedContent, FileTypeInfo, DocumentStats
from .search import SearchMatch
from .bookmark import Bookmark, BookmarkToggleResult
from .history import ViewingHistoryEntry
from .preferences import ViewerPreferences

__all__ = [
    "ViewerDocument",
    "LoadedContent",
    "FileTypeInfo",
    "DocumentStats",
    "SearchMatch",
    "Bookmark",
    "BookmarkToggleResult",
    "ViewingHistoryEntry",
    "ViewerPreferences",
]
