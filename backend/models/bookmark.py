"""Bookmark data models."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class Bookmark:
    """A user-saved position within a document's text."""
    id: str
    position: int  # character offset
    timestamp: str  # ISO 8601 creation time
    preview: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        return cls(
            id=str(data["id"]),
            position=int(data["position"]),
            timestamp=data["timestamp"],
            preview=data.get("preview", ""),
        )


@dataclass
class BookmarkToggleResult:
    """Outcome of a bookmark toggle, including whether it reached storage."""
    action: str  # "added" or "removed"
    bookmark: Bookmark
    persisted: bool
    message: str
    error: Optional[str] = None
