"""Viewing history data models."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict


@dataclass
class ViewingHistoryEntry:
    """Last known reading state of a document."""
    document_id: str
    document_name: str
    viewed_at: datetime
    reading_progress: float = 0.0
    scroll_position: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documentId": self.document_id,
            "documentName": self.document_name,
            "viewedAt": self.viewed_at.isoformat(),
            "readingProgress": self.reading_progress,
            "scrollPosition": self.scroll_position,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewingHistoryEntry":
        viewed_at = datetime.fromisoformat(data["viewedAt"].replace("Z", "+00:00"))
        if viewed_at.tzinfo is None:
            viewed_at = viewed_at.replace(tzinfo=timezone.utc)
        return cls(
            document_id=str(data["documentId"]),
            document_name=data.get("documentName") or "",
            viewed_at=viewed_at,
            reading_progress=float(data.get("readingProgress", 0.0)),
            scroll_position=float(data.get("scrollPosition", 0.0)),
        )
