"""JSON Lines log of viewer events (opens, load errors, searches, bookmarks)."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from config import EVENT_LOG_PATH

logger = logging.getLogger(__name__)


class ViewerEventLogger:
    """Append one JSON object per viewer event to a log file."""

    def __init__(self, log_file_path: str = EVENT_LOG_PATH):
        """
        Initialize the event logger.

        Args:
            log_file_path: Target file; parent directories are created if missing
        """
        self.log_file_path = Path(log_file_path)
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.log_file_path, "a", encoding="utf-8")
        logger.info(f"ViewerEventLogger writing to {self.log_file_path}")

    def log_event(self, event: str, document_id: Optional[str] = None, **properties: Any) -> Dict[str, Any]:
        """
        Write a single event.

        Args:
            event: Event name, e.g. "document_viewed"
            document_id: Document the event refers to
            **properties: Additional JSON-serializable fields

        Returns:
            The record that was written
        """
        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "event": event,
            "document_id": document_id,
        }
        record.update(properties)

        try:
            self._file.write(json.dumps(record, default=str) + "\n")
            self._file.flush()
        except (OSError, ValueError) as e:
            # Analytics must never break the viewer
            logger.error(f"Failed to write viewer event {event}: {e}")

        return record

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
