"""Cursor over the current search results with wraparound."""
import logging
from typing import List, Optional

from models.search import SearchMatch

logger = logging.getLogger(__name__)


class SearchNavigator:
    """Tracks the current match and moves through results in either direction."""

    def __init__(self):
        self.matches: List[SearchMatch] = []
        self.current_index = 0

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def current(self) -> Optional[SearchMatch]:
        if not self.matches:
            return None
        return self.matches[self.current_index]

    def set_matches(self, matches: List[SearchMatch]) -> None:
        """Replace the result set and rewind to the first match."""
        self.matches = list(matches)
        self.current_index = 0

    def clear(self) -> None:
        self.set_matches([])

    def next(self) -> Optional[SearchMatch]:
        """Advance to the following match, wrapping to the first."""
        if not self.matches:
            return None
        self.current_index = (self.current_index + 1) % len(self.matches)
        return self.matches[self.current_index]

    def previous(self) -> Optional[SearchMatch]:
        """Step back to the preceding match, wrapping to the last."""
        if not self.matches:
            return None
        if self.current_index == 0:
            self.current_index = len(self.matches) - 1
        else:
            self.current_index -= 1
        return self.matches[self.current_index]

    def scroll_target(self, total_length: int, content_height: float) -> Optional[float]:
        """
        Approximate vertical offset of the current match.

        Layout metrics for wrapped text are unknown before render, so the
        character offset is mapped linearly onto the content height. The
        result is only close enough for manual fine-scrolling.

        Args:
            total_length: Length of the document content in characters
            content_height: Estimated rendered height in pixels

        Returns:
            Scroll offset in pixels, or None if there is no current match
        """
        match = self.current
        if match is None or total_length <= 0:
            return None
        return (match.index / total_length) * content_height
