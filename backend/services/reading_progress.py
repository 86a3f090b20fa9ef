"""Reading progress and reading-time estimation."""
import logging
import math
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Average adult reading speed in words per minute
WORDS_PER_MINUTE = 225


@dataclass
class ScrollMetrics:
    """Scroll position and sizes reported by the rendering surface."""
    offset_y: float
    content_height: float
    viewport_height: float


def count_words(content: Optional[str]) -> int:
    """Count whitespace-separated tokens."""
    if not content:
        return 0
    return len(content.split())


def estimate_reading_time(word_count: int) -> int:
    """Estimated minutes to read word_count words."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / WORDS_PER_MINUTE)


def format_reading_time(minutes: int) -> str:
    """Human-readable reading time."""
    if minutes < 1:
        return "Less than 1 min"
    if minutes < 60:
        return f"{minutes} min{'s' if minutes > 1 else ''}"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m"


def compute_progress(metrics: ScrollMetrics) -> float:
    """
    Fraction of the scrollable range that has been scrolled past.

    Content that fits inside the viewport is fully visible and counts as
    read, so a non-positive scrollable range yields 1.0.
    """
    scrollable = metrics.content_height - metrics.viewport_height
    if scrollable <= 0:
        return 1.0
    return max(0.0, min(1.0, metrics.offset_y / scrollable))


class ReadingProgressTracker:
    """Keeps the latest reading progress for a viewer session."""

    def __init__(self, initial_progress: float = 0.0, initial_position: float = 0.0):
        self.progress = max(0.0, min(1.0, initial_progress))
        self.scroll_position = initial_position
        self.content_height: Optional[float] = None

    def update(self, metrics: ScrollMetrics) -> float:
        """
        Record a scroll event.

        Args:
            metrics: Latest scroll metrics

        Returns:
            Reading progress clamped to [0, 1]
        """
        self.scroll_position = metrics.offset_y
        self.content_height = metrics.content_height
        self.progress = compute_progress(metrics)
        return self.progress

    def reset(self) -> None:
        self.progress = 0.0
        self.scroll_position = 0.0
        self.content_height = None
