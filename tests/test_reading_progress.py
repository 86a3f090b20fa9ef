"""Unit tests for reading progress and reading-time estimation."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.reading_progress import (
    ReadingProgressTracker,
    ScrollMetrics,
    compute_progress,
    count_words,
    estimate_reading_time,
    format_reading_time,
)


class TestComputeProgress:
    """Test suite for scroll-to-progress mapping."""

    def test_midpoint(self):
        metrics = ScrollMetrics(offset_y=500, content_height=1800, viewport_height=800)
        assert compute_progress(metrics) == pytest.approx(0.5)

    def test_negative_offset_clamped_to_zero(self):
        """Test overscroll above the top (bounce) is clamped."""
        metrics = ScrollMetrics(offset_y=-120, content_height=1800, viewport_height=800)
        assert compute_progress(metrics) == 0.0

    def test_offset_beyond_max_clamped_to_one(self):
        metrics = ScrollMetrics(offset_y=5000, content_height=1800, viewport_height=800)
        assert compute_progress(metrics) == 1.0

    @pytest.mark.parametrize("content_height", [800, 500, 0])
    def test_content_not_taller_than_viewport_counts_as_read(self, content_height):
        """Test that a zero or negative scrollable range yields full progress."""
        metrics = ScrollMetrics(offset_y=0, content_height=content_height, viewport_height=800)
        assert compute_progress(metrics) == 1.0


class TestReadingProgressTracker:
    """Test suite for ReadingProgressTracker."""

    def test_initial_state(self):
        tracker = ReadingProgressTracker()
        assert tracker.progress == 0.0
        assert tracker.scroll_position == 0.0
        assert tracker.content_height is None

    def test_update_records_position_and_height(self):
        tracker = ReadingProgressTracker()
        progress = tracker.update(ScrollMetrics(offset_y=250, content_height=1200, viewport_height=700))

        assert progress == pytest.approx(0.5)
        assert tracker.progress == pytest.approx(0.5)
        assert tracker.scroll_position == 250
        assert tracker.content_height == 1200

    def test_reset(self):
        tracker = ReadingProgressTracker()
        tracker.update(ScrollMetrics(offset_y=250, content_height=1200, viewport_height=700))
        tracker.reset()
        assert tracker.progress == 0.0
        assert tracker.content_height is None


class TestReadingTime:
    """Test suite for word counting and reading-time estimation."""

    def test_count_words_ignores_whitespace_runs(self):
        assert count_words("  easy   run\n\n\tthen  strides ") == 4
        assert count_words("") == 0
        assert count_words(None) == 0

    def test_documented_example(self):
        """Test that 450 words take 2 minutes at 225 wpm."""
        assert estimate_reading_time(450) == 2

    def test_rounds_up(self):
        assert estimate_reading_time(1) == 1
        assert estimate_reading_time(225) == 1
        assert estimate_reading_time(226) == 2

    def test_zero_words(self):
        assert estimate_reading_time(0) == 0

    @pytest.mark.parametrize("minutes,label", [
        (0, "Less than 1 min"),
        (1, "1 min"),
        (12, "12 mins"),
        (60, "1h 0m"),
        (135, "2h 15m"),
    ])
    def test_format_reading_time(self, minutes, label):
        assert format_reading_time(minutes) == label
