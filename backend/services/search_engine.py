"""Literal, case-insensitive text search over loaded document content."""
import logging
import re
from typing import List, Optional

from models.search import SearchMatch
from config import SEARCH_CONTEXT_CHARS

logger = logging.getLogger(__name__)


class SearchEngine:
    """Find every occurrence of a query in document text."""

    def __init__(self, context_chars: int = SEARCH_CONTEXT_CHARS):
        """
        Initialize SearchEngine.

        Args:
            context_chars: Characters of surrounding text kept on each side of a match
        """
        self.context_chars = context_chars

    def search(self, content: Optional[str], query: Optional[str]) -> List[SearchMatch]:
        """
        Locate all non-overlapping matches of query in content.

        The query is matched as a literal string, ignoring case. No index is
        kept between calls; the full content is scanned every time.

        Args:
            content: Decoded document text
            query: Text typed by the user

        Returns:
            Matches ordered by offset, empty if query or content is empty
        """
        if not query or not content:
            return []

        pattern = re.compile(re.escape(query), re.IGNORECASE)
        matches = []
        # Running line count avoids re-splitting the prefix for every match
        line = 1
        line_scanned_to = 0

        for match in pattern.finditer(content):
            start = match.start()
            line += content.count("\n", line_scanned_to, start)
            line_scanned_to = start

            context_start = max(0, start - self.context_chars)
            context_end = min(len(content), match.end() + self.context_chars)

            matches.append(SearchMatch(
                index=start,
                text=match.group(0),
                context=content[context_start:context_end],
                line=line
            ))

        logger.debug(f"Query '{query[:50]}' matched {len(matches)} times in {len(content)} chars")
        return matches
