"""Search data models."""
from dataclasses import dataclass


@dataclass
class SearchMatch:
    """A located occurrence of a search term in document text."""
    index: int  # character offset into the content
    text: str  # matched substring as it appears in the content
    context: str  # excerpt surrounding the match
    line: int  # 1-based line number
