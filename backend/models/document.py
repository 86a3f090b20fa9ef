"""Document data models."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ViewerDocument:
    """Describes a document the viewer is asked to open."""
    document_id: str
    name: str
    file_type: str = ""  # MIME type or bare extension as reported by the uploader
    local_path: Optional[str] = None
    size: int = 0  # bytes


@dataclass
class LoadedContent:
    """Result of resolving a document through a content source."""
    view_mode: str  # "text" or "download"
    content: Optional[str] = None
    url: Optional[str] = None


@dataclass
class FileTypeInfo:
    """Display label and viewer capabilities for a file category."""
    category: str
    label: str
    icon: str
    capabilities: List[str] = field(default_factory=list)


@dataclass
class DocumentStats:
    """Word, line and reading-time statistics for loaded text."""
    words: int
    characters: int
    characters_no_spaces: int
    lines: int
    paragraphs: int
    estimated_read_time: int  # minutes
