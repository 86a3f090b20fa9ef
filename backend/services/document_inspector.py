"""File type detection and text statistics for viewer documents."""
import logging
import re
from typing import Dict, List, Optional

from models.document import DocumentStats, FileTypeInfo
from services.reading_progress import count_words, estimate_reading_time

logger = logging.getLogger(__name__)

# Checked in order; the first category whose extension appears wins
FILE_TYPE_EXTENSIONS: Dict[str, List[str]] = {
    "pdf": ["pdf"],
    "word": ["doc", "docx", "odt", "rtf"],
    "excel": ["xls", "xlsx", "ods", "csv"],
    "powerpoint": ["ppt", "pptx", "odp"],
    "text": ["txt", "md", "markdown", "log", "json", "xml", "html", "css", "js", "ts", "jsx", "tsx"],
    "image": ["jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"],
    "archive": ["zip", "rar", "7z", "tar", "gz"],
    "video": ["mp4", "avi", "mkv", "mov", "wmv", "flv"],
    "audio": ["mp3", "wav", "ogg", "flac", "aac"],
}

FILE_TYPE_INFO: Dict[str, FileTypeInfo] = {
    "pdf": FileTypeInfo("pdf", "PDF Document", "picture-as-pdf", ["view", "search", "bookmark", "share"]),
    "word": FileTypeInfo("word", "Word Document", "description", ["view", "search", "share"]),
    "excel": FileTypeInfo("excel", "Spreadsheet", "grid-on", ["view", "download"]),
    "powerpoint": FileTypeInfo("powerpoint", "Presentation", "slideshow", ["view", "download"]),
    "text": FileTypeInfo("text", "Text Document", "text-snippet", ["view", "search", "edit", "bookmark", "share"]),
    "image": FileTypeInfo("image", "Image File", "image", ["view", "zoom", "share"]),
    "archive": FileTypeInfo("archive", "Archive File", "archive", ["download"]),
    "video": FileTypeInfo("video", "Video File", "video-library", ["play", "share"]),
    "audio": FileTypeInfo("audio", "Audio File", "audiotrack", ["play", "share"]),
    "unknown": FileTypeInfo("unknown", "Document", "insert-drive-file", ["download"]),
}


def detect_file_type(file_type: Optional[str], name: Optional[str]) -> str:
    """
    Categorize a document from its reported type and file name.

    The reported type may be a MIME type ("application/pdf") or a bare
    extension; a substring hit on it or a matching name suffix is enough.
    """
    reported = (file_type or "").lower()
    filename = (name or "").lower()

    for category, extensions in FILE_TYPE_EXTENSIONS.items():
        if any(ext in reported or filename.endswith(f".{ext}") for ext in extensions):
            return category
    if reported.startswith("text/"):
        return "text"
    return "unknown"


def get_file_type_info(category: str) -> FileTypeInfo:
    return FILE_TYPE_INFO.get(category, FILE_TYPE_INFO["unknown"])


def is_text_readable(file_type: Optional[str], name: Optional[str], category: str) -> bool:
    """Whether the content source can decode the file straight to text."""
    if category == "text":
        return True
    return category == "excel" and (
        "csv" in (file_type or "").lower() or (name or "").lower().endswith(".csv")
    )


def calculate_document_stats(content: Optional[str]) -> Optional[DocumentStats]:
    """Word, character, line and paragraph counts plus reading time."""
    if not content:
        return None

    words = count_words(content)
    paragraphs = [p for p in re.split(r"\n\s*\n", content) if p.strip()]

    return DocumentStats(
        words=words,
        characters=len(content),
        characters_no_spaces=len(re.sub(r"\s", "", content)),
        lines=content.count("\n") + 1,
        paragraphs=len(paragraphs),
        estimated_read_time=estimate_reading_time(words)
    )


def format_file_size(size: int) -> str:
    """Format a byte count as e.g. '1.5 KB'."""
    units = ["Bytes", "KB", "MB", "GB"]
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size / (1024 ** exponent), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[exponent]}"
