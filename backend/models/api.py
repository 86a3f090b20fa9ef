"""API request/response models."""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.preferences import ViewerPreferences


class OpenDocumentRequest(BaseModel):
    """Request body for opening a document in a viewer session."""
    name: str = Field(..., min_length=1)
    file_type: str = ""
    local_path: Optional[str] = None
    size: int = Field(default=0, ge=0)


class SearchRequest(BaseModel):
    """Search query as typed by the user."""
    query: str = ""


class Size(BaseModel):
    width: float = 0.0
    height: float = 0.0


class Offset(BaseModel):
    x: float = 0.0
    y: float = 0.0


class ScrollEvent(BaseModel):
    """Scroll metrics reported by the rendering surface."""
    contentOffset: Offset
    contentSize: Size
    layoutMeasurement: Size


class BookmarkToggleRequest(BaseModel):
    position: int = Field(..., ge=0)


class PreferencesUpdate(BaseModel):
    """Partial preference update; unset fields keep their current value."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    font_size: Optional[int] = None
    dark_mode: Optional[bool] = None
    line_spacing: Optional[float] = None
    text_wrap: Optional[bool] = None
    show_line_numbers: Optional[bool] = None


class FileTypeInfoResponse(BaseModel):
    category: str
    label: str
    icon: str
    capabilities: List[str]


class DocumentStatsResponse(BaseModel):
    words: int
    characters: int
    characters_no_spaces: int
    lines: int
    paragraphs: int
    estimated_read_time: int
    estimated_read_time_label: str


class SearchMatchResponse(BaseModel):
    index: int
    text: str
    context: str
    line: int


class SearchResponse(BaseModel):
    query: str
    matches: List[SearchMatchResponse]
    current_index: int
    total: int


class DebouncedSearchResponse(BaseModel):
    query: str
    scheduled: bool


class NavigationResponse(BaseModel):
    current_index: int
    total: int
    match: Optional[SearchMatchResponse] = None
    scroll_y: Optional[float] = None


class ProgressResponse(BaseModel):
    reading_progress: float
    scroll_position: float


class BookmarkResponse(BaseModel):
    id: str
    position: int
    timestamp: str
    preview: str


class BookmarkToggleResponse(BaseModel):
    action: str
    bookmark: BookmarkResponse
    persisted: bool
    message: str


class HistoryEntryResponse(BaseModel):
    document_id: str
    document_name: str
    viewed_at: str
    reading_progress: float
    scroll_position: float


class DocumentSessionResponse(BaseModel):
    """Snapshot of a viewer session."""
    document_id: str
    name: str
    state: str  # loading, ready, download, error
    view_mode: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None
    retryable: bool = False
    file_info: FileTypeInfoResponse
    stats: Optional[DocumentStatsResponse] = None
    reading_progress: float = 0.0
    bookmarks: List[BookmarkResponse] = []
    preferences: ViewerPreferences
