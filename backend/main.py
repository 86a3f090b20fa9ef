"""Main entry point for the Document Viewer API."""
import logging
from typing import Dict, List, Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from config import PORT, CORS_ORIGINS, STORAGE_BACKEND, DOCS_DIRECTORY, EVENT_LOG_PATH, LOG_LEVEL, LOG_FORMAT
from logger import setup_logging
from models.api import (
    OpenDocumentRequest,
    SearchRequest,
    ScrollEvent,
    BookmarkToggleRequest,
    PreferencesUpdate,
    FileTypeInfoResponse,
    DocumentStatsResponse,
    SearchMatchResponse,
    SearchResponse,
    DebouncedSearchResponse,
    NavigationResponse,
    ProgressResponse,
    BookmarkResponse,
    BookmarkToggleResponse,
    HistoryEntryResponse,
    DocumentSessionResponse,
)
from models.bookmark import Bookmark
from models.document import ViewerDocument
from models.preferences import ViewerPreferences
from models.search import SearchMatch
from services.document_loader import DocumentLoader, find_document_file
from services.key_value_store import KeyValueStore, create_key_value_store
from services.preferences_store import PreferencesStore
from services.reading_progress import ScrollMetrics, format_reading_time
from services.viewer_event_logger import ViewerEventLogger
from services.viewer_session import DocumentViewerSession
from services.viewing_history import ViewingHistory

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Document Viewer API",
    description="Reading sessions for training-plan documents: search, bookmarks, progress and history",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
store: KeyValueStore = None
document_loader: DocumentLoader = None
preferences_store: PreferencesStore = None
viewing_history: ViewingHistory = None
event_logger: ViewerEventLogger = None
sessions: Dict[str, DocumentViewerSession] = {}


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global store, document_loader, preferences_store, viewing_history, event_logger

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing Document Viewer services...")

    try:
        store = create_key_value_store(STORAGE_BACKEND)
        logger.info(f"Initialized {STORAGE_BACKEND} key-value store")

        document_loader = DocumentLoader(DOCS_DIRECTORY)
        preferences_store = PreferencesStore(store)
        preferences_store.load()
        viewing_history = ViewingHistory(store)
        viewing_history.load()
        event_logger = ViewerEventLogger(EVENT_LOG_PATH)

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Record history for sessions still open and release the event log."""
    for session in list(sessions.values()):
        session.close()
    sessions.clear()
    if event_logger is not None:
        event_logger.close()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Document Viewer API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "document-viewer",
        "version": "1.0.0",
        "open_sessions": len(sessions)
    }


# Handlers that write to storage are plain functions: write retries sleep,
# and FastAPI runs these in its threadpool instead of on the event loop.
@app.post("/documents/{document_id}/open", response_model=DocumentSessionResponse)
def open_document(document_id: str, request: OpenDocumentRequest) -> DocumentSessionResponse:
    """
    Open a document in a new viewer session.

    A failed content load is not an HTTP error: the session is returned in
    the "error" state with retryable=True so the client can offer "Try Again".
    """
    try:
        previous = sessions.pop(document_id, None)
        if previous is not None:
            previous.close()

        local_path = request.local_path or find_document_file(document_loader.docs_directory, document_id)
        document = ViewerDocument(
            document_id=document_id,
            name=request.name,
            file_type=request.file_type,
            local_path=local_path,
            size=request.size
        )

        session = DocumentViewerSession(
            document=document,
            loader=document_loader,
            store=store,
            preferences=preferences_store,
            history=viewing_history,
            event_logger=event_logger
        )
        session.open()
        sessions[document_id] = session

        logger.info(f"Opened {document_id} ({session.file_type}) in state {session.state}")
        return _session_response(session)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error opening document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@app.post("/documents/{document_id}/reload", response_model=DocumentSessionResponse)
def reload_document(document_id: str) -> DocumentSessionResponse:
    """Retry loading content for a session (the "Try Again" action)."""
    session = _get_session(document_id)
    session.load_content()
    return _session_response(session)


@app.get("/documents/{document_id}", response_model=DocumentSessionResponse)
async def get_document(document_id: str) -> DocumentSessionResponse:
    return _session_response(_get_session(document_id))


@app.delete("/documents/{document_id}", response_model=HistoryEntryResponse)
def close_document(document_id: str) -> HistoryEntryResponse:
    """Close a session and record its final reading position."""
    session = _get_session(document_id)
    entry = session.close()
    sessions.pop(document_id, None)
    return HistoryEntryResponse(
        document_id=entry.document_id,
        document_name=entry.document_name,
        viewed_at=entry.viewed_at.isoformat(),
        reading_progress=entry.reading_progress,
        scroll_position=entry.scroll_position
    )


@app.post("/documents/{document_id}/search", response_model=SearchResponse)
async def search_document(document_id: str, request: SearchRequest) -> SearchResponse:
    """Search immediately."""
    session = _get_session(document_id)
    session.search(request.query)
    return _search_response(session)


@app.put("/documents/{document_id}/search", response_model=DebouncedSearchResponse, status_code=202)
async def search_document_debounced(document_id: str, request: SearchRequest) -> DebouncedSearchResponse:
    """Submit a keystroke; the scan runs once typing pauses. Poll GET for results."""
    session = _get_session(document_id)
    scheduled = session.search_debounced(request.query)
    return DebouncedSearchResponse(query=request.query, scheduled=scheduled)


@app.get("/documents/{document_id}/search", response_model=SearchResponse)
async def get_search_results(document_id: str) -> SearchResponse:
    return _search_response(_get_session(document_id))


@app.post("/documents/{document_id}/search/next", response_model=NavigationResponse)
async def next_search_result(document_id: str) -> NavigationResponse:
    session = _get_session(document_id)
    scroll_y = session.next_match()
    return _navigation_response(session, scroll_y)


@app.post("/documents/{document_id}/search/previous", response_model=NavigationResponse)
async def previous_search_result(document_id: str) -> NavigationResponse:
    session = _get_session(document_id)
    scroll_y = session.previous_match()
    return _navigation_response(session, scroll_y)


@app.post("/documents/{document_id}/scroll", response_model=ProgressResponse)
async def scroll_document(document_id: str, event: ScrollEvent) -> ProgressResponse:
    session = _get_session(document_id)
    progress = session.scroll_update(ScrollMetrics(
        offset_y=event.contentOffset.y,
        content_height=event.contentSize.height,
        viewport_height=event.layoutMeasurement.height
    ))
    return ProgressResponse(reading_progress=progress, scroll_position=session.progress.scroll_position)


@app.get("/documents/{document_id}/bookmarks", response_model=List[BookmarkResponse])
async def list_bookmarks(document_id: str) -> List[BookmarkResponse]:
    session = _get_session(document_id)
    return [_bookmark_response(b) for b in session.bookmarks.bookmarks]


@app.post("/documents/{document_id}/bookmarks/toggle", response_model=BookmarkToggleResponse)
def toggle_bookmark(document_id: str, request: BookmarkToggleRequest) -> BookmarkToggleResponse:
    """
    Add or remove a bookmark near a position.

    A storage failure still returns 200: the change is kept in memory and
    persisted=False tells the client to show the failure message.
    """
    session = _get_session(document_id)
    result = session.toggle_bookmark(request.position)
    return BookmarkToggleResponse(
        action=result.action,
        bookmark=_bookmark_response(result.bookmark),
        persisted=result.persisted,
        message=result.message
    )


@app.get("/preferences", response_model=ViewerPreferences)
async def get_preferences() -> ViewerPreferences:
    return preferences_store.preferences


@app.put("/preferences", response_model=ViewerPreferences)
def update_preferences(update: PreferencesUpdate) -> ViewerPreferences:
    try:
        return preferences_store.update(**update.model_dump(exclude_none=True))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/history", response_model=List[HistoryEntryResponse])
async def get_history() -> List[HistoryEntryResponse]:
    return [
        HistoryEntryResponse(
            document_id=entry.document_id,
            document_name=entry.document_name,
            viewed_at=entry.viewed_at.isoformat(),
            reading_progress=entry.reading_progress,
            scroll_position=entry.scroll_position
        )
        for entry in viewing_history.entries
    ]


def _get_session(document_id: str) -> DocumentViewerSession:
    session = sessions.get(document_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No open viewer session for document {document_id}")
    return session


def _session_response(session: DocumentViewerSession) -> DocumentSessionResponse:
    stats: Optional[DocumentStatsResponse] = None
    if session.stats is not None:
        stats = DocumentStatsResponse(
            words=session.stats.words,
            characters=session.stats.characters,
            characters_no_spaces=session.stats.characters_no_spaces,
            lines=session.stats.lines,
            paragraphs=session.stats.paragraphs,
            estimated_read_time=session.stats.estimated_read_time,
            estimated_read_time_label=format_reading_time(session.stats.estimated_read_time)
        )

    return DocumentSessionResponse(
        document_id=session.document_id,
        name=session.document.name,
        state=session.state,
        view_mode=session.view_mode,
        url=session.url,
        error=session.error,
        retryable=session.retryable,
        file_info=FileTypeInfoResponse(
            category=session.file_info.category,
            label=session.file_info.label,
            icon=session.file_info.icon,
            capabilities=session.file_info.capabilities
        ),
        stats=stats,
        reading_progress=session.progress.progress,
        bookmarks=[_bookmark_response(b) for b in session.bookmarks.bookmarks],
        preferences=session.preferences.preferences
    )


def _match_response(match: SearchMatch) -> SearchMatchResponse:
    return SearchMatchResponse(index=match.index, text=match.text, context=match.context, line=match.line)


def _search_response(session: DocumentViewerSession) -> SearchResponse:
    return SearchResponse(
        query=session.query,
        matches=[_match_response(m) for m in session.matches],
        current_index=session.navigator.current_index,
        total=session.navigator.count
    )


def _navigation_response(session: DocumentViewerSession, scroll_y: Optional[float]) -> NavigationResponse:
    current = session.navigator.current
    return NavigationResponse(
        current_index=session.navigator.current_index,
        total=session.navigator.count,
        match=_match_response(current) if current is not None else None,
        scroll_y=scroll_y
    )


def _bookmark_response(bookmark: Bookmark) -> BookmarkResponse:
    return BookmarkResponse(
        id=bookmark.id,
        position=bookmark.position,
        timestamp=bookmark.timestamp,
        preview=bookmark.preview
    )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Document Viewer API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
