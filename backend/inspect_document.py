"""
Document inspection script for the Document Viewer.

This script:
1. Loads a document the same way a viewer session does
2. Prints its file type, capabilities and reading statistics
3. Optionally searches it and prints every match with context
4. Optionally lists the bookmarks stored for it

Usage:
    python inspect_document.py path/to/plan.pdf --search "tempo run"
    python inspect_document.py notes.txt --id plan-42 --bookmarks
"""
import sys
import argparse
import logging
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from models.document import ViewerDocument
from services.document_inspector import format_file_size
from services.document_loader import DocumentLoader
from services.key_value_store import create_key_value_store
from services.reading_progress import format_reading_time
from services.viewer_session import DocumentViewerSession, STATE_ERROR
from config import STORAGE_BACKEND

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_summary(session: DocumentViewerSession) -> None:
    """Print file type and statistics for a loaded session."""
    print(f"Document:   {session.document.name}")
    print(f"Type:       {session.file_info.label} ({session.file_type})")
    print(f"Size:       {format_file_size(session.document.size)}")
    print(f"Can:        {', '.join(session.file_info.capabilities)}")
    print(f"View mode:  {session.view_mode}")

    if session.stats is None:
        return

    stats = session.stats
    print(f"Words:      {stats.words}")
    print(f"Characters: {stats.characters} ({stats.characters_no_spaces} without spaces)")
    print(f"Lines:      {stats.lines}")
    print(f"Paragraphs: {stats.paragraphs}")
    print(f"Read time:  {format_reading_time(stats.estimated_read_time)}")


def print_matches(session: DocumentViewerSession, query: str) -> None:
    matches = session.search(query)
    print(f"\n{len(matches)} match(es) for '{query}':")
    for i, match in enumerate(matches, 1):
        context = match.context.replace("\n", " ")
        print(f"  {i:>3}. line {match.line}, offset {match.index}: ...{context}...")


def print_bookmarks(session: DocumentViewerSession) -> None:
    bookmarks = session.bookmarks.bookmarks
    print(f"\n{len(bookmarks)} bookmark(s):")
    for bookmark in bookmarks:
        preview = bookmark.preview[:50].replace("\n", " ")
        print(f"  - {bookmark.position:>7}  {bookmark.timestamp}  {preview}...")


def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect a document as the viewer sees it")
    parser.add_argument("path", help="Path to the document file")
    parser.add_argument("--id", dest="document_id", help="Document id (defaults to the file stem)")
    parser.add_argument("--type", dest="file_type", default="", help="MIME type or extension override")
    parser.add_argument("--search", help="Search the document for this text")
    parser.add_argument("--bookmarks", action="store_true", help="List stored bookmarks")
    parser.add_argument("--storage", default=STORAGE_BACKEND, choices=["supabase", "memory"])
    args = parser.parse_args()

    path = Path(args.path)
    document = ViewerDocument(
        document_id=args.document_id or path.stem,
        name=path.name,
        file_type=args.file_type,
        local_path=str(path.resolve()),
        size=path.stat().st_size if path.exists() else 0
    )

    try:
        store = create_key_value_store(args.storage)
    except ValueError as e:
        logger.error(f"Could not initialize storage: {e}")
        return 1

    loader = DocumentLoader(str(path.resolve().parent))
    session = DocumentViewerSession(document=document, loader=loader, store=store)
    session.open()

    if session.state == STATE_ERROR:
        logger.error(f"Could not load {document.name}: {session.error}")
        return 1

    print_summary(session)

    if args.search:
        print_matches(session, args.search)

    if args.bookmarks:
        print_bookmarks(session)

    return 0


if __name__ == "__main__":
    sys.exit(main())
