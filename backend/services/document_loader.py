"""Content source that resolves viewer documents to decoded text."""
import logging
import os
from pathlib import Path
from typing import Optional
import fitz  # PyMuPDF

from models.document import ViewerDocument, LoadedContent
from services.document_inspector import detect_file_type, is_text_readable
from config import DOCS_DIRECTORY

logger = logging.getLogger(__name__)


class ContentUnavailableError(Exception):
    """Raised when a document's content cannot be produced."""

    def __init__(self, document_id: str, message: str):
        self.document_id = document_id
        super().__init__(message)


class DocumentLoader:
    """Loads document content from the local file system."""

    def __init__(self, docs_directory: str = DOCS_DIRECTORY):
        """
        Initialize DocumentLoader.

        Args:
            docs_directory: Directory used to resolve relative document paths
        """
        self.docs_directory = docs_directory

    def load(self, document: ViewerDocument) -> LoadedContent:
        """
        Resolve a document to text, or to a download link when it has no text form.

        There is no timeout: a stalled file system blocks the caller.

        Args:
            document: Document to load

        Returns:
            LoadedContent with view mode "text" and the decoded content, or
            view mode "download" and a file URL

        Raises:
            ContentUnavailableError: If the file is missing or cannot be decoded
        """
        path = self._resolve_path(document)
        category = detect_file_type(document.file_type, document.name)

        if is_text_readable(document.file_type, document.name, category):
            content = self._read_text(document, path)
            logger.info(f"Loaded {document.name}: {len(content)} chars as text")
            return LoadedContent(view_mode="text", content=content)

        if category == "pdf":
            content = self._read_pdf(document, path)
            logger.info(f"Loaded {document.name}: {len(content)} chars extracted from PDF")
            return LoadedContent(view_mode="text", content=content)

        logger.info(f"{document.name} ({category}) has no text view, offering download")
        return LoadedContent(view_mode="download", url=path.resolve().as_uri())

    def _resolve_path(self, document: ViewerDocument) -> Path:
        if not document.local_path:
            raise ContentUnavailableError(document.document_id, "Document file path not found")

        root = Path(self.docs_directory).resolve()
        path = Path(document.local_path)
        if not path.is_absolute():
            path = root / path
        path = path.resolve()

        # Only files under the documents directory are served
        try:
            path.relative_to(root)
        except ValueError:
            logger.warning(f"Rejected path outside {root} for document {document.document_id}")
            raise ContentUnavailableError(
                document.document_id, "Document path is outside the documents directory"
            )

        if not path.exists():
            raise ContentUnavailableError(
                document.document_id, "Document file no longer exists on device"
            )
        return path

    def _read_text(self, document: ViewerDocument, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Failed to decode {document.name} as UTF-8: {e}")
            raise ContentUnavailableError(
                document.document_id, f"Could not decode document: {document.name}"
            ) from e
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise ContentUnavailableError(
                document.document_id, f"Could not read document: {document.name}"
            ) from e

    def _read_pdf(self, document: ViewerDocument, path: Path) -> str:
        """
        Extract text page-by-page from a PDF.

        Pages are joined with a blank line so paragraph counts and
        bookmark offsets stay stable across reloads.
        """
        try:
            pdf_document = fitz.open(str(path))
            try:
                pages = [pdf_document[page_num].get_text() for page_num in range(len(pdf_document))]
            finally:
                pdf_document.close()
        except Exception as e:
            logger.error(f"Failed to load PDF {document.name}: {str(e)}")
            raise ContentUnavailableError(
                document.document_id, f"Could not open PDF: {document.name}"
            ) from e

        return "\n\n".join(page.strip() for page in pages)


def find_document_file(docs_directory: str, document_id: str) -> Optional[str]:
    """Locate a file named after a document id inside the documents directory."""
    if not os.path.isdir(docs_directory):
        return None
    for filename in sorted(os.listdir(docs_directory)):
        if os.path.splitext(filename)[0] == document_id:
            return os.path.abspath(os.path.join(docs_directory, filename))
    return None
