"""Configuration management for the Document Viewer service."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Storage
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "supabase")  # "supabase" or "memory"
STATE_TABLE = os.getenv("STATE_TABLE", "viewer_state")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:19006"
).split(",")

# Documents
DOCS_DIRECTORY = os.getenv("DOCS_DIRECTORY", "documents")
EVENT_LOG_PATH = os.getenv("EVENT_LOG_PATH", "logs/viewer_events.jsonl")

# Search Configuration
SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))
SEARCH_CONTEXT_CHARS = 50  # characters either side of a match

# Bookmark Configuration
BOOKMARK_PROXIMITY_CHARS = 100
BOOKMARK_PREVIEW_CHARS = 100

# History Configuration
HISTORY_LIMIT = 50

# Scroll estimation before the first scroll event reports real metrics
ESTIMATED_CONTENT_HEIGHT = 1000.0  # pixels

# Persistence retry
PERSIST_MAX_RETRIES = int(os.getenv("PERSIST_MAX_RETRIES", "3"))
PERSIST_RETRY_DELAY = float(os.getenv("PERSIST_RETRY_DELAY", "0.2"))  # seconds

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
