"""Key-value persistence for viewer state (bookmarks, history, preferences)."""
import logging
import time
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from supabase import create_client, Client

from config import (
    SUPABASE_URL,
    SUPABASE_KEY,
    STATE_TABLE,
    PERSIST_MAX_RETRIES,
    PERSIST_RETRY_DELAY,
)

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the key-value backend cannot be read or written."""


class KeyValueStore(ABC):
    """Get/set interface over JSON-serializable blobs keyed by string."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]: ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None: ...


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for development and tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = deepcopy(value)

    def keys(self):
        return list(self._data.keys())


class SupabaseKeyValueStore(KeyValueStore):
    """Store viewer state as jsonb rows in a Supabase table."""

    def __init__(
        self,
        supabase_url: str = SUPABASE_URL,
        supabase_key: str = SUPABASE_KEY,
        table_name: str = STATE_TABLE
    ):
        """
        Initialize the key-value store with a Supabase client.

        Expects a table shaped as:
            CREATE TABLE viewer_state (
              key text PRIMARY KEY,
              value jsonb NOT NULL,
              updated_at timestamptz NOT NULL DEFAULT now()
            );

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase API key
            table_name: Name of the state table

        Raises:
            ValueError: If Supabase credentials are missing
        """
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables are required")

        self.table_name = table_name
        self.client: Client = create_client(supabase_url, supabase_key)

        logger.info(f"Initialized SupabaseKeyValueStore with table: {table_name}")

    def get(self, key: str) -> Optional[Any]:
        """
        Fetch the value stored under a key.

        Returns:
            The decoded value, or None when the key is absent

        Raises:
            StorageError: If the database operation fails
        """
        try:
            result = self.client.table(self.table_name).select("value").eq("key", key).execute()
        except Exception as e:
            error_msg = f"Failed to read '{key}' from {self.table_name}: {str(e)}"
            logger.error(error_msg)
            raise StorageError(error_msg) from e

        if not result.data:
            return None
        return result.data[0]["value"]

    def set(self, key: str, value: Any) -> None:
        """
        Upsert the value stored under a key.

        Raises:
            StorageError: If the database operation fails
        """
        try:
            self.client.table(self.table_name).upsert({
                "key": key,
                "value": value,
                "updated_at": datetime.now(timezone.utc).isoformat()
            }).execute()
        except Exception as e:
            error_msg = f"Failed to write '{key}' to {self.table_name}: {str(e)}"
            logger.error(error_msg)
            raise StorageError(error_msg) from e

        logger.debug(f"Stored '{key}' in {self.table_name}")


def persist_with_retry(
    store: KeyValueStore,
    key: str,
    value: Any,
    max_retries: int = PERSIST_MAX_RETRIES,
    initial_delay: float = PERSIST_RETRY_DELAY
) -> None:
    """
    Write a value with a bounded exponential backoff.

    Args:
        store: Target key-value store
        key: Storage key
        value: JSON-serializable value
        max_retries: Total number of attempts
        initial_delay: Delay before the second attempt, doubled after each failure

    Raises:
        StorageError: If every attempt fails
    """
    delay = initial_delay
    last_error: Optional[Exception] = None

    for attempt in range(max(1, max_retries)):
        try:
            store.set(key, value)
            return
        except StorageError as e:
            last_error = e
            logger.warning(
                f"Write of '{key}' failed on attempt {attempt + 1}/{max_retries}: {e}"
            )
            if attempt < max_retries - 1:
                time.sleep(delay)
                delay = min(delay * 2, 5.0)

    raise StorageError(f"Could not persist '{key}' after {max_retries} attempts: {last_error}")


def create_key_value_store(backend: str) -> KeyValueStore:
    """Build the store named by STORAGE_BACKEND."""
    if backend == "memory":
        logger.info("Using in-memory key-value store")
        return InMemoryKeyValueStore()
    if backend == "supabase":
        return SupabaseKeyValueStore()
    raise ValueError(f"Unknown storage backend: {backend}")
