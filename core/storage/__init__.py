"""
Lead Desk - Storage Backends

Record and object storage behind small interfaces. The backend is chosen
from configuration: ``memory`` for development and tests, ``supabase`` for
the managed service.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from core.storage.base import ObjectStorage, RecordStore, StoreError
from core.storage.memory import InMemoryObjectStorage, InMemoryRecordStore
from core.storage.supabase import (
    SupabaseClient,
    SupabaseObjectStorage,
    SupabaseRecordStore,
)
from core.storage.uploads import UploadError, store_image
from utils.config import Config


# =============================================================================
# Singleton Instances
# =============================================================================

_record_store: Optional[RecordStore] = None
_object_storage: Optional[ObjectStorage] = None


def _supabase_client(config: Config) -> SupabaseClient:
    return SupabaseClient(
        config.supabase_url,
        config.supabase_key,
        timeout=config.request_timeout,
    )


def get_record_store() -> RecordStore:
    """
    Get the record store singleton.

    Returns:
        RecordStore for the configured backend
    """
    global _record_store
    if _record_store is None:
        config = Config.load()
        if config.store_backend == "supabase":
            _record_store = SupabaseRecordStore(_supabase_client(config))
        else:
            persist_path = None
            if config.data_dir:
                persist_path = str(Path(config.data_dir) / "records.json")
            _record_store = InMemoryRecordStore(persist_path)
    return _record_store


def get_object_storage() -> ObjectStorage:
    """Get the object storage singleton."""
    global _object_storage
    if _object_storage is None:
        config = Config.load()
        if config.store_backend == "supabase":
            _object_storage = SupabaseObjectStorage(
                _supabase_client(config), config.storage_bucket
            )
        else:
            _object_storage = InMemoryObjectStorage()
    return _object_storage


def reset_storage() -> None:
    """Reset the singleton instances (for testing)."""
    global _record_store, _object_storage
    _record_store = None
    _object_storage = None


__all__ = [
    "RecordStore",
    "ObjectStorage",
    "StoreError",
    "InMemoryRecordStore",
    "InMemoryObjectStorage",
    "SupabaseClient",
    "SupabaseRecordStore",
    "SupabaseObjectStorage",
    "get_record_store",
    "get_object_storage",
    "reset_storage",
    "UploadError",
    "store_image",
]
