"""
In-Memory Storage - Development and Test Backends

Provides the RecordStore and ObjectStorage contracts without an external
service. Records can optionally be persisted to a JSON file.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from core.storage.base import ObjectStorage, RecordStore, StoreError


logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """
    Dict-of-tables record store.

    Thread-safe. Rows are deep-copied on the way in and out so callers never
    share mutable state with the store.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise store.

        Args:
            persist_path: Optional path to persist data to JSON file
        """
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(self) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "tables": self._tables,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._persist_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise StoreError(f"Could not write {self._persist_path}: {e}") from e

    def _load_from_file(self) -> None:
        """Load data from file."""
        try:
            data = json.loads(self._persist_path.read_text(encoding="utf-8"))
            self._tables = {
                table: list(rows) for table, rows in data.get("tables", {}).items()
            }
        except (json.JSONDecodeError, UnicodeDecodeError, OSError, AttributeError) as e:
            # Start fresh rather than refuse to boot
            logger.warning("Could not load store data from %s: %s", self._persist_path, e)

    # =========================================================================
    # RecordStore
    # =========================================================================

    def list_rows(
        self,
        table: str,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        with self._lock:
            rows = copy.deepcopy(self._tables.get(table, []))
        # Stable sort: on equal timestamps the latest insert comes first
        if descending:
            rows.reverse()
        rows.sort(key=lambda r: str(r.get(order_by, "")), reverse=descending)
        return rows

    def first_row(self, table: str) -> Optional[dict[str, Any]]:
        with self._lock:
            rows = self._tables.get(table, [])
            return copy.deepcopy(rows[0]) if rows else None

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(record)
        row["id"] = str(uuid.uuid4())
        row["created_at"] = datetime.now(timezone.utc).isoformat()

        with self._lock:
            self._tables.setdefault(table, []).append(row)
            self._save_to_file()
            return copy.deepcopy(row)

    def update(
        self,
        table: str,
        record_id: str,
        changes: dict[str, Any],
    ) -> Optional[dict[str, Any]]:
        with self._lock:
            for row in self._tables.get(table, []):
                if str(row.get("id")) == str(record_id):
                    row.update(copy.deepcopy(changes))
                    row["id"] = record_id
                    self._save_to_file()
                    return copy.deepcopy(row)
        return None

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            rows = self._tables.get(table, [])
            for index, row in enumerate(rows):
                if str(row.get("id")) == str(record_id):
                    del rows[index]
                    self._save_to_file()
                    return True
        return False

    def count(self, table: str) -> int:
        """Number of rows in ``table``."""
        with self._lock:
            return len(self._tables.get(table, []))


class InMemoryObjectStorage(ObjectStorage):
    """Bucket kept in a dict; URLs point at a configurable base."""

    def __init__(self, base_url: str = "/media"):
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()
        self._base_url = base_url.rstrip("/")

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        with self._lock:
            if path in self._objects:
                raise StoreError(f"Object already exists: {path}")
            self._objects[path] = (content, content_type)

    def public_url(self, path: str) -> str:
        return f"{self._base_url}/{path}"

    def get(self, path: str) -> Optional[tuple[bytes, str]]:
        """Stored content and content type, or None."""
        with self._lock:
            return self._objects.get(path)
