"""
Storage Interfaces - Managed Database and Object Storage Contracts

Persistence is delegated to an external service. Routes only depend on the
conventional create/read/update/delete surface defined here; any backend
failure is raised as StoreError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class StoreError(Exception):
    """A storage backend call failed. The message is for logs only."""


class RecordStore(ABC):
    """Table-oriented record storage. The store assigns ``id`` and ``created_at``."""

    @abstractmethod
    def list_rows(
        self,
        table: str,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        """Return every row of ``table`` in the requested order."""

    @abstractmethod
    def first_row(self, table: str) -> Optional[dict[str, Any]]:
        """Return one row of ``table`` or None when it is empty."""

    @abstractmethod
    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert one row atomically and return it as stored."""

    @abstractmethod
    def update(
        self,
        table: str,
        record_id: str,
        changes: dict[str, Any],
    ) -> Optional[dict[str, Any]]:
        """Apply ``changes`` to the row with ``record_id``; None if not found."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> bool:
        """Delete the row with ``record_id``; False if not found."""


class ObjectStorage(ABC):
    """Bucket storage for uploaded images."""

    @abstractmethod
    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Store ``content`` at ``path``. Existing objects are not overwritten."""

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Public URL of the object at ``path``."""
