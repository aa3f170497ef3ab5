"""
Supabase Storage - PostgREST Tables and Storage Buckets over HTTP

Talks to a Supabase project through its REST endpoints:
- /rest/v1/<table>               row CRUD (PostgREST)
- /storage/v1/object/<bucket>/.. object upload
- /storage/v1/object/public/..   public object URLs

Every transport or HTTP error surfaces as StoreError; response bodies are
kept in the exception for logging and never returned to clients.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from core.storage.base import ObjectStorage, RecordStore, StoreError


logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30
USER_AGENT = "ManzilLeadDesk/1.0"


class SupabaseClient:
    """Shared session and auth headers for the REST and storage APIs."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not base_url or not api_key:
            raise StoreError("Supabase URL and key must both be configured")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "User-Agent": USER_AGENT,
        })

    def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Send a request and raise StoreError on any failure.

        Raises:
            StoreError: On network errors or non-2xx responses
        """
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise StoreError(
                f"{method} {path} returned {response.status_code}: {response.text[:500]}"
            )
        return response


class SupabaseRecordStore(RecordStore):
    """RecordStore backed by PostgREST tables."""

    def __init__(self, client: SupabaseClient):
        self._client = client

    @staticmethod
    def _rows(response: requests.Response) -> list[dict[str, Any]]:
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from store: {e}") from e
        if isinstance(data, dict):
            return [data]
        return list(data)

    def list_rows(
        self,
        table: str,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        direction = "desc" if descending else "asc"
        response = self._client.request(
            "GET",
            f"/rest/v1/{table}",
            params={"select": "*", "order": f"{order_by}.{direction}"},
        )
        return self._rows(response)

    def first_row(self, table: str) -> Optional[dict[str, Any]]:
        response = self._client.request(
            "GET",
            f"/rest/v1/{table}",
            params={"select": "*", "limit": "1"},
        )
        rows = self._rows(response)
        return rows[0] if rows else None

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        response = self._client.request(
            "POST",
            f"/rest/v1/{table}",
            json=[record],
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response)
        if not rows:
            raise StoreError(f"Insert into {table} returned no row")
        return rows[0]

    def update(
        self,
        table: str,
        record_id: str,
        changes: dict[str, Any],
    ) -> Optional[dict[str, Any]]:
        response = self._client.request(
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{record_id}"},
            json=changes,
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response)
        return rows[0] if rows else None

    def delete(self, table: str, record_id: str) -> bool:
        response = self._client.request(
            "DELETE",
            f"/rest/v1/{table}",
            params={"id": f"eq.{record_id}"},
            headers={"Prefer": "return=representation"},
        )
        return bool(self._rows(response))


class SupabaseObjectStorage(ObjectStorage):
    """ObjectStorage backed by a Supabase storage bucket."""

    def __init__(self, client: SupabaseClient, bucket: str):
        self._client = client
        self.bucket = bucket

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        self._client.request(
            "POST",
            f"/storage/v1/object/{self.bucket}/{path}",
            data=content,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )
        logger.info("Uploaded %s (%d bytes) to bucket %s", path, len(content), self.bucket)

    def public_url(self, path: str) -> str:
        return f"{self._client.base_url}/storage/v1/object/public/{self.bucket}/{path}"
