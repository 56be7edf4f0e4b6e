"""Recording store backed by an internal worker API.

The worker owns database access; this service reaches it over HTTP with a
shared secret. Inserts are ordinary transactional writes on the worker
side, one row per call.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from meeting_transcriber.models import PersistedRecording, RecordingView
from meeting_transcriber.storage.interface import RecordingStore
from meeting_transcriber.utils.errors import StorageError

logger = logging.getLogger(__name__)

RECORDINGS_PATH = "/internal/meeting-recordings"


class WorkerRecordingStore(RecordingStore):
    """Client for recording storage via the worker internal API.

    Args:
        worker_url: Base URL of the worker.
        internal_secret: Value sent in the X-Internal-Secret header.
        timeout: Request timeout in seconds.
        client: Optional pre-built AsyncClient.
    """

    def __init__(
        self,
        worker_url: str,
        internal_secret: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.worker_url = (worker_url or "").rstrip("/")
        self.internal_secret = internal_secret or ""

        if not self.worker_url:
            raise StorageError("RECORDINGS_WORKER_URL is required", operation="init")
        if not self.internal_secret:
            raise StorageError("RECORDINGS_WORKER_SECRET is required", operation="init")

        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        """Build authentication headers for internal worker endpoints."""
        return {
            "X-Internal-Secret": self.internal_secret,
            "Content-Type": "application/json",
        }

    async def close(self) -> None:
        """Close the shared HTTP client and release connection pool."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = f"{self.worker_url}{path}"
        try:
            response = await self._client.request(
                method, url, headers=self._headers(), json=json, params=params
            )
            if response.status_code == 404 and method == "GET":
                return response
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Recording {operation} failed: HTTP {exc.response.status_code}",
                operation=operation,
            ) from exc
        except httpx.RequestError as exc:
            raise StorageError(
                f"Recording {operation} failed: {exc}",
                operation=operation,
            ) from exc
        return response

    async def insert(self, recording: PersistedRecording) -> int:
        """Insert a recording row via the worker.

        Returns:
            The id assigned by the worker.

        Raises:
            StorageError: If the worker call fails or returns no id.
        """
        payload = recording.to_row()
        payload.pop("id", None)
        response = await self._request(
            "POST", RECORDINGS_PATH, operation="insert", json=payload
        )
        try:
            return int(response.json()["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(
                "Recording insert response did not contain an id",
                operation="insert",
            ) from exc

    async def list_for_user(self, user_id: str) -> list[RecordingView]:
        response = await self._request(
            "GET", RECORDINGS_PATH, operation="list", params={"user_id": user_id}
        )
        if response.status_code == 404:
            return []
        try:
            rows = response.json().get("recordings", [])
            return [RecordingView.from_row(row) for row in rows]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise StorageError(
                "Recording list response was not a recordings object",
                operation="list",
            ) from exc

    async def get_for_booking(self, booking_id: int, user_id: str) -> RecordingView | None:
        response = await self._request(
            "GET",
            f"{RECORDINGS_PATH}/booking/{booking_id}",
            operation="get",
            params={"user_id": user_id},
        )
        if response.status_code == 404:
            return None
        try:
            return RecordingView.from_row(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise StorageError(
                "Recording lookup response was not a recording object",
                operation="get",
            ) from exc
