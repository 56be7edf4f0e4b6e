"""In-process recording store.

Used when no recordings worker is configured and in tests. Inserts are
serialized by a lock so ids stay unique under concurrent pipelines.
"""

from __future__ import annotations

import asyncio
import dataclasses

from meeting_transcriber.models import PersistedRecording, RecordingView
from meeting_transcriber.storage.interface import RecordingStore


class InMemoryRecordingStore(RecordingStore):
    """Keeps recordings in a list for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: list[PersistedRecording] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    @property
    def records(self) -> list[PersistedRecording]:
        return list(self._records)

    async def insert(self, recording: PersistedRecording) -> int:
        async with self._lock:
            stored = dataclasses.replace(recording, id=self._next_id)
            self._next_id += 1
            self._records.append(stored)
            return stored.id  # type: ignore[return-value]

    async def list_for_user(self, user_id: str) -> list[RecordingView]:
        matching = [r for r in self._records if r.user_id == user_id]
        matching.sort(key=lambda r: (r.created_at, r.id or 0), reverse=True)
        return [RecordingView.from_recording(r) for r in matching]

    async def get_for_booking(self, booking_id: int, user_id: str) -> RecordingView | None:
        for record in self._records:
            if record.booking_id == booking_id and record.user_id == user_id:
                return RecordingView.from_recording(record)
        return None
