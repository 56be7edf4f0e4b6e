"""Maps a completed pipeline run onto a stored recording and writes it once."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

from meeting_transcriber.models import (
    ACTION_ITEM_DELIMITER,
    ExtractionOutcome,
    PersistedRecording,
    UploadedAudio,
    join_action_items,
)
from meeting_transcriber.storage.interface import RecordingStore
from meeting_transcriber.utils.errors import StorageError

logger = logging.getLogger(__name__)

BOOKING_ID_PATTERN = re.compile(r"\s*([+-]?[0-9]+)\s*")
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def parse_booking_id(meeting_id: str | None) -> int | None:
    """Return the meeting id as a signed 32-bit integer, or None.

    Only optional surrounding whitespace, an optional sign and ASCII digits
    are accepted; digit separators and out-of-range values are rejected.
    """
    if meeting_id is None:
        return None
    match = BOOKING_ID_PATTERN.fullmatch(meeting_id)
    if match is None:
        return None
    value = int(match.group(1))
    if not INT32_MIN <= value <= INT32_MAX:
        return None
    return value


def build_recording(
    booking_id: int,
    user_id: str,
    user_name: str,
    audio: UploadedAudio,
    transcript: str,
    extraction: ExtractionOutcome,
    now: datetime | None = None,
) -> PersistedRecording:
    """Build the record for one completed run.

    Action items are joined with ACTION_ITEM_DELIMITER. An item that
    contains the delimiter is stored as-is and will split on read.
    """
    for item in extraction.action_items:
        if ACTION_ITEM_DELIMITER in item:
            logger.warning(
                "Action item contains the '%s' delimiter and will not round-trip: %r",
                ACTION_ITEM_DELIMITER,
                item,
            )
    timestamp = now or datetime.now(UTC)
    return PersistedRecording(
        booking_id=booking_id,
        user_id=user_id,
        user_name=user_name,
        file_name=audio.file_name,
        file_size_bytes=audio.size_bytes,
        duration_seconds=0,
        transcript=transcript,
        summary=extraction.summary,
        action_items_text=join_action_items(extraction.action_items),
        created_at=timestamp,
        updated_at=timestamp,
    )


class ResultPersister:
    """Writes one recording per completed run to a RecordingStore."""

    def __init__(self, store: RecordingStore) -> None:
        self._store = store

    async def persist(
        self,
        booking_id: int,
        user_id: str,
        user_name: str,
        audio: UploadedAudio,
        transcript: str,
        extraction: ExtractionOutcome,
    ) -> int:
        """Build and insert the recording.

        Returns:
            The stored recording id.

        Raises:
            StorageError: If the store write fails (logged before re-raising).
        """
        recording = build_recording(
            booking_id, user_id, user_name, audio, transcript, extraction
        )
        try:
            recording_id = await self._store.insert(recording)
        except StorageError:
            logger.error(
                "Failed to save transcription for booking %d",
                booking_id,
                exc_info=True,
                extra={"meeting_id": str(booking_id), "stage": "persisting"},
            )
            raise
        except Exception as exc:
            logger.error(
                "Failed to save transcription for booking %d",
                booking_id,
                exc_info=True,
                extra={"meeting_id": str(booking_id), "stage": "persisting"},
            )
            raise StorageError(
                f"Recording insert failed: {exc}",
                meeting_id=str(booking_id),
                operation="insert",
            ) from exc

        logger.info(
            "Transcription saved for booking %d by user %s",
            booking_id,
            user_id,
            extra={"meeting_id": str(booking_id), "stage": "persisting"},
        )
        return recording_id
