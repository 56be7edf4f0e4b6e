"""Abstract recording store interface.

The pipeline depends only on insert() succeeding or raising StorageError.
The read methods serve recording history lookups.
"""

from abc import ABC, abstractmethod

from meeting_transcriber.models import PersistedRecording, RecordingView


class RecordingStore(ABC):
    """Abstract base class for persistence sinks."""

    @abstractmethod
    async def insert(self, recording: PersistedRecording) -> int:
        """Write a new recording and return its surrogate id.

        Raises:
            StorageError: If the write fails.
        """

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[RecordingView]:
        """Return a user's recordings, newest first."""

    @abstractmethod
    async def get_for_booking(self, booking_id: int, user_id: str) -> RecordingView | None:
        """Return the user's recording for a booking, or None."""

    async def close(self) -> None:
        """Release any held resources."""
