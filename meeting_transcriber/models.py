"""Data models for uploads, stage outcomes, results and stored recordings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

ACTION_ITEM_DELIMITER = ";"


@dataclass(frozen=True)
class UploadedAudio:
    """An uploaded audio file, owned by a single request."""

    data: bytes | None
    file_name: str
    content_type: str
    size_bytes: int

    @classmethod
    def from_bytes(cls, data: bytes, file_name: str, content_type: str) -> UploadedAudio:
        return cls(
            data=data,
            file_name=file_name,
            content_type=content_type,
            size_bytes=len(data),
        )


@dataclass
class TranscriptionOutcome:
    """Raw transcript text produced by the speech-to-text stage."""

    text: str
    provider: str
    retry_count: int = 0
    is_placeholder: bool = False


@dataclass
class ExtractionOutcome:
    """Summary and ordered action items produced by the summarization stage.

    Action items keep insertion order and may contain duplicates.
    """

    summary: str = ""
    action_items: list[str] = field(default_factory=list)
    degraded: bool = False


@dataclass
class PipelineFailure:
    """Details about a fatal pipeline failure."""

    stage: str
    code: str
    message: str


@dataclass
class PipelineResult:
    """The value returned to callers of the pipeline."""

    success: bool
    message: str
    transcript: str = ""
    summary: str = ""
    action_items: list[str] = field(default_factory=list)
    is_placeholder: bool = False
    persisted: bool = False
    recording_id: int | None = None
    persistence_error: str | None = None
    error: PipelineFailure | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON shape consumed by an HTTP layer."""
        body: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.success:
            body.update(
                {
                    "transcription": self.transcript,
                    "summary": self.summary,
                    "actionPoints": list(self.action_items),
                    "isPlaceholder": self.is_placeholder,
                    "persisted": self.persisted,
                    "recordingId": self.recording_id,
                }
            )
            if self.persistence_error:
                body["persistenceError"] = self.persistence_error
        elif self.error is not None:
            body["error"] = {"code": self.error.code, "stage": self.error.stage}
        return body


@dataclass
class PersistedRecording:
    """A durable transcription record linked to a booking.

    action_items_text joins the items with ACTION_ITEM_DELIMITER, so an
    item containing the delimiter does not survive a round trip intact.
    """

    booking_id: int
    user_id: str
    user_name: str
    file_name: str
    file_size_bytes: int
    transcript: str
    summary: str
    action_items_text: str
    created_at: datetime
    updated_at: datetime
    duration_seconds: int = 0
    id: int | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "booking_id": self.booking_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "file_name": self.file_name,
            "file_size_bytes": self.file_size_bytes,
            "duration_seconds": self.duration_seconds,
            "transcription": self.transcript,
            "summary": self.summary,
            "key_points": self.action_items_text,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def join_action_items(items: list[str]) -> str:
    return ACTION_ITEM_DELIMITER.join(items)


def split_action_items(text: str | None) -> list[str]:
    """Split stored action-item text, dropping empty entries."""
    if not text:
        return []
    return [item for item in text.split(ACTION_ITEM_DELIMITER) if item]


@dataclass
class RecordingView:
    """Read model of a stored recording with action items as a list."""

    id: int
    booking_id: int
    user_id: str
    user_name: str
    file_name: str
    file_size_bytes: int
    duration_seconds: int
    transcript: str
    summary: str
    action_items: list[str]
    created_at: str

    @classmethod
    def from_recording(cls, recording: PersistedRecording) -> RecordingView:
        return cls.from_row(recording.to_row())

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> RecordingView:
        return cls(
            id=int(row["id"]),
            booking_id=int(row["booking_id"]),
            user_id=row.get("user_id", ""),
            user_name=row.get("user_name", ""),
            file_name=row.get("file_name", ""),
            file_size_bytes=int(row.get("file_size_bytes", 0)),
            duration_seconds=int(row.get("duration_seconds", 0)),
            transcript=row.get("transcription", ""),
            summary=row.get("summary") or "",
            action_items=split_action_items(row.get("key_points")),
            created_at=row.get("created_at", ""),
        )
