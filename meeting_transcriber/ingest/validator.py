"""Upload validation: emptiness, content-type allow-list and size ceiling.

The allow-list is a security boundary. Unknown content types are rejected
outright and the bytes are never sniffed.
"""

from __future__ import annotations

from dataclasses import dataclass

from meeting_transcriber.models import UploadedAudio
from meeting_transcriber.utils.errors import (
    EmptyInputError,
    TooLargeError,
    UnsupportedTypeError,
    ValidationError,
)

MAX_UPLOAD_BYTES = 25 * 1024 * 1024

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "audio/webm",
        "audio/wav",
        "audio/mp3",
        "audio/mpeg",
    }
)


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail decision for an upload."""

    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str | None:
        return self.error.code if self.error is not None else None


def validate_upload(audio: UploadedAudio) -> ValidationResult:
    """Decide whether an upload may enter the pipeline.

    Checks run in order: empty buffer, content type, size. The size used
    is the larger of the declared size and the actual buffer length.

    Args:
        audio: The uploaded file.

    Returns:
        ValidationResult with ``error`` set on rejection.
    """
    if not audio.data:
        return ValidationResult(EmptyInputError("No audio file was uploaded."))

    content_type = (audio.content_type or "").strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        return ValidationResult(
            UnsupportedTypeError(
                f"Unsupported content type '{audio.content_type}'. "
                "Only .wav, .mp3 and .webm audio files are allowed."
            )
        )

    size = max(audio.size_bytes, len(audio.data))
    if size > MAX_UPLOAD_BYTES:
        return ValidationResult(
            TooLargeError(
                f"File is too large. Maximum size is "
                f"{MAX_UPLOAD_BYTES // (1024 * 1024)} MB."
            )
        )

    return ValidationResult()
