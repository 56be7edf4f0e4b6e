"""Upload validation applied before any network call."""

from meeting_transcriber.ingest.validator import (
    ALLOWED_CONTENT_TYPES,
    MAX_UPLOAD_BYTES,
    ValidationResult,
    validate_upload,
)

__all__ = [
    "ALLOWED_CONTENT_TYPES",
    "MAX_UPLOAD_BYTES",
    "ValidationResult",
    "validate_upload",
]
