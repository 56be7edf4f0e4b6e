"""Custom exception hierarchy for the meeting transcription pipeline.

All exceptions inherit from PipelineError, enabling targeted handling
at pipeline boundaries while preserving specific failure context. Each
class carries a stable ``code`` that is reported to callers, and a
``user_message`` that is safe to show to an end user.
"""


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    code = "PipelineError"
    user_message = "The recording could not be processed."

    def __init__(self, message: str, meeting_id: str | None = None) -> None:
        self.meeting_id = meeting_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.meeting_id:
            return f"[meeting={self.meeting_id}] {super().__str__()}"
        return super().__str__()


class ConfigError(PipelineError):
    """Raised when configuration values cannot be parsed."""

    code = "ConfigError"


class ValidationError(PipelineError):
    """Raised when an upload is rejected before any network call."""

    code = "ValidationError"

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return str(self.args[0]) if self.args else self.code


class EmptyInputError(ValidationError):
    """The upload buffer is absent or zero length."""

    code = "EmptyInput"


class TooLargeError(ValidationError):
    """The upload exceeds the hard size ceiling."""

    code = "TooLarge"


class UnsupportedTypeError(ValidationError):
    """The declared content type is not on the audio allow-list."""

    code = "UnsupportedType"


class UpstreamError(PipelineError):
    """Raised when an upstream AI service call fails."""

    code = "UpstreamError"

    def __init__(
        self,
        message: str,
        meeting_id: str | None = None,
        provider: str | None = None,
    ) -> None:
        self.provider = provider
        super().__init__(message, meeting_id)


class RetryableStatusError(UpstreamError):
    """Upstream answered 429 or 5xx. Retried, never surfaced to callers."""

    code = "RetryableStatus"

    def __init__(
        self,
        message: str,
        status_code: int,
        meeting_id: str | None = None,
        provider: str | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, meeting_id, provider)


class UpstreamRejectedError(UpstreamError):
    """Upstream answered with a non-retryable 4xx status."""

    code = "UpstreamRejected"

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str = "unknown",
        error_message: str = "",
        meeting_id: str | None = None,
        provider: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.error_message = error_message
        super().__init__(message, meeting_id, provider)

    @property
    def user_message(self) -> str:  # type: ignore[override]
        detail = self.error_message or f"HTTP {self.status_code}"
        return f"Transcription service rejected the request ({self.error_type}): {detail}"


class UpstreamUnreachableError(UpstreamError):
    """Retries against the upstream were exhausted."""

    code = "UpstreamUnreachable"
    user_message = (
        "The transcription service is temporarily unavailable. Please try again later."
    )

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        meeting_id: str | None = None,
        provider: str | None = None,
    ) -> None:
        self.attempts = attempts
        super().__init__(message, meeting_id, provider)


class SummaryError(PipelineError):
    """Raised inside the chat client; always degraded to an empty outcome."""

    code = "SummaryError"


class StorageError(PipelineError):
    """Raised when the persistence sink fails."""

    code = "StorageError"
    user_message = "The transcription could not be saved."

    def __init__(
        self,
        message: str,
        meeting_id: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.operation = operation
        super().__init__(message, meeting_id)


class PipelineTimeoutError(PipelineError):
    """The caller-supplied deadline expired before the pipeline finished."""

    code = "Timeout"
    user_message = "Processing took too long and was cancelled."
