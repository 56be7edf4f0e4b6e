"""OpenAI speech-to-text client implementation.

Submits the whole audio file as one multipart upload to the
``/audio/transcriptions`` endpoint and retries transient failures:
429 and 5xx responses back off exponentially, transport failures back
off linearly, and both share one attempt budget.
"""

import json
import logging

import httpx

from meeting_transcriber.asr.interface import TranscriptionEngine
from meeting_transcriber.models import TranscriptionOutcome
from meeting_transcriber.utils.errors import (
    RetryableStatusError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)
from meeting_transcriber.utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini-transcribe"
TRANSCRIPT_FIELDS = ("text", "transcription")

STATUS_BASE_DELAY_SECONDS = 0.5
TRANSPORT_DELAY_STEP_SECONDS = 0.2


def transcription_backoff(attempt: int, exc: Exception) -> float:
    """Delay before the retry following zero-based ``attempt``.

    Retryable statuses wait 0.5s * 2^attempt (0.5, 1, 2, 4 ...).
    Transport failures wait 0.2s * (attempt + 1) (0.2, 0.4, 0.6 ...).
    """
    if isinstance(exc, httpx.TransportError):
        return TRANSPORT_DELAY_STEP_SECONDS * (attempt + 1)
    return STATUS_BASE_DELAY_SECONDS * (2**attempt)


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def parse_error_body(response: httpx.Response) -> tuple[str, str]:
    """Extract ``error.type`` and ``error.message`` from an error response.

    Returns:
        (error_type, error_message); falls back to ("unknown", "") when
        the body is not the expected JSON shape.
    """
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "unknown", ""
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return "unknown", ""
    error_type = error.get("type") or "unknown"
    error_message = error.get("message") or ""
    return str(error_type), str(error_message)


def extract_transcript_text(body: object) -> str:
    """Read the transcript from ``text``, falling back to ``transcription``.

    A missing field yields an empty transcript rather than an error.
    """
    if not isinstance(body, dict):
        return ""
    for key in TRANSCRIPT_FIELDS:
        value = body.get(key)
        if isinstance(value, str):
            return value
    return ""


class OpenAITranscriptionEngine(TranscriptionEngine):
    """OpenAI transcription endpoint client with bounded retries.

    Args:
        api_key: OpenAI API key for authentication.
        base_url: API root including the version segment.
        model: Transcription model identifier.
        content_type: Content type declared on the uploaded file part.
        max_retries: Retries after the first attempt (default 3).
        timeout: Per-request timeout in seconds.
        client: Optional shared AsyncClient (a new one is opened per call
            when omitted).
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        content_type: str = "audio/mpeg",
        max_retries: int = 3,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._content_type = content_type
        self._max_retries = max_retries
        self._timeout = timeout
        self._client = client

    async def transcribe(self, audio: bytes, file_name: str) -> TranscriptionOutcome:
        """Transcribe audio via the OpenAI transcription endpoint.

        Args:
            audio: The complete audio file contents. Each attempt builds
                its upload from this buffer, so retries never reuse a
                consumed stream.
            file_name: Declared file name of the upload.

        Returns:
            TranscriptionOutcome with the transcript text and retry count.

        Raises:
            UpstreamRejectedError: On a non-retryable error status.
            UpstreamUnreachableError: When all attempts are exhausted.
        """
        logger.info(
            "Sending %s (%d bytes) to OpenAI transcription model %s",
            file_name,
            len(audio),
            self._model,
        )
        if self._client is not None:
            return await self._transcribe(self._client, audio, file_name)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._transcribe(client, audio, file_name)

    async def _transcribe(
        self, client: httpx.AsyncClient, audio: bytes, file_name: str
    ) -> TranscriptionOutcome:
        attempts = 0

        @retry_with_backoff(
            max_retries=self._max_retries,
            retryable_exceptions=(RetryableStatusError, httpx.TransportError),
            backoff=transcription_backoff,
        )
        async def submit() -> dict:
            nonlocal attempts
            attempts += 1
            return await self._submit(client, audio, file_name)

        try:
            body = await submit()
        except RetryableStatusError as exc:
            raise UpstreamUnreachableError(
                f"Transcription failed after {attempts} attempts: "
                f"last status {exc.status_code}",
                attempts=attempts,
                provider=self.provider_name,
            ) from exc
        except httpx.TransportError as exc:
            raise UpstreamUnreachableError(
                f"Transcription failed after {attempts} attempts: {exc!r}",
                attempts=attempts,
                provider=self.provider_name,
            ) from exc

        text = extract_transcript_text(body)
        if not text:
            logger.warning("Transcription response for %s had no text", file_name)
        return TranscriptionOutcome(
            text=text,
            provider=self.provider_name,
            retry_count=attempts - 1,
        )

    async def _submit(
        self, client: httpx.AsyncClient, audio: bytes, file_name: str
    ) -> dict:
        """Make one upload attempt.

        Raises:
            RetryableStatusError: On 429 or 5xx.
            UpstreamRejectedError: On any other non-success status.
            httpx.TransportError: On connection failures and timeouts.
        """
        url = f"{self._base_url}/audio/transcriptions"
        headers = {"Authorization": f"Bearer {self._api_key}"}
        files = {"file": (file_name, audio, self._content_type)}
        data = {"model": self._model}

        response = await client.post(url, headers=headers, files=files, data=data)

        if response.is_success:
            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError):
                logger.warning("Transcription response was not valid JSON")
                return {}

        if is_retryable_status(response.status_code):
            raise RetryableStatusError(
                f"Transcription endpoint returned {response.status_code}",
                status_code=response.status_code,
                provider=self.provider_name,
            )

        error_type, error_message = parse_error_body(response)
        logger.error(
            "OpenAI transcription returned error %d: %s",
            response.status_code,
            response.text,
        )
        raise UpstreamRejectedError(
            f"OpenAI transcription error ({error_type}): "
            f"{error_message or response.status_code}",
            status_code=response.status_code,
            error_type=error_type,
            error_message=error_message,
            provider=self.provider_name,
        )
