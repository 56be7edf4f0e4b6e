"""Pipeline orchestrator for uploaded meeting recordings.

Sequences: validate -> transcribe -> summarize -> persist. Validation and
transcription failures end the run with a failed result and nothing is
stored. Summarization always degrades to an empty outcome instead of
failing, including when the deadline expires during it; that partial
result is returned but not stored. A persistence failure is reported
on the result but does not turn a completed run into a failed one.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum

from meeting_transcriber.asr.interface import TranscriptionEngine
from meeting_transcriber.asr.registry import get_transcription_engine
from meeting_transcriber.config import TranscriberConfig
from meeting_transcriber.ingest.validator import validate_upload
from meeting_transcriber.models import (
    ExtractionOutcome,
    PipelineFailure,
    PipelineResult,
    TranscriptionOutcome,
    UploadedAudio,
)
from meeting_transcriber.observability.metrics import (
    PipelineMetrics,
    StageTimer,
    log_pipeline_metrics,
)
from meeting_transcriber.storage.interface import RecordingStore
from meeting_transcriber.storage.persister import ResultPersister, parse_booking_id
from meeting_transcriber.storage.registry import get_recording_store
from meeting_transcriber.summary.interface import SummaryEngine
from meeting_transcriber.summary.runner import get_summary_engine, run_summary_extraction
from meeting_transcriber.utils.errors import (
    PipelineError,
    PipelineTimeoutError,
    StorageError,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Transcription completed"
PLACEHOLDER_MESSAGE = (
    "Transcription completed with placeholder content "
    "(no transcription service is configured)"
)
DEFAULT_USER_NAME = "Unknown user"


class PipelineStage(str, Enum):
    """States of one pipeline invocation."""

    VALIDATING = "validating"
    TRANSCRIBING = "transcribing"
    SUMMARIZING = "summarizing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


def build_transcription_engine(config: TranscriberConfig) -> TranscriptionEngine:
    if config.transcription_provider == "stub":
        return get_transcription_engine("stub", delay_seconds=config.stub_delay_seconds)
    return get_transcription_engine(
        config.transcription_provider,
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        model=config.transcription_model,
        content_type=config.transcription_content_type,
        max_retries=config.max_retries,
        timeout=config.http_timeout_seconds,
    )


def build_summary_engine(config: TranscriberConfig) -> SummaryEngine:
    if config.summary_provider == "stub":
        return get_summary_engine("stub")
    return get_summary_engine(
        config.summary_provider,
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        model=config.chat_model,
        max_tokens=config.chat_max_tokens,
        temperature=config.chat_temperature,
        timeout=config.http_timeout_seconds,
    )


def build_recording_store(config: TranscriberConfig) -> RecordingStore:
    if config.storage_provider == "memory":
        return get_recording_store("memory")
    return get_recording_store(
        config.storage_provider,
        worker_url=config.recordings_worker_url,
        internal_secret=config.recordings_worker_secret,
    )


def _retry_count(error: BaseException) -> int:
    """Retries spent before a failure, as attached by retry_with_backoff."""
    for exc in (error, error.__cause__):
        count = getattr(exc, "_retry_count", None)
        if count is not None:
            return int(count)
    return 0


class PipelineOrchestrator:
    """Runs one upload through the transcription pipeline.

    The orchestrator holds no per-request state, so one instance can
    serve concurrent requests. Only the recording store is shared.

    Args:
        config: Pipeline configuration.
        transcription_engine: Overrides the engine selected by config.
        summary_engine: Overrides the engine selected by config.
        store: Overrides the recording store selected by config.
    """

    def __init__(
        self,
        config: TranscriberConfig,
        transcription_engine: TranscriptionEngine | None = None,
        summary_engine: SummaryEngine | None = None,
        store: RecordingStore | None = None,
    ) -> None:
        self._config = config
        self._transcriber = (
            transcription_engine
            if transcription_engine is not None
            else build_transcription_engine(config)
        )
        self._summarizer = (
            summary_engine if summary_engine is not None else build_summary_engine(config)
        )
        self._store = store if store is not None else build_recording_store(config)
        self._persister = ResultPersister(self._store)

    @property
    def store(self) -> RecordingStore:
        return self._store

    async def close(self) -> None:
        await self._store.close()

    async def process(
        self,
        audio: UploadedAudio,
        meeting_id: str,
        user_id: str,
        user_name: str = "",
        timeout: float | None = None,
    ) -> PipelineResult:
        """Process one uploaded recording.

        Args:
            audio: The uploaded file.
            meeting_id: Booking identifier as received; non-integer values
                skip persistence.
            user_id: Id of the (already authenticated) caller.
            user_name: Display name stored with the recording.
            timeout: Deadline in seconds for transcription and
                summarization. Defaults to config.pipeline_timeout_seconds.

        Returns:
            PipelineResult; success=False with ``error`` set on validation,
            transcription or timeout failure.
        """
        wall_start = time.monotonic()
        timings: dict[str, float] = {}
        log_extra = {"meeting_id": meeting_id}

        stage = PipelineStage.VALIDATING
        with StageTimer(stage.value, timings):
            validation = validate_upload(audio)
        if validation.error is not None:
            logger.info(
                "Upload rejected: %s",
                validation.error,
                extra={**log_extra, "stage": stage.value, "error": validation.reason},
            )
            return self._fail(
                stage, validation.error, audio, meeting_id, user_id, timings, wall_start
            )

        deadline = timeout if timeout is not None else self._config.pipeline_timeout_seconds
        deadline_expired = False
        try:
            async with asyncio.timeout(deadline):
                stage = PipelineStage.TRANSCRIBING
                with StageTimer(stage.value, timings):
                    transcription = await self._transcriber.transcribe(
                        audio.data or b"", audio.file_name
                    )

                stage = PipelineStage.SUMMARIZING
                with StageTimer(stage.value, timings):
                    extraction = await run_summary_extraction(
                        self._summarizer, transcription.text, meeting_id
                    )
        except TimeoutError:
            if stage is not PipelineStage.SUMMARIZING:
                logger.error(
                    "Pipeline deadline of %.1fs expired while %s",
                    deadline,
                    stage.value,
                    extra={**log_extra, "stage": stage.value},
                )
                error: PipelineError = PipelineTimeoutError(
                    f"Deadline expired during {stage.value}", meeting_id=meeting_id
                )
                return self._fail(
                    stage, error, audio, meeting_id, user_id, timings, wall_start
                )
            # Transcript is already obtained, so only the summary is lost
            logger.warning(
                "Pipeline deadline of %.1fs expired while summarizing, continuing without summary",
                deadline,
                extra={**log_extra, "stage": stage.value},
            )
            extraction = ExtractionOutcome(degraded=True)
            deadline_expired = True
        except PipelineError as exc:
            logger.error(
                "Pipeline failed while %s: %s",
                stage.value,
                exc,
                extra={**log_extra, "stage": stage.value, "error": exc.code},
            )
            return self._fail(
                stage, exc, audio, meeting_id, user_id, timings, wall_start
            )
        except Exception as exc:
            logger.error(
                "Unexpected error while %s",
                stage.value,
                exc_info=True,
                extra={**log_extra, "stage": stage.value},
            )
            wrapped = PipelineError(f"Unexpected error: {exc}", meeting_id=meeting_id)
            return self._fail(
                stage, wrapped, audio, meeting_id, user_id, timings, wall_start
            )

        result = PipelineResult(
            success=True,
            message=PLACEHOLDER_MESSAGE if transcription.is_placeholder else SUCCESS_MESSAGE,
            transcript=transcription.text,
            summary=extraction.summary,
            action_items=list(extraction.action_items),
            is_placeholder=transcription.is_placeholder,
        )

        stage = PipelineStage.PERSISTING
        booking_id = parse_booking_id(meeting_id)
        if deadline_expired:
            logger.info(
                "Deadline expired, skipping persistence of the partial result",
                extra={**log_extra, "stage": stage.value},
            )
        elif booking_id is None:
            logger.info(
                "Meeting id %r is not numeric, skipping persistence",
                meeting_id,
                extra={**log_extra, "stage": stage.value},
            )
        else:
            with StageTimer(stage.value, timings):
                try:
                    result.recording_id = await self._persister.persist(
                        booking_id=booking_id,
                        user_id=user_id,
                        user_name=user_name or DEFAULT_USER_NAME,
                        audio=audio,
                        transcript=transcription.text,
                        extraction=extraction,
                    )
                    result.persisted = True
                except StorageError as exc:
                    result.persistence_error = exc.user_message

        stage = PipelineStage.DONE
        self._log_metrics(
            status=stage.value,
            audio=audio,
            meeting_id=meeting_id,
            user_id=user_id,
            timings=timings,
            wall_start=wall_start,
            transcription=transcription,
            extraction=extraction,
            persisted=result.persisted,
        )
        return result

    def _fail(
        self,
        stage: PipelineStage,
        error: PipelineError,
        audio: UploadedAudio,
        meeting_id: str,
        user_id: str,
        timings: dict[str, float],
        wall_start: float,
    ) -> PipelineResult:
        self._log_metrics(
            status=PipelineStage.FAILED.value,
            audio=audio,
            meeting_id=meeting_id,
            user_id=user_id,
            timings=timings,
            wall_start=wall_start,
            error_stage=stage.value,
            error_code=error.code,
            retry_count=_retry_count(error),
        )
        return PipelineResult(
            success=False,
            message=error.user_message,
            error=PipelineFailure(
                stage=stage.value, code=error.code, message=error.user_message
            ),
        )

    def _log_metrics(
        self,
        status: str,
        audio: UploadedAudio,
        meeting_id: str,
        user_id: str,
        timings: dict[str, float],
        wall_start: float,
        transcription: TranscriptionOutcome | None = None,
        extraction: ExtractionOutcome | None = None,
        persisted: bool = False,
        error_stage: str | None = None,
        error_code: str | None = None,
        retry_count: int = 0,
    ) -> None:
        log_pipeline_metrics(
            PipelineMetrics(
                meeting_id=meeting_id,
                user_id=user_id,
                status=status,
                file_size_bytes=audio.size_bytes,
                transcription_provider=self._transcriber.provider_name,
                summary_provider=self._summarizer.provider_name,
                processing_wall_time_seconds=time.monotonic() - wall_start,
                stage_durations=dict(timings),
                transcript_chars=len(transcription.text) if transcription else 0,
                action_item_count=len(extraction.action_items) if extraction else 0,
                retry_count=transcription.retry_count if transcription else retry_count,
                summary_degraded=extraction.degraded if extraction else False,
                persisted=persisted,
                error_stage=error_stage,
                error_code=error_code,
            )
        )
