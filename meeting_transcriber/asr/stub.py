"""Stub transcription engine used when no upstream credential is configured.

Waits a fixed delay to model upstream latency, then returns a clearly
labelled placeholder that names the uploaded file. The outcome is flagged
as a placeholder so it is never presented as a real AI result.
"""

import asyncio
import logging

from meeting_transcriber.asr.interface import TranscriptionEngine
from meeting_transcriber.models import TranscriptionOutcome

logger = logging.getLogger(__name__)

PLACEHOLDER_TEMPLATE = (
    "[PLACEHOLDER TRANSCRIPT - not produced by a speech-to-text service] "
    "This is a test transcription of the file '{file_name}'. "
    "The meeting covered project progress and key decisions about the next phase. "
    "Participants discussed the challenges and opportunities ahead of the team. "
    "Several concrete actions were identified to keep the project on track."
)


class StubTranscriptionEngine(TranscriptionEngine):
    """Deterministic engine that never touches the network."""

    provider_name = "stub"

    def __init__(self, delay_seconds: float = 2.0) -> None:
        self._delay_seconds = delay_seconds

    async def transcribe(self, audio: bytes, file_name: str) -> TranscriptionOutcome:
        """Return the placeholder transcript after the configured delay.

        Args:
            audio: Ignored.
            file_name: Declared file name, embedded in the placeholder.

        Returns:
            TranscriptionOutcome with is_placeholder=True.
        """
        logger.warning(
            "No transcription credential configured, returning placeholder for %s",
            file_name,
        )
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        return TranscriptionOutcome(
            text=PLACEHOLDER_TEMPLATE.format(file_name=file_name),
            provider=self.provider_name,
            is_placeholder=True,
        )
