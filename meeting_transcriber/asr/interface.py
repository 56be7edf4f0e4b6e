"""Abstract transcription engine interface.

Concrete implementations (the OpenAI transcription endpoint, the
deterministic stub) subclass TranscriptionEngine.
"""

from abc import ABC, abstractmethod

from meeting_transcriber.models import TranscriptionOutcome


class TranscriptionEngine(ABC):
    """Abstract base class for speech-to-text engines.

    Subclasses must implement the transcribe() method.
    """

    provider_name: str = ""

    @abstractmethod
    async def transcribe(self, audio: bytes, file_name: str) -> TranscriptionOutcome:
        """Transcribe an in-memory audio file.

        Args:
            audio: The complete audio file contents.
            file_name: Declared file name of the upload.

        Returns:
            TranscriptionOutcome with the raw transcript text (possibly empty).
        """
