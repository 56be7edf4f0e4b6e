"""Abstract summary engine interface.

Concrete implementations (the OpenAI chat-completion endpoint, the
deterministic stub) subclass SummaryEngine.
"""

from abc import ABC, abstractmethod

from meeting_transcriber.models import ExtractionOutcome


class SummaryEngine(ABC):
    """Abstract base class for summary and action-item extraction.

    Subclasses must implement the extract() method. Implementations may
    raise SummaryError; callers degrade it to an empty outcome.
    """

    provider_name: str = ""

    @abstractmethod
    async def extract(self, transcript: str) -> ExtractionOutcome:
        """Produce a summary and ordered action items for a transcript.

        Args:
            transcript: Raw transcript text (may be empty).

        Returns:
            ExtractionOutcome with sanitized summary and action items.
        """
