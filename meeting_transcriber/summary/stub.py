"""Stub summary engine used when no upstream credential is configured."""

from meeting_transcriber.models import ExtractionOutcome
from meeting_transcriber.summary.interface import SummaryEngine

PLACEHOLDER_SUMMARY = (
    "[PLACEHOLDER SUMMARY] The meeting focused on project status and planning "
    "of the next steps. The team reviewed progress, identified challenges and "
    "agreed on priorities."
)

PLACEHOLDER_ACTION_ITEMS = (
    "Finish the design document by Friday",
    "Book a follow-up meeting next week",
    "Contact external suppliers for quotes",
    "Update the project plan based on the new requirements",
    "Prepare a presentation for the board",
)


class StubSummaryEngine(SummaryEngine):
    """Returns a fixed summary and a fixed five-item action list."""

    provider_name = "stub"

    async def extract(self, transcript: str) -> ExtractionOutcome:
        return ExtractionOutcome(
            summary=PLACEHOLDER_SUMMARY,
            action_items=list(PLACEHOLDER_ACTION_ITEMS),
        )
