"""Summary extraction runner with provider registry.

Best-effort extraction: failures are logged and produce an empty,
degraded outcome rather than raising. A failed summary never discards a
transcript that was already obtained.
"""

from __future__ import annotations

import logging

from meeting_transcriber.models import ExtractionOutcome
from meeting_transcriber.summary.interface import SummaryEngine
from meeting_transcriber.summary.openai_chat import OpenAIChatSummaryEngine
from meeting_transcriber.summary.stub import StubSummaryEngine
from meeting_transcriber.utils.errors import ConfigError

logger = logging.getLogger(__name__)

SUMMARY_ENGINES: dict[str, type[SummaryEngine]] = {
    "openai": OpenAIChatSummaryEngine,
    "stub": StubSummaryEngine,
}


def get_summary_engine(provider: str, **kwargs: object) -> SummaryEngine:
    """Create a summary engine instance by provider name.

    Raises:
        ConfigError: If the provider name is not registered.
    """
    engine_cls = SUMMARY_ENGINES.get(provider)
    if not engine_cls:
        available = ", ".join(sorted(SUMMARY_ENGINES.keys()))
        raise ConfigError(
            f"Unknown summary provider: '{provider}'. Available: {available}"
        )
    return engine_cls(**kwargs)  # type: ignore[arg-type]


async def run_summary_extraction(
    engine: SummaryEngine,
    transcript: str,
    meeting_id: str | None = None,
) -> ExtractionOutcome:
    """Run summary extraction on a transcript (best-effort).

    Args:
        engine: The summary engine to call.
        transcript: Raw transcript text.
        meeting_id: Optional meeting id for log context.

    Returns:
        The engine's outcome, or an empty outcome with degraded=True on
        any failure.
    """
    try:
        return await engine.extract(transcript)
    except Exception:
        logger.error(
            "Summary extraction failed for provider '%s', continuing without summary",
            engine.provider_name,
            exc_info=True,
            extra={"meeting_id": meeting_id, "stage": "summarizing"},
        )
        return ExtractionOutcome(degraded=True)
