"""Summary and action-item extraction engines."""

from meeting_transcriber.summary.interface import SummaryEngine
from meeting_transcriber.summary.parsing import parse_hybrid_reply, strip_decorative_glyphs
from meeting_transcriber.summary.runner import get_summary_engine, run_summary_extraction

__all__ = [
    "SummaryEngine",
    "get_summary_engine",
    "parse_hybrid_reply",
    "run_summary_extraction",
    "strip_decorative_glyphs",
]
