"""Speech-to-text engines."""

from meeting_transcriber.asr.registry import get_transcription_engine

__all__ = ["get_transcription_engine"]
