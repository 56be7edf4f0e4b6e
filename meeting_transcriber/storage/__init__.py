"""Persistence of completed transcriptions."""

from meeting_transcriber.storage.persister import ResultPersister
from meeting_transcriber.storage.registry import get_recording_store

__all__ = ["ResultPersister", "get_recording_store"]
