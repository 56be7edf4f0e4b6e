"""Transcription engine registry with configuration-driven provider selection.

Maps provider name strings to engine classes. Use get_transcription_engine()
to instantiate an engine by name with engine-specific configuration.
"""

from meeting_transcriber.asr.interface import TranscriptionEngine
from meeting_transcriber.asr.openai_whisper import OpenAITranscriptionEngine
from meeting_transcriber.asr.stub import StubTranscriptionEngine
from meeting_transcriber.utils.errors import ConfigError

TRANSCRIPTION_ENGINES: dict[str, type[TranscriptionEngine]] = {
    "openai": OpenAITranscriptionEngine,
    "stub": StubTranscriptionEngine,
}


def get_transcription_engine(provider: str, **kwargs: object) -> TranscriptionEngine:
    """Create a transcription engine instance by provider name.

    Args:
        provider: Provider name (e.g., "openai", "stub").
        **kwargs: Engine-specific configuration passed to the constructor.

    Returns:
        An initialized TranscriptionEngine instance.

    Raises:
        ConfigError: If the provider name is not registered.
    """
    engine_cls = TRANSCRIPTION_ENGINES.get(provider)
    if not engine_cls:
        available = ", ".join(sorted(TRANSCRIPTION_ENGINES.keys()))
        raise ConfigError(
            f"Unknown transcription provider: '{provider}'. Available: {available}"
        )
    return engine_cls(**kwargs)  # type: ignore[arg-type]
