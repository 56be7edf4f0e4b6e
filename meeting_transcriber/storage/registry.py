"""Recording store registry with configuration-driven provider selection."""

from meeting_transcriber.storage.interface import RecordingStore
from meeting_transcriber.storage.memory import InMemoryRecordingStore
from meeting_transcriber.storage.worker_client import WorkerRecordingStore
from meeting_transcriber.utils.errors import ConfigError

RECORDING_STORES: dict[str, type[RecordingStore]] = {
    "memory": InMemoryRecordingStore,
    "worker": WorkerRecordingStore,
}


def get_recording_store(provider: str, **kwargs: object) -> RecordingStore:
    """Create a recording store by provider name.

    Args:
        provider: Provider name ("memory" or "worker").
        **kwargs: Store-specific configuration passed to the constructor.

    Raises:
        ConfigError: If the provider name is not registered.
    """
    store_cls = RECORDING_STORES.get(provider)
    if not store_cls:
        available = ", ".join(sorted(RECORDING_STORES.keys()))
        raise ConfigError(
            f"Unknown recording store: '{provider}'. Available: {available}"
        )
    return store_cls(**kwargs)  # type: ignore[arg-type]
