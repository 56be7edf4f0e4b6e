"""Pipeline configuration.

TranscriberConfig is built once (usually from environment variables via
from_env()) and injected into the orchestrator. Nothing in the request
path reads the environment directly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from meeting_transcriber.utils.errors import ConfigError

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


def _env_float(env: Mapping[str, str], name: str, default: float | None) -> float | None:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from exc


def _env_int(
    env: Mapping[str, str], name: str, default: int, minimum: int | None = None
) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from exc
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class TranscriberConfig:
    """Immutable configuration for the transcription pipeline.

    An empty openai_api_key selects the deterministic stub path for both
    upstreams. An empty recordings_worker_url selects the in-process
    recording store.
    """

    openai_api_key: str = ""
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    transcription_model: str = "gpt-4o-mini-transcribe"
    transcription_content_type: str = "audio/mpeg"
    chat_model: str = "gpt-4.1"
    chat_max_tokens: int = 300
    chat_temperature: float = 0.2
    max_retries: int = 3
    http_timeout_seconds: float = 60.0
    stub_delay_seconds: float = 2.0
    pipeline_timeout_seconds: float | None = None
    recordings_worker_url: str = ""
    recordings_worker_secret: str = ""

    @property
    def use_stub(self) -> bool:
        return not self.openai_api_key

    @property
    def transcription_provider(self) -> str:
        return "stub" if self.use_stub else "openai"

    @property
    def summary_provider(self) -> str:
        return "stub" if self.use_stub else "openai"

    @property
    def storage_provider(self) -> str:
        return "worker" if self.recordings_worker_url else "memory"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TranscriberConfig:
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Returns:
            A populated TranscriberConfig.

        Raises:
            ConfigError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        return cls(
            openai_api_key=env.get("OPENAI_API_KEY", "").strip(),
            openai_base_url=(
                env.get("OPENAI_BASE_URL", "").strip() or DEFAULT_OPENAI_BASE_URL
            ).rstrip("/"),
            transcription_model=env.get("TRANSCRIPTION_MODEL", "").strip()
            or cls.transcription_model,
            chat_model=env.get("CHAT_MODEL", "").strip() or cls.chat_model,
            max_retries=_env_int(
                env, "TRANSCRIPTION_MAX_RETRIES", cls.max_retries, minimum=0
            ),
            http_timeout_seconds=_env_float(
                env, "HTTP_TIMEOUT_SECONDS", cls.http_timeout_seconds
            ),
            stub_delay_seconds=_env_float(
                env, "STUB_DELAY_SECONDS", cls.stub_delay_seconds
            ),
            pipeline_timeout_seconds=_env_float(env, "PIPELINE_TIMEOUT_SECONDS", None),
            recordings_worker_url=env.get("RECORDINGS_WORKER_URL", "").strip().rstrip("/"),
            recordings_worker_secret=env.get("RECORDINGS_WORKER_SECRET", "").strip(),
        )
