"""Processing metrics collection and reporting.

Provides PipelineMetrics dataclass for structured observability data,
StageTimer context manager for measuring pipeline stage durations,
and log_pipeline_metrics() for emitting metrics as structured JSON to stderr,
alongside the structured log stream.
"""

from __future__ import annotations

import json
import sys
import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime


@dataclass
class PipelineMetrics:
    """All metrics collected for a single pipeline invocation."""

    meeting_id: str
    user_id: str
    status: str
    file_size_bytes: int
    transcription_provider: str
    summary_provider: str
    processing_wall_time_seconds: float
    stage_durations: dict[str, float] = field(default_factory=dict)
    transcript_chars: int = 0
    action_item_count: int = 0
    retry_count: int = 0
    summary_degraded: bool = False
    persisted: bool = False
    error_stage: str | None = None
    error_code: str | None = None


class StageTimer:
    """Context manager that records wall-clock duration of a pipeline stage.

    When given a timings dict, the elapsed time is stored under the stage
    name, or under ``_<stage>_failed`` if the block raised.

    Usage:
        timer = StageTimer("transcribing")
        with timer:
            do_work()
        print(timer.duration_seconds)
    """

    def __init__(self, stage_name: str, timings: dict[str, float] | None = None) -> None:
        self.stage_name = stage_name
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self.duration_seconds: float = 0.0
        self._timings = timings
        self._mono_start: float = 0.0

    def __enter__(self) -> StageTimer:
        self.start_time = datetime.now(UTC)
        self._mono_start = time.monotonic()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        elapsed = time.monotonic() - self._mono_start
        self.end_time = datetime.now(UTC)
        self.duration_seconds = elapsed
        if self._timings is not None:
            key = self.stage_name if exc_type is None else f"_{self.stage_name}_failed"
            self._timings[key] = elapsed


def log_pipeline_metrics(metrics: PipelineMetrics) -> None:
    """Emit pipeline metrics as a single structured JSON line to stderr.

    The JSON envelope includes timestamp, severity, and metric_type
    fields. All PipelineMetrics fields are spread into the top level.

    Args:
        metrics: Populated PipelineMetrics dataclass.
    """
    entry = {
        "timestamp": datetime.now(UTC).isoformat(),
        "severity": "INFO",
        "metric_type": "pipeline_completion",
        **asdict(metrics),
    }
    print(json.dumps(entry), file=sys.stderr)
