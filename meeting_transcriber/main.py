"""Command-line entry point for the transcription pipeline.

Runs a single audio file through the pipeline with configuration taken
from the environment and prints the result as JSON.
"""

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path

from meeting_transcriber.config import TranscriberConfig
from meeting_transcriber.models import PipelineResult, UploadedAudio
from meeting_transcriber.observability.logger import configure_root_logging
from meeting_transcriber.pipeline import PipelineOrchestrator

logger = logging.getLogger(__name__)

# Extensions mimetypes does not map to an allow-listed audio type
EXTENSION_CONTENT_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
}


def _setup_logging() -> None:
    # stdout carries the result JSON
    configure_root_logging(sys.stderr)


def guess_content_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in EXTENSION_CONTENT_TYPES:
        return EXTENSION_CONTENT_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meeting-transcriber",
        description="Transcribe and summarize a meeting recording.",
    )
    parser.add_argument("audio_file", type=Path, help="Path to a .wav, .mp3 or .webm file")
    parser.add_argument("--meeting-id", required=True, help="Booking id to attach the result to")
    parser.add_argument("--user-id", required=True, help="Id of the recording owner")
    parser.add_argument("--user-name", default="", help="Display name of the recording owner")
    parser.add_argument(
        "--content-type",
        default=None,
        help="Declared content type (guessed from the extension when omitted)",
    )
    return parser


async def _run(args: argparse.Namespace, config: TranscriberConfig) -> PipelineResult:
    data = args.audio_file.read_bytes()
    audio = UploadedAudio.from_bytes(
        data,
        file_name=args.audio_file.name,
        content_type=args.content_type or guess_content_type(args.audio_file),
    )
    orchestrator = PipelineOrchestrator(config)
    try:
        return await orchestrator.process(
            audio,
            meeting_id=args.meeting_id,
            user_id=args.user_id,
            user_name=args.user_name,
        )
    finally:
        await orchestrator.close()


def main(argv: list[str] | None = None) -> int:
    """Run the pipeline once and print the result.

    Returns:
        Process exit code: 0 on success, 1 on pipeline failure, 2 on
        unreadable input.
    """
    args = _build_parser().parse_args(argv)
    _setup_logging()

    config = TranscriberConfig.from_env()
    logger.info(
        "Meeting transcriber starting (transcription=%s, storage=%s)",
        config.transcription_provider,
        config.storage_provider,
    )

    try:
        result = asyncio.run(_run(args, config))
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.audio_file, exc)
        return 2

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
