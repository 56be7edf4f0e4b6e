"""Tests for project scaffold: imports, logger, and custom exceptions."""

import io
import json
import logging
import sys

import pytest

from meeting_transcriber.observability.logger import (
    StructuredJsonFormatter,
    configure_root_logging,
    get_logger,
)
from meeting_transcriber.utils.errors import (
    ConfigError,
    EmptyInputError,
    PipelineError,
    PipelineTimeoutError,
    StorageError,
    SummaryError,
    TooLargeError,
    UnsupportedTypeError,
    UpstreamError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
    ValidationError,
)


class TestModuleImports:
    """Verify all package modules are importable."""

    def test_top_level_import(self) -> None:
        import meeting_transcriber

        assert meeting_transcriber is not None

    def test_subpackage_imports(self) -> None:
        import meeting_transcriber.asr
        import meeting_transcriber.ingest
        import meeting_transcriber.observability
        import meeting_transcriber.storage
        import meeting_transcriber.summary
        import meeting_transcriber.utils

        assert meeting_transcriber.asr is not None
        assert meeting_transcriber.ingest is not None
        assert meeting_transcriber.observability is not None
        assert meeting_transcriber.storage is not None
        assert meeting_transcriber.summary is not None
        assert meeting_transcriber.utils is not None


class TestCustomExceptions:
    """Verify custom exception hierarchy and string representations."""

    def test_all_exceptions_inherit_from_pipeline_error(self) -> None:
        exception_classes = [
            ConfigError,
            ValidationError,
            UpstreamError,
            SummaryError,
            StorageError,
            PipelineTimeoutError,
        ]
        for cls in exception_classes:
            assert issubclass(cls, PipelineError), (
                f"{cls.__name__} must inherit from PipelineError"
            )

    def test_validation_errors_share_base(self) -> None:
        for cls in (EmptyInputError, TooLargeError, UnsupportedTypeError):
            assert issubclass(cls, ValidationError)

    def test_error_codes_match_taxonomy(self) -> None:
        assert EmptyInputError.code == "EmptyInput"
        assert TooLargeError.code == "TooLarge"
        assert UnsupportedTypeError.code == "UnsupportedType"
        assert UpstreamRejectedError.code == "UpstreamRejected"
        assert UpstreamUnreachableError.code == "UpstreamUnreachable"

    def test_pipeline_error_str_without_meeting_id(self) -> None:
        error = PipelineError("something failed")
        assert str(error) == "something failed"

    def test_pipeline_error_str_with_meeting_id(self) -> None:
        error = PipelineError("something failed", meeting_id="42")
        assert "[meeting=42]" in str(error)
        assert "something failed" in str(error)

    def test_validation_user_message_is_plain_reason(self) -> None:
        error = TooLargeError("File is too large.", meeting_id="42")
        assert error.user_message == "File is too large."

    def test_rejected_user_message_has_type_and_message_only(self) -> None:
        error = UpstreamRejectedError(
            "raw detail with body {...}",
            status_code=400,
            error_type="invalid_request_error",
            error_message="Invalid file format.",
        )
        assert error.user_message == (
            "Transcription service rejected the request "
            "(invalid_request_error): Invalid file format."
        )
        assert "{...}" not in error.user_message

    def test_unreachable_includes_attempts(self) -> None:
        error = UpstreamUnreachableError("gave up", attempts=4, provider="openai")
        assert error.attempts == 4
        assert error.provider == "openai"
        assert "unavailable" in error.user_message

    def test_storage_error_includes_operation(self) -> None:
        error = StorageError("write failed", operation="insert")
        assert error.operation == "insert"

    def test_exceptions_are_catchable_as_pipeline_error(self) -> None:
        with pytest.raises(PipelineError):
            raise UnsupportedTypeError("test error")


class TestStructuredLogger:
    """Verify structured JSON logger output format."""

    def test_logger_output_is_valid_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("test.json_output")
        logger.info("test message")

        captured = capsys.readouterr()
        parsed = json.loads(captured.out.strip())

        assert "timestamp" in parsed
        assert "severity" in parsed
        assert "message" in parsed

    def test_logger_severity_levels(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("test.severity")
        logger.info("info message")

        captured = capsys.readouterr()
        parsed = json.loads(captured.out.strip())
        assert parsed["severity"] == "INFO"

    def test_logger_includes_extra_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("test.extra")
        logger.info("processing", extra={"meeting_id": "42", "stage": "transcribing"})

        captured = capsys.readouterr()
        parsed = json.loads(captured.out.strip())
        assert parsed["meeting_id"] == "42"
        assert parsed["stage"] == "transcribing"

    def test_logger_timestamp_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("test.timestamp")
        logger.warning("check format")

        captured = capsys.readouterr()
        parsed = json.loads(captured.out.strip())
        # Should be ISO 8601 format: YYYY-MM-DDTHH:MM:SSZ
        timestamp = parsed["timestamp"]
        assert timestamp.endswith("Z")
        assert "T" in timestamp

    def test_formatter_keeps_non_ascii_text(self) -> None:
        record = logging.LogRecord(
            "test", logging.INFO, __file__, 1, "Möte sparat för %s", ("Åsa",), None
        )
        parsed = json.loads(StructuredJsonFormatter().format(record))
        assert parsed["message"] == "Möte sparat för Åsa"

    def test_formatter_includes_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        parsed = json.loads(StructuredJsonFormatter().format(record))
        assert parsed["exception"] == "boom"
        assert parsed["exception_type"] == "ValueError"

    def test_logger_writes_to_given_stream(self) -> None:
        stream = io.StringIO()
        logger = get_logger("test.stream", stream=stream)
        logger.error("stored", extra={"attempt": 2})

        parsed = json.loads(stream.getvalue().strip())
        assert parsed["severity"] == "ERROR"
        assert parsed["attempt"] == 2
        assert parsed["logger"] == "test.stream"

    def test_configure_root_logging_routes_package_logs(self) -> None:
        stream = io.StringIO()
        root = logging.getLogger()
        before = list(root.handlers)
        previous_level = root.level
        try:
            configure_root_logging(stream)
            logging.getLogger("meeting_transcriber.pipeline").info(
                "saved", extra={"meeting_id": "9"}
            )
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(previous_level)

        parsed = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert parsed["message"] == "saved"
        assert parsed["meeting_id"] == "9"
