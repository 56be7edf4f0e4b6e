"""Tests for the meeting_transcriber command-line entry point."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from meeting_transcriber.main import guess_content_type, main


@pytest.fixture(autouse=True)
def stub_environment(monkeypatch: pytest.MonkeyPatch):
    """Run the CLI against the stub engines and the in-memory store."""
    for name in ("OPENAI_API_KEY", "RECORDINGS_WORKER_URL", "PIPELINE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STUB_DELAY_SECONDS", "0")
    with patch("meeting_transcriber.main._setup_logging"):
        yield


class TestGuessContentType:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("a.mp3", "audio/mpeg"),
            ("a.WAV", "audio/wav"),
            ("a.webm", "audio/webm"),
            ("notes.txt", "text/plain"),
            ("noext", "application/octet-stream"),
        ],
    )
    def test_guesses(self, name: str, expected: str) -> None:
        assert guess_content_type(Path(name)) == expected


class TestMain:
    def test_success_prints_result_and_exits_zero(self, tmp_path: Path, capsys) -> None:
        audio_file = tmp_path / "test.wav"
        audio_file.write_bytes(b"RIFF" + b"\x00" * 100)

        code = main([str(audio_file), "--meeting-id", "42", "--user-id", "user-1"])

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["success"] is True
        assert body["isPlaceholder"] is True
        assert "test.wav" in body["transcription"]
        assert len(body["actionPoints"]) == 5
        assert body["persisted"] is True

    def test_unsupported_file_exits_one(self, tmp_path: Path, capsys) -> None:
        audio_file = tmp_path / "clip.mp4"
        audio_file.write_bytes(b"\x00" * 10)

        code = main([str(audio_file), "--meeting-id", "42", "--user-id", "u"])

        assert code == 1
        body = json.loads(capsys.readouterr().out)
        assert body["success"] is False
        assert body["error"]["code"] == "UnsupportedType"

    def test_explicit_content_type_overrides_guess(self, tmp_path: Path, capsys) -> None:
        audio_file = tmp_path / "recording.bin"
        audio_file.write_bytes(b"\x00" * 10)

        code = main(
            [
                str(audio_file),
                "--meeting-id",
                "abc",
                "--user-id",
                "u",
                "--content-type",
                "audio/webm",
            ]
        )

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["persisted"] is False

    def test_missing_file_exits_two(self, tmp_path: Path) -> None:
        code = main([str(tmp_path / "missing.wav"), "--meeting-id", "1", "--user-id", "u"])
        assert code == 2

    def test_meeting_id_is_required(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main([str(tmp_path / "a.wav"), "--user-id", "u"])
