"""Tests for the meeting-minutes command line."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from src.cli import build_parser, main
from src.config import Settings
from src.pipeline_config import UnknownPolicy

TRANSCRIPT = "\n".join(
    [
        "0:00:01\tAlice:\t@start-meeting 2024-01-01T09:00UTC Standup",
        "0:00:02\tBob:\t@here",
        "0:00:03\tAlice:\t@here",
        "0:00:05\tBob:\t@topic Planning",
        "0:00:10\tBob:\t@item Discuss roadmap",
        "0:00:12\tCarol:\tsounds good",
        "0:00:14\tCarol:\t@vote yes",
        "0:00:20\tAlice:\t@end-meeting",
    ]
)


@pytest.fixture
def transcript_file(tmp_path: Path) -> Path:
    path = tmp_path / "standup.txt"
    path.write_text(TRANSCRIPT + "\n", encoding="utf-8")
    return path


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.path is None
        assert args.format == "markdown"
        assert args.include_non_commands is False

    def test_no_strict_overrides_configured_policy(self) -> None:
        configured = Settings(_env_file=None, unknown_policy=UnknownPolicy.STRICT)  # type: ignore[call-arg]
        with patch("src.cli.settings", configured):
            parser = build_parser()
        assert parser.parse_args([]).strict is True
        assert parser.parse_args(["--no-strict"]).strict is False

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "pdf"])


class TestMain:
    def test_markdown_from_file(self, transcript_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(transcript_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Standup started on 2024-01-01 09:00:00+00:00")
        assert "## Attendance\n- Alice\n- Bob\n" in out
        assert "## Topic: Planning (15s)\n- Discuss roadmap\n" in out
        assert "# Unknown Commands\n- Carol(2024-01-01 09:00:13+00:00): @vote yes\n" in out
        assert "sounds good" not in out

    def test_non_flag(self, transcript_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(transcript_file), "--non"]) == 0
        assert "### Non Commands\n- Carol(" in capsys.readouterr().out

    def test_strict_flag(self, transcript_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(transcript_file), "--strict", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [u["text"] for u in data["unknowns"]] == ["sounds good", "@vote yes"]

    def test_no_sort_attendees(self, transcript_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(transcript_file), "--no-sort-attendees"]) == 0
        assert "## Attendance\n- Bob\n- Alice\n" in capsys.readouterr().out

    def test_reads_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(TRANSCRIPT))
        assert main([]) == 0
        assert "# Standup started on" in capsys.readouterr().out

    def test_missing_file_exits_nonzero(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "missing.txt")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Could not read transcript" in captured.err
