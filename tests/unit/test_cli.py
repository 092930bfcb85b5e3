"""Unit tests for the command-line interface -- legallens.cli.documents."""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import patch

import pytest

from legallens.cli.documents import _build_parser, main
from legallens.config.settings import Settings
from legallens.main import build_application


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(tmp_path: Path, **overrides) -> Settings:
    defaults = {
        "openai_api_key": "",
        "anthropic_api_key": "",
        "ollama_base_url": "",
        "data_dir": str(tmp_path / "uploads"),
        "processing_workers": 1,
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _run(tmp_path: Path, argv: list[str]) -> int:
    """Invoke main() with an offline application rooted under tmp_path."""
    settings = _settings(tmp_path)

    def _factory(*args, **kwargs):
        return build_application(settings, llm_provider=None, embedding_provider=None)

    with patch("legallens.cli.documents.build_application", side_effect=_factory):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
    return exc_info.value.code


# ======================================================================
# Parser
# ======================================================================


class TestBuildParser:
    def test_ingest_arguments(self) -> None:
        args = _build_parser().parse_args(["--user", "alice", "ingest", "lease.pdf"])
        assert args.command == "ingest"
        assert args.file == "lease.pdf"
        assert args.user == "alice"
        assert args.media_type is None

    def test_default_user(self) -> None:
        args = _build_parser().parse_args(["list"])
        assert args.user == "local"

    def test_ask_arguments(self) -> None:
        args = _build_parser().parse_args(["ask", "doc-1", "When is rent due?"])
        assert args.document_id == "doc-1"
        assert args.question == "When is rent due?"

    def test_combine_strategy(self) -> None:
        args = _build_parser().parse_args(["combine", "a", "b", "--strategy", "map-reduce"])
        assert args.document_ids == ["a", "b"]
        assert args.strategy == "map-reduce"

    def test_invalid_strategy_rejected(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["combine", "a", "--strategy", "refine"])


# ======================================================================
# Commands
# ======================================================================


class TestCommands:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_ingest_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(tmp_path, ["ingest", str(tmp_path / "nope.txt")]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_full_session(
        self, tmp_path: Path, contract_text: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "contract.txt"
        source.write_text(contract_text, encoding="utf-8")

        assert _run(tmp_path, ["--user", "alice", "ingest", str(source)]) == 0
        out = capsys.readouterr().out
        assert "Status:  completed" in out
        document_id = re.search(r"as ([0-9a-f]{32})", out).group(1)

        assert _run(tmp_path, ["--user", "alice", "list"]) == 0
        assert document_id in capsys.readouterr().out

        assert _run(tmp_path, ["--user", "bob", "list"]) == 0
        assert "No documents." in capsys.readouterr().out

        assert _run(tmp_path, ["--user", "alice", "summary", document_id]) == 0
        assert "Acme Corporation" in capsys.readouterr().out

        assert _run(tmp_path, ["--user", "alice", "ask", document_id, "When is the deadline?"]) == 0
        assert "April 5, 2024" in capsys.readouterr().out

        assert _run(tmp_path, ["--user", "alice", "delete", document_id]) == 0
        assert f"Deleted {document_id}" in capsys.readouterr().out

        assert _run(tmp_path, ["--user", "alice", "summary", document_id]) == 1
        assert "Not found" in capsys.readouterr().err

    def test_ingest_empty_file_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "empty.txt"
        source.write_bytes(b"")
        assert _run(tmp_path, ["ingest", str(source)]) == 1
        assert "Processing failed: The uploaded file is empty" in capsys.readouterr().err

    def test_blank_question(self, tmp_path: Path, contract_text: str, capsys) -> None:
        source = tmp_path / "contract.txt"
        source.write_text(contract_text, encoding="utf-8")
        _run(tmp_path, ["ingest", str(source)])
        document_id = re.search(r"as ([0-9a-f]{32})", capsys.readouterr().out).group(1)

        assert _run(tmp_path, ["ask", document_id, "   "]) == 1
        assert "Question is required" in capsys.readouterr().err
