"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from kube_api_timeline.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.data_dir == "./data"
    assert args.recent_releases == 11
    assert args.detect_maturity_changes is False


def test_cli_builds_timeline(tmp_path: Path, data_dir: Path):
    output_dir = tmp_path / "out"

    main([
        "--data-dir", str(data_dir),
        "--output-dir", str(output_dir),
        "--now", "2018-10-01",
        "--recent-releases", "2",
        "--export-csv",
    ])

    data = json.loads((output_dir / "timeline.json").read_text())
    assert [r["archived"] for r in data["releases"]] == [True, False, False]
    assert [r["supported"] for r in data["releases"]] == [False, True, True]
    assert (output_dir / "timeline_resources.csv").exists()
    assert not (output_dir / "timeline_worksheets.xlsx").exists()


def test_cli_fails_on_missing_data_dir(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--data-dir", str(tmp_path / "missing"), "--output-dir", str(tmp_path / "out")])

    assert exc_info.value.code == 1
    assert "Data directory not found" in capsys.readouterr().err


def test_cli_rejects_invalid_now(tmp_path: Path, data_dir: Path):
    with pytest.raises(SystemExit) as exc_info:
        main(["--data-dir", str(data_dir), "--now", "yesterday"])

    assert exc_info.value.code == 1


def test_cli_rejects_negative_window(data_dir: Path):
    with pytest.raises(SystemExit) as exc_info:
        main(["--data-dir", str(data_dir), "--recent-releases", "-1"])

    assert exc_info.value.code == 2
