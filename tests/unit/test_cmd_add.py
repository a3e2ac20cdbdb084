"""Unit tests for the add command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from quizbank.cli import cli


def test_add_then_search(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "--config",
            str(sample_config),
            "add",
            "Which",
            "sign",
            "means",
            "yield?",
            "-x",
            "Triangle",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Added question #1" in result.output

    result = runner.invoke(cli, ["--config", str(sample_config), "search", "-f", "json", "yield"])
    data = json.loads(result.output)
    assert data["total"] == 1
    assert data["items"][0]["body"] == "Which sign means yield?"
    assert data["items"][0]["explanation"] == "Triangle"


def test_ids_increase(seeded_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(seeded_config), "add", "One more question"])
    assert result.exit_code == 0, result.output
    assert "Added question #7" in result.output


def test_blank_body_rejected(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(sample_config), "add", "   "])
    assert result.exit_code == 1
    assert "must not be empty" in result.output


def test_db_override(sample_config: Path, temp_dir: Path) -> None:
    other = temp_dir / "other.db"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(sample_config), "--db", str(other), "add", "Elsewhere"]
    )
    assert result.exit_code == 0, result.output
    assert other.exists()
    assert not (temp_dir / "questions.db").exists()
