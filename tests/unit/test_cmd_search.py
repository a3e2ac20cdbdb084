"""Unit tests for the search command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from quizbank.cli import cli
from quizbank.commands.search import _clip_text, plan_to_dict
from quizbank.search.policy import SearchPlan
from quizbank.search.query import ExactQuery, LikeQuery


def _run(config: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config), "search", *args])


def _write_config(temp_dir: Path, tokenizer: str) -> Path:
    config_path = temp_dir / f"{tokenizer}.toml"
    config_path.write_text(f"""[paths]
database = "{temp_dir / 'questions.db'}"

[search]
tokenizer = "{tokenizer}"
""")
    return config_path


class TestPlanToDict:
    def test_exact(self) -> None:
        data = plan_to_dict(SearchPlan(ExactQuery("a b")))
        assert data == {"kind": "exact", "auto_fallback": False, "body": "a b"}

    def test_like(self) -> None:
        plan = SearchPlan(LikeQuery(where="w", params=("%a%",)), auto_fallback=True)
        assert plan_to_dict(plan) == {
            "kind": "like",
            "auto_fallback": True,
            "where": "w",
            "params": ["%a%"],
        }


def test_clip_text() -> None:
    assert _clip_text("short", 10) == "short"
    assert _clip_text("a\n  b", 10) == "a b"
    assert _clip_text("abcdefghijk", 5) == "abcd…"


class TestSearchCommand:
    def test_help(self) -> None:
        result = CliRunner().invoke(cli, ["search", "--help"])
        assert result.exit_code == 0
        assert "=text" in result.output
        assert "~query" in result.output

    def test_json_results(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "--format", "json", "sign")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["query"] == {"kind": "fts", "auto_fallback": False, "match": "sign"}
        assert data["total"] == 3
        assert [item["id"] for item in data["items"]] == [3, 2, 1]

    def test_words_are_joined(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "-f", "json", "--", "sign", "-yield")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["query"]["match"] == "sign NOT yield"
        assert [item["id"] for item in data["items"]] == [3, 1]

    def test_paging(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "-f", "json", "--limit", "2", "--page", "2", "")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total"] == 6
        assert data["page"] == 2
        assert data["page_size"] == 2
        assert [item["id"] for item in data["items"]] == [4, 3]

    def test_sort_option(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "-f", "json", "--sort", "id_asc", "sign")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["sort"] == "id_asc"
        assert [item["id"] for item in data["items"]] == [1, 2, 3]

    def test_unknown_sort_rejected(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "--sort", "random", "sign")
        assert result.exit_code == 2
        assert "Invalid value" in result.output

    def test_page_size_from_config(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "-f", "json", "")
        data = json.loads(result.output)
        assert data["page_size"] == 10

    def test_like_query(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "-f", "json", "~50%")
        data = json.loads(result.output)
        assert data["query"]["kind"] == "like"
        assert [item["id"] for item in data["items"]] == [5]

    def test_table_output(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "full stop")
        assert result.exit_code == 0, result.output
        assert "1-1 of 1" in result.output
        assert "Which sign" in result.output

    def test_no_results(self, seeded_config: Path) -> None:
        result = _run(seeded_config, "nothingmatches")
        assert result.exit_code == 0
        assert "No results for: nothingmatches" in result.output

    def test_empty_database(self, sample_config: Path) -> None:
        result = _run(sample_config, "")
        assert result.exit_code == 0
        assert "No questions yet" in result.output

    def test_unopenable_database(self, temp_dir: Path) -> None:
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")
        config_path = temp_dir / "broken.toml"
        config_path.write_text(f'[paths]\ndatabase = "{blocker / "questions.db"}"\n')

        result = _run(config_path, "sign")
        assert result.exit_code == 2


class TestExplain:
    def test_explain_like(self, sample_config: Path) -> None:
        result = _run(sample_config, "--explain", "~50%")
        assert result.exit_code == 0
        assert "like" in result.output
        assert "params" in result.output

    def test_explain_does_not_create_database(self, sample_config: Path, temp_dir: Path) -> None:
        _run(sample_config, "--explain", "sign")
        assert not (temp_dir / "questions.db").exists()

    def test_explain_trigram_short_term(self, temp_dir: Path) -> None:
        config_path = _write_config(temp_dir, "trigram")
        result = _run(config_path, "--explain", "--format", "json", "ab")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["kind"] == "like"
        assert data["auto_fallback"] is True
        assert data["params"] == ["%ab%"]

    def test_explain_unicode61_short_term(self, temp_dir: Path) -> None:
        config_path = _write_config(temp_dir, "unicode61")
        result = _run(config_path, "-e", "-f", "json", "ab")
        data = json.loads(result.output)
        assert data == {"kind": "fts", "auto_fallback": False, "match": "ab"}

    def test_explain_exact(self, sample_config: Path) -> None:
        result = _run(sample_config, "-e", "-f", "json", "=hello world")
        data = json.loads(result.output)
        assert data == {"kind": "exact", "auto_fallback": False, "body": "hello world"}

    def test_tokenizer_override(self, sample_config: Path) -> None:
        result = CliRunner().invoke(
            cli,
            [
                "--config",
                str(sample_config),
                "--tokenizer",
                "TRIGRAM",
                "search",
                "-e",
                "-f",
                "json",
                "ab",
            ],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["kind"] == "like"
        assert data["auto_fallback"] is True
