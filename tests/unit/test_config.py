"""Unit tests for configuration."""

from pathlib import Path

import pytest

from quizbank.config import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Config,
    load_config,
    save_config,
)
from quizbank.exceptions import ConfigParseError, ConfigValidationError
from quizbank.search.policy import EngineMode


def test_default_config() -> None:
    """Test that default config has sensible values."""
    config = Config()
    assert config.colored_output is True
    assert config.tokenizer == "auto"
    assert config.page_size == DEFAULT_PAGE_SIZE
    assert config.database.name == "questions.db"


def test_load_missing_config(temp_dir: Path) -> None:
    """Test loading when config file doesn't exist."""
    config_path = temp_dir / "nonexistent.toml"
    config, warnings = load_config(config_path)

    assert config is not None
    assert config.config_path is None
    assert any("init-config" in w for w in warnings)


def test_load_valid_config(sample_config: Path, temp_dir: Path) -> None:
    """Test loading a valid config file."""
    config, warnings = load_config(sample_config)

    assert config.database == (temp_dir / "questions.db").resolve()
    assert config.tokenizer == "unicode61"
    assert config.page_size == 10
    assert config.colored_output is False
    assert config.config_path == sample_config.resolve()
    assert warnings == []


def test_load_invalid_toml(temp_dir: Path) -> None:
    """Test loading invalid TOML raises error."""
    config_path = temp_dir / "invalid.toml"
    config_path.write_text("this is not valid [ toml")

    with pytest.raises(ConfigParseError):
        load_config(config_path)


@pytest.mark.parametrize(
    "content",
    [
        '[display]\ncolored_output = "not a boolean"\n',
        "[paths]\ndatabase = 42\n",
        "[search]\ntokenizer = 3\n",
        '[search]\npage_size = "ten"\n',
        "[search]\npage_size = true\n",
    ],
)
def test_config_validation_invalid_type(temp_dir: Path, content: str) -> None:
    """Test that invalid types raise validation error."""
    config_path = temp_dir / "bad_types.toml"
    config_path.write_text(content)

    with pytest.raises(ConfigValidationError):
        load_config(config_path)


def test_unknown_tokenizer_rejected(temp_dir: Path) -> None:
    config_path = temp_dir / "bad_tokenizer.toml"
    config_path.write_text('[search]\ntokenizer = "porter"\n')

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(config_path)
    assert exc_info.value.key == "search.tokenizer"


def test_tokenizer_is_case_insensitive(temp_dir: Path) -> None:
    config_path = temp_dir / "upper.toml"
    config_path.write_text('[search]\ntokenizer = " Trigram "\n')

    config, _ = load_config(config_path)
    assert config.tokenizer == "trigram"
    assert config.engine_mode is EngineMode.TRIGRAM


@pytest.mark.parametrize(("value", "expected"), [(0, 1), (-5, 1), (10_000, MAX_PAGE_SIZE)])
def test_page_size_clamped(temp_dir: Path, value: int, expected: int) -> None:
    config_path = temp_dir / "page.toml"
    config_path.write_text(f"[search]\npage_size = {value}\n")

    config, warnings = load_config(config_path)
    assert config.page_size == expected
    assert any("page_size" in w for w in warnings)


def test_engine_mode_auto() -> None:
    assert Config().engine_mode == "auto"
    assert Config(tokenizer="unicode61").engine_mode is EngineMode.UNICODE61


def test_config_path_expansion() -> None:
    """Test that paths are expanded."""
    config = Config(database=Path("~/test.db"))
    config.validate()

    assert "~" not in str(config.database)


def test_memory_database_left_alone() -> None:
    config = Config(database=Path(":memory:"))
    assert config.validate() == []
    assert str(config.database) == ":memory:"


def test_save_and_reload(temp_dir: Path) -> None:
    config = Config(
        database=temp_dir / "bank.db",
        tokenizer="trigram",
        page_size=25,
        colored_output=False,
    )
    target = temp_dir / "nested" / "config.toml"
    save_config(config, target)

    loaded, warnings = load_config(target)
    assert warnings == []
    assert loaded.database == (temp_dir / "bank.db").resolve()
    assert loaded.tokenizer == "trigram"
    assert loaded.page_size == 25
    assert loaded.colored_output is False
