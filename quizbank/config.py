"""Configuration management for quizbank."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from quizbank.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from quizbank.search.policy import EngineMode

TOKENIZER_AUTO = "auto"
TOKENIZER_CHOICES: tuple[str, ...] = (TOKENIZER_AUTO, *(m.value for m in EngineMode))

DEFAULT_PAGE_SIZE = 30
MAX_PAGE_SIZE = 500


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "quizbank" / "config.toml"


def get_default_database_path() -> Path:
    """Get the default question database path."""
    return Path.home() / ".local" / "share" / "quizbank" / "questions.db"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        database: Path to the SQLite question database.
        tokenizer: FTS5 tokenizer, ``auto`` picks trigram when available.
        page_size: Default number of search results per page.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    database: Path = field(default_factory=get_default_database_path)
    tokenizer: str = TOKENIZER_AUTO
    page_size: int = DEFAULT_PAGE_SIZE
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if str(self.database) != ":memory:":
            self.database = self.database.expanduser().resolve()
            if not self.database.parent.exists():
                warnings.append(
                    f"Database directory does not exist yet: {self.database.parent}"
                )

        if self.tokenizer not in TOKENIZER_CHOICES:
            raise ConfigValidationError(
                "search.tokenizer",
                self.tokenizer,
                f"must be one of {', '.join(TOKENIZER_CHOICES)}",
            )

        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            clamped = max(1, min(self.page_size, MAX_PAGE_SIZE))
            warnings.append(
                f"search.page_size={self.page_size} is outside valid range "
                f"1-{MAX_PAGE_SIZE}, using {clamped}"
            )
            self.page_size = clamped

        return warnings

    @property
    def engine_mode(self) -> EngineMode | str:
        """Tokenizer as passed to the database layer (``auto`` or a mode)."""
        if self.tokenizer == TOKENIZER_AUTO:
            return TOKENIZER_AUTO
        return EngineMode(self.tokenizer)


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: quizbank init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "database" in paths:
        value = paths["database"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.database", value, "must be a string path")
        config.database = Path(value)

    # Parse [search] section
    search = data.get("search", {})
    if "tokenizer" in search:
        value = search["tokenizer"]
        if not isinstance(value, str):
            raise ConfigValidationError("search.tokenizer", value, "must be a string")
        config.tokenizer = value.strip().lower()

    if "page_size" in search:
        value = search["page_size"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError("search.page_size", value, "must be an integer")
        config.page_size = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "paths": {
            "database": str(config.database),
        },
        "search": {
            "tokenizer": config.tokenizer,
            "page_size": config.page_size,
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
