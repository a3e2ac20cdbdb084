"""Initialize configuration file for quizbank."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click

from quizbank.cli import Context, pass_context
from quizbank.config import get_default_config_path
from quizbank.utils.output import error, info, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("quizbank").joinpath("config.example.toml").read_text()


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Replace a config file that already exists",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Where to write the file (default: ~/.config/quizbank/config.toml)",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None) -> None:
    """Write a starter config.toml for quizbank.

    The file sets where the question database lives and how search
    behaves. Every key may be removed to fall back to its default.

    \b
    Keys:
      paths.database          SQLite file with questions and FTS5 index
      search.tokenizer        auto, trigram or unicode61
      search.page_size        results per page (1-500)
      display.colored_output  colored terminal output

    \b
    Examples:
      quizbank init-config
      quizbank init-config --output ./quizbank.toml --force
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_load_example_config())
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1)

    success(f"Created config file: {config_path}")
    info("Set search.tokenizer to pin the FTS5 tokenizer instead of auto-detecting it.")
