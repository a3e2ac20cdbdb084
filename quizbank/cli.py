"""Command-line interface for quizbank."""

from __future__ import annotations

import os
from pathlib import Path

import click

from quizbank import __version__
from quizbank.config import TOKENIZER_CHOICES, Config, load_config
from quizbank.db.session import MEMORY_DB
from quizbank.exceptions import ConfigError
from quizbank.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """State shared by every subcommand through ``pass_context``."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


def _color_disabled(no_color: bool) -> bool:
    # NO_COLOR is honoured whatever its value (https://no-color.org)
    return no_color or os.environ.get("NO_COLOR") is not None


def _load_app_config(
    config_path: Path | None,
    database: Path | None,
    tokenizer: str | None,
) -> tuple[Config, list[str]]:
    """Load the config file and apply command-line overrides on top."""
    config, warnings = load_config(config_path)
    if database is not None and str(database) == MEMORY_DB:
        config.database = database
    elif database is not None:
        config.database = database.expanduser().resolve()
    if tokenizer is not None:
        config.tokenizer = tokenizer
    return config, warnings


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/quizbank/config.toml)",
)
@click.option(
    "--db",
    "database",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Question database to use instead of paths.database",
)
@click.option(
    "--tokenizer",
    type=click.Choice(TOKENIZER_CHOICES, case_sensitive=False),
    default=None,
    help="FTS5 tokenizer to use instead of search.tokenizer",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output and log records (implies --verbose)",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Suppress warnings")
@click.version_option(version=__version__, prog_name="quizbank")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    database: Path | None,
    tokenizer: str | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """quizbank: Keep a local bank of quiz questions and search it.

    Questions live in a SQLite database with an FTS5 index. The search
    command understands a small boolean query language; see
    `quizbank help search`.

    Examples:

        # Add a question
        quizbank add "Which sign means stop?"

        # Explain how a query will be executed
        quizbank search --explain '(stop OR yield) -sign'
    """
    app_ctx = ctx.ensure_object(Context)
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet
    set_verbosity(verbose=verbose, debug=debug)

    color_off = _color_disabled(no_color)
    if color_off:
        set_color(False)

    try:
        config, warnings = _load_app_config(
            config_path, database, tokenizer.lower() if tokenizer else None
        )
    except ConfigError as e:
        error(str(e))
        ctx.exit(1)
        return

    app_ctx.config = config
    if not color_off and not config.colored_output:
        set_color(False)

    if not quiet:
        for message in warnings:
            warning(message)


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for the whole tool or one command."""
    target: click.Command = cli
    for name in command:
        if not isinstance(target, click.Group):
            break
        sub = target.get_command(ctx, name)
        if sub is None:
            error(f"Unknown command: {name}")
            ctx.exit(1)
            return
        target = sub
    click.echo(target.get_help(ctx))


def register_commands() -> None:
    """Attach every command module found in :mod:`quizbank.commands`."""
    from quizbank.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


register_commands()
