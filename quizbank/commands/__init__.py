"""Subcommands of the ``quizbank`` CLI.

Every public module in this package that defines a click command named
``cli`` is registered on the top-level group.
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from collections.abc import Iterator


def discover_commands() -> Iterator[click.Command]:
    """Yield the ``cli`` command of each public module, sorted by module name."""
    import quizbank.commands as commands_pkg

    names = sorted(
        info.name for info in pkgutil.iter_modules(commands_pkg.__path__)
        if not info.name.startswith("_")
    )
    for name in names:
        module = importlib.import_module(f"{commands_pkg.__name__}.{name}")
        cmd = getattr(module, "cli", None)
        if isinstance(cmd, click.Command):
            yield cmd
