"""Add a question to the bank."""

from __future__ import annotations

import click

from quizbank.cli import Context, pass_context
from quizbank.db.queries import add_question
from quizbank.db.session import get_session
from quizbank.exceptions import DatabaseError, ValidationError
from quizbank.utils.output import error, success

EXIT_SUCCESS = 0
EXIT_INVALID = 1
EXIT_DB_ERROR = 2


@click.command("add")
@click.argument("body", nargs=-1, required=True)
@click.option(
    "--explanation",
    "-x",
    default="",
    help="Explanation shown with the answer",
)
@pass_context
def cli(ctx: Context, body: tuple[str, ...], explanation: str) -> None:
    """Add a question. BODY words are joined with spaces.

    \b
    Example:
      quizbank add "Which sign means you must come to a full stop?"
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_INVALID)

    try:
        with get_session(config.database, config.engine_mode) as session:
            question = add_question(session, " ".join(body), explanation)
            question_id = question.id
    except ValidationError as e:
        error(str(e))
        raise SystemExit(EXIT_INVALID)
    except DatabaseError as e:
        error(str(e))
        raise SystemExit(EXIT_DB_ERROR)

    success(f"Added question #{question_id}")
