"""Search questions with the boolean query language."""

from __future__ import annotations

import json
from typing import Any

import click

from quizbank.cli import Context, pass_context
from quizbank.db.models import Question
from quizbank.db.queries import DEFAULT_SORT, SORT_KEYS, count_search, execute_search
from quizbank.db.session import (
    MEMORY_DB,
    detect_tokenizer,
    get_engine,
    get_fts_tokenizer,
    get_session,
)
from quizbank.exceptions import DatabaseError
from quizbank.search.policy import EngineMode, SearchPlan, parse_search
from quizbank.search.query import EmptyQuery, ExactQuery, FtsQuery, LikeQuery
from quizbank.utils.output import (
    console,
    create_table,
    debug,
    error,
    info,
    verbose,
)

EXIT_SUCCESS = 0
EXIT_NO_RESULTS = 0
EXIT_CONFIG_ERROR = 1
EXIT_DB_ERROR = 2

# Width of the body column in table output
BODY_CLIP = 80


def plan_to_dict(plan: SearchPlan) -> dict[str, Any]:
    """Describe a search plan as plain JSON-serialisable data."""
    query = plan.query
    data: dict[str, Any] = {"kind": plan.kind, "auto_fallback": plan.auto_fallback}
    if isinstance(query, ExactQuery):
        data["body"] = query.body
    elif isinstance(query, FtsQuery):
        data["match"] = query.match
    elif isinstance(query, LikeQuery):
        data["where"] = query.where
        data["params"] = list(query.params)
    return data


def _clip_text(value: str, max_width: int) -> str:
    """Truncate text to max_width, appending ellipsis if clipped."""
    value = " ".join(value.split())
    if len(value) <= max_width:
        return value
    return value[: max_width - 1] + "…"


def _explain_mode(tokenizer: EngineMode | str) -> EngineMode:
    # Detect against a throwaway database so --explain never touches the real one
    if isinstance(tokenizer, EngineMode):
        return tokenizer
    return detect_tokenizer(get_engine(MEMORY_DB))


@click.command("search")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--explain",
    "-e",
    is_flag=True,
    default=False,
    help="Show how the query would be executed instead of running it",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Results per page (default: search.page_size from config)",
)
@click.option(
    "--page",
    "-p",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Page of results to show",
)
@click.option(
    "--sort",
    "-s",
    type=click.Choice(SORT_KEYS),
    default=DEFAULT_SORT,
    show_default=True,
    help="Result order",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    explain: bool,
    output_format: str,
    limit: int | None,
    page: int,
    sort: str,
) -> None:
    """Search question bodies.

    QUERY is joined with spaces. Words are ANDed; use OR (or |) for
    alternatives, -word to exclude, "..." for phrases, parentheses to
    group and a trailing * for prefix matches.

    \b
    Prefixes:
      =text    exact match on the whole body
      ~query   substring (LIKE) matching instead of full-text

    \b
    Examples:
      quizbank search 'stop sign'
      quizbank search '(stop OR yield) -"traffic light"'
      quizbank search 'inter*'
      quizbank search --sort updated_desc 'sign'
      quizbank search '~50%'
      quizbank search --explain 'ab'
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_CONFIG_ERROR)

    query_string = " ".join(query)
    page_size = limit or config.page_size
    offset = (page - 1) * page_size

    if explain:
        plan = parse_search(query_string, _explain_mode(config.engine_mode))
        _print_explain(plan, output_format)
        raise SystemExit(EXIT_SUCCESS)

    try:
        with get_session(config.database, config.engine_mode) as session:
            mode = get_fts_tokenizer(session)
            plan = parse_search(query_string, mode)
            verbose(f"Tokenizer: {mode.value}, strategy: {plan.kind}")
            debug(f"Plan: {plan_to_dict(plan)}")
            if plan.auto_fallback:
                verbose("Short term with trigram index, using substring match")

            total = count_search(session, plan)
            questions = execute_search(
                session, plan, limit=page_size, offset=offset, sort=sort
            )

            if not questions:
                if isinstance(plan.query, EmptyQuery):
                    info("No questions yet")
                else:
                    info(f"No results for: {query_string}")
                raise SystemExit(EXIT_NO_RESULTS)

            if output_format == "json":
                _print_json(questions, plan, total, page, page_size, sort)
            else:
                _print_table(questions, query_string, total, page, page_size)

    except DatabaseError as e:
        error(str(e))
        raise SystemExit(EXIT_DB_ERROR)

    raise SystemExit(EXIT_SUCCESS)


def _print_explain(plan: SearchPlan, output_format: str) -> None:
    """Print the strategy chosen for a query."""
    data = plan_to_dict(plan)
    if output_format == "json":
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    console.print(f"[query.kind]{plan.kind}[/query.kind]", highlight=False)
    if plan.auto_fallback:
        console.print("auto-fallback: short term with trigram tokenizer", highlight=False)
    if "body" in data:
        console.print(f"body:   {data['body']}", markup=False, highlight=False)
    if "match" in data:
        console.print(f"match:  {data['match']}", markup=False, highlight=False)
    if "where" in data:
        console.print(f"where:  {data['where']}", markup=False, highlight=False)
        params = json.dumps(data["params"], ensure_ascii=False)
        console.print(f"params: {params}", markup=False, highlight=False)


def _print_table(
    questions: list[Question],
    query_string: str,
    total: int,
    page: int,
    page_size: int,
) -> None:
    """Print results as a Rich table."""
    first = (page - 1) * page_size + 1
    last = first + len(questions) - 1
    info(f"Search: {query_string} ({first}-{last} of {total})")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right", no_wrap=True)
    table.add_column("Question", style="question.body")
    table.add_column("Updated", no_wrap=True)

    for q in questions:
        table.add_row(str(q.id), _clip_text(q.body, BODY_CLIP), q.updated_at)

    console.print(table)


def _print_json(
    questions: list[Question],
    plan: SearchPlan,
    total: int,
    page: int,
    page_size: int,
    sort: str,
) -> None:
    """Print results as a JSON object with paging info."""
    results = {
        "query": plan_to_dict(plan),
        "total": total,
        "page": page,
        "page_size": page_size,
        "sort": sort,
        "items": [
            {
                "id": q.id,
                "body": q.body,
                "explanation": q.explanation,
                "created_at": q.created_at,
                "updated_at": q.updated_at,
            }
            for q in questions
        ],
    }
    click.echo(json.dumps(results, indent=2, ensure_ascii=False))
