import json
from dataclasses import dataclass

import typer
from rich import print, print_json
from rich.markup import escape

from ..api.auth import select_auth_token
from ..api.errors import FetchError
from ..api.pagination import PaginatedFetcher, Record
from ..api.retry import fetch_all_with_retry
from ..config import FetchSettings
from ..logging_config import configure_logging
from ..views import (
    COURSES_PATH,
    TODO_PATH,
    assignment_lines,
    assignments_path,
    course_lines,
    todo_lines,
)

app = typer.Typer(add_completion=False, pretty_exceptions_show_locals=False)


@dataclass
class _State:
    settings: FetchSettings
    token_file: str


@app.callback()
def main(
    ctx: typer.Context,
    token_file: str = typer.Option(
        "token.txt", help="File holding the Canvas API token (CANVAS_TOKEN wins)"
    ),
    base_url: str | None = typer.Option(None, help="Canvas instance base URL"),
    timeout: float | None = typer.Option(None, help="Per-request timeout in seconds"),
    max_pages: int | None = typer.Option(
        None, help="Fail instead of following more than this many pages"
    ),
    retries: int | None = typer.Option(
        None, help="Whole-fetch attempts on connection failures"
    ),
    log_level: str = typer.Option("WARNING", help="Log level for stderr output"),
):
    """Fetch every page of a Canvas API listing."""
    configure_logging(log_level)
    try:
        settings = FetchSettings.from_env(
            base_url=base_url,
            timeout=timeout,
            max_pages=max_pages,
            retries=retries,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    ctx.obj = _State(settings=settings, token_file=token_file)


def _fetch(state: _State, url: str) -> list[Record]:
    settings = state.settings
    try:
        token = select_auth_token(state.token_file)
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if url.startswith("/"):
        url = settings.api_url(url)
    try:
        with PaginatedFetcher(
            timeout=settings.timeout,
            max_pages=settings.max_pages,
            user_agent=settings.user_agent,
        ) as fetcher:
            return fetch_all_with_retry(
                fetcher, url, token, attempts=settings.retries
            )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except FetchError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _print_lines(build, *args) -> None:
    try:
        lines = build(*args)
    except (KeyError, TypeError) as exc:
        typer.secho(
            f"Unexpected record shape, missing field {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1) from exc
    for line in lines:
        print(escape(line))


@app.command()
def fetch(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Absolute URL, or an API path like /api/v1/..."),
    raw: bool = typer.Option(False, help="Print plain JSON without highlighting"),
):
    """Print every record reachable from URL as a JSON array."""
    records = _fetch(ctx.obj, url)
    if raw:
        typer.echo(json.dumps(records, indent=2))
    else:
        print_json(data=records)


@app.command()
def courses(ctx: typer.Context):
    """List active courses."""
    state: _State = ctx.obj
    records = _fetch(state, COURSES_PATH)
    _print_lines(course_lines, records, state.settings.base_url)


@app.command()
def assignments(
    ctx: typer.Context,
    course_id: int = typer.Argument(..., help="Canvas course id"),
):
    """List the assignments of one course with their due dates."""
    state: _State = ctx.obj
    records = _fetch(state, assignments_path(course_id))
    _print_lines(assignment_lines, records, state.settings.base_url, course_id)


@app.command()
def todo(ctx: typer.Context):
    """List the current user's to-do items."""
    records = _fetch(ctx.obj, TODO_PATH)
    _print_lines(todo_lines, records)
