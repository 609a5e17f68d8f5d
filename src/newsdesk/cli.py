"""CLI commands for newsdesk.

Provides command-line access to the article repository using Typer:
- newsdesk init-db: Create the database tables
- newsdesk get: Show one article (served from the cache when warm)
- newsdesk list: List a page of articles
- newsdesk search: Search articles by title
- newsdesk delete: Delete an article and purge its cache entry
- newsdesk health: Check database and Redis connectivity

Usage:
    newsdesk --help
    newsdesk get 1b4e28ba-2fa1-11d2-883f-0016d3cca427
    newsdesk list --page 2 --size 20
    newsdesk search launch --format json
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import UUID

import orjson
import typer
from rich.console import Console
from rich.table import Table

from newsdesk.config import settings
from newsdesk.core.errors import NotFoundError, StoreError
from newsdesk.core.model import ArticleList
from newsdesk.core.pagination import PaginationQuery
from newsdesk.persistence.db import health_check as db_health_check
from newsdesk.runtime import Resources, open_resources

T = TypeVar("T")

app = typer.Typer(
    name="newsdesk",
    help="newsdesk: cached article data access",
    no_args_is_help=True,
)

console = Console()


def _run(operation: Callable[[Resources], Awaitable[T]], *, create_schema: bool = False) -> T:
    """Open resources, run one repository operation and map errors to exit codes."""

    async def runner() -> T:
        async with open_resources(create_schema=create_schema) as resources:
            return await operation(resources)

    try:
        return asyncio.run(runner())
    except NotFoundError as exc:
        console.print(f"[red]Not found:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    except StoreError as exc:
        console.print(f"[red]Store error:[/red] {exc}")
        raise typer.Exit(code=2) from exc


def _page_query(page: str | None, size: str | None) -> PaginationQuery:
    try:
        return PaginationQuery.from_params(
            page,
            size,
            default_size=settings.default_page_size,
            max_size=settings.max_page_size,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _print_page(result: ArticleList, output_format: str) -> None:
    if output_format == "json":
        console.print_json(orjson.dumps(result.model_dump(mode="json")).decode())
        return

    table = Table(title=f"Page {result.page}/{result.total_pages} ({result.total_count} total)")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Created")
    for article in result.items:
        table.add_row(
            str(article.id),
            article.title,
            article.category or "",
            article.created_at.isoformat(),
        )
    console.print(table)
    if result.has_more:
        console.print(f"[dim]More results: --page {result.page + 1}[/dim]")


@app.callback()
def callback() -> None:
    """newsdesk: cached article data access."""
    pass


@app.command("init-db")
def init_db_command() -> None:
    """Create the authors and articles tables if they do not exist."""

    async def noop(resources: Resources) -> None:
        return None

    _run(noop, create_schema=True)
    console.print("[green]Database initialized[/green]")


@app.command()
def get(
    article_id: UUID = typer.Argument(..., help="Article id"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text, json"),
) -> None:
    """Show one article with its author."""

    async def operation(resources: Resources):
        return await resources.repository.get_by_id(article_id)

    article = _run(operation)
    if output_format == "json":
        console.print_json(article.to_bytes().decode())
        return
    console.print(f"[bold]{article.title}[/bold]  [dim]by {article.author}[/dim]")
    if article.category:
        console.print(f"Category: {article.category}")
    console.print(article.content)


@app.command("list")
def list_articles(
    page: str | None = typer.Option(None, "--page", "-p", help="1-based page number"),
    size: str | None = typer.Option(None, "--size", "-s", help="Page size"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text, json"),
) -> None:
    """List a page of articles ordered by creation time."""
    query = _page_query(page, size)

    async def operation(resources: Resources) -> ArticleList:
        return await resources.repository.list_page(query)

    _print_page(_run(operation), output_format)


@app.command()
def search(
    title: str = typer.Argument(..., help="Case-insensitive title substring"),
    page: str | None = typer.Option(None, "--page", "-p", help="1-based page number"),
    size: str | None = typer.Option(None, "--size", "-s", help="Page size"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text, json"),
) -> None:
    """Search articles by title."""
    query = _page_query(page, size)

    async def operation(resources: Resources) -> ArticleList:
        return await resources.repository.search_by_title(title, query)

    _print_page(_run(operation), output_format)


@app.command()
def delete(
    article_id: UUID = typer.Argument(..., help="Article id"),
) -> None:
    """Delete an article and purge its cache entry."""

    async def operation(resources: Resources) -> None:
        await resources.repository.delete(article_id)

    _run(operation)
    console.print(f"[green]Deleted[/green] {article_id}")


@app.command()
def health() -> None:
    """Check database and Redis connectivity."""

    async def operation(resources: Resources) -> tuple[bool, bool]:
        return await db_health_check(resources.engine), await resources.cache.health_check()

    db_ok, cache_ok = _run(operation)
    console.print(f"database: {'[green]ok[/green]' if db_ok else '[red]down[/red]'}")
    console.print(f"redis:    {'[green]ok[/green]' if cache_ok else '[red]down[/red]'}")
    if not db_ok:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
