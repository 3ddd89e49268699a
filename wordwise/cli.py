"""
wordwise: terminal interface.

Commands:
- wordwise init-db   - Create tables
- wordwise seed      - Load the starter vocabulary
- wordwise queue     - Show words due for a learner
- wordwise answer    - Record an attempt
- wordwise progress  - Show a learner's progress
- wordwise history   - Show a learner's attempt log
- wordwise stats     - Teacher dashboard numbers
- wordwise serve     - Run the HTTP API
"""
from __future__ import annotations

import os
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from wordwise.bootstrap import Services, build_services
from wordwise.config import Settings, get_settings
from wordwise.core.errors import StorageError, WordwiseError
from wordwise.core.log import configure_logging

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="wordwise",
    help="wordwise: spaced-repetition vocabulary scheduler",
    no_args_is_help=True,
)
console = Console()

LEVEL_STYLES = {1: "red", 2: "yellow", 3: "cyan", 4: "blue", 5: "bold green"}


def _styled_level(level: int) -> str:
    color = LEVEL_STYLES.get(level, "white")
    return f"[{color}]{level}[/{color}]"


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


@app.callback()
def main_callback(
    ctx: typer.Context,
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Override WORDWISE_DATABASE_URL"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})
    configure_logging(settings, level="DEBUG" if verbose else "WARNING")
    ctx.obj = {"settings": settings}


def _services(ctx: typer.Context) -> Services:
    if "services" not in ctx.obj:
        try:
            ctx.obj["services"] = build_services(ctx.obj["settings"])
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot open database: {e}") from e
        ctx.call_on_close(ctx.obj["services"].close)
    return ctx.obj["services"]


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


@app.command("init-db")
def init_db(ctx: typer.Context) -> None:
    """Create database tables."""
    try:
        _services(ctx)
    except WordwiseError as e:
        _fail(e)
    console.print("[green]✓[/green] Database ready")


@app.command()
def seed(ctx: typer.Context) -> None:
    """Load the starter vocabulary into an empty catalog."""
    try:
        added = _services(ctx).catalog.seed_defaults()
    except WordwiseError as e:
        _fail(e)
    if added:
        console.print(f"[green]✓[/green] Seeded {added} words")
    else:
        console.print("[dim]Catalog already has words; nothing seeded[/dim]")


@app.command()
def queue(ctx: typer.Context, user_id: str = typer.Argument(..., help="Learner id")) -> None:
    """Show words due for review."""
    try:
        services = _services(ctx)
        entries = services.progress.get_review_queue(user_id)
        words = {w.id: w for w in services.catalog.list_words()}
    except WordwiseError as e:
        _fail(e)

    if not entries:
        console.print("[green]Nothing due. Come back later.[/green]")
        return

    table = Table(title=f"Review queue for {user_id}")
    table.add_column("ID", justify="right")
    table.add_column("Term")
    table.add_column("Status")
    table.add_column("Level", justify="center")
    table.add_column("Next review")

    for item, progress in entries:
        word = words.get(item.id)
        status = "[green]new[/green]" if progress is None else "[yellow]due[/yellow]"
        table.add_row(
            str(item.id),
            word.term if word else "?",
            status,
            _styled_level(progress.level) if progress else "-",
            _fmt_date(progress.next_review_date) if progress else "-",
        )
    console.print(table)


@app.command()
def answer(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="Learner id"),
    item_id: int = typer.Argument(..., help="Word id"),
    correct: bool = typer.Option(..., "--correct/--wrong", help="Was the answer right?"),
    confidence: int = typer.Option(..., "--confidence", "-c", help="Self-rated confidence 0-5"),
    question_type: str = typer.Option("recall", "--type", "-t", help="Question type"),
    seconds: Optional[int] = typer.Option(None, "--seconds", "-s", help="Response time"),
) -> None:
    """Record an attempt and show the new schedule."""
    try:
        record = _services(ctx).progress.record_attempt(
            user_id=user_id,
            item_id=item_id,
            question_type=question_type,
            is_correct=correct,
            confidence=confidence,
            response_time_sec=seconds,
        )
    except WordwiseError as e:
        _fail(e)

    icon = "[green]✓[/green]" if correct else "[red]✗[/red]"
    console.print(
        f"{icon} word {item_id}: level {_styled_level(record.level)}, "
        f"EF {record.easiness_factor:.2f}, streak {record.consecutive_correct}, "
        f"next review {_fmt_date(record.next_review_date)}"
    )


@app.command()
def progress(ctx: typer.Context, user_id: str = typer.Argument(..., help="Learner id")) -> None:
    """Show every word the learner has attempted."""
    try:
        services = _services(ctx)
        rows = services.progress.get_progress(user_id)
        words = {w.id: w for w in services.catalog.list_words()}
    except WordwiseError as e:
        _fail(e)

    table = Table(title=f"Progress for {user_id}")
    table.add_column("ID", justify="right")
    table.add_column("Term")
    table.add_column("Level", justify="center")
    table.add_column("Correct", justify="right")
    table.add_column("EF", justify="right")
    table.add_column("Next review")

    for item, record in rows:
        word = words.get(item.id)
        table.add_row(
            str(item.id),
            word.term if word else "?",
            _styled_level(record.level),
            f"{record.total_correct}/{record.total_attempts}",
            f"{record.easiness_factor:.2f}",
            _fmt_date(record.next_review_date),
        )
    console.print(table)


@app.command()
def history(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="Learner id"),
    item_id: Optional[int] = typer.Option(None, "--item", "-i", help="Only this word"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of attempts"),
) -> None:
    """Show the learner's attempt log, newest first."""
    try:
        logs = _services(ctx).progress.get_history(user_id, item_id=item_id, limit=limit)
    except WordwiseError as e:
        _fail(e)

    table = Table(title=f"Attempts by {user_id}")
    table.add_column("When")
    table.add_column("Word", justify="right")
    table.add_column("Type")
    table.add_column("Result")
    table.add_column("Confidence", justify="center")
    table.add_column("Level before", justify="center")
    for entry in logs:
        table.add_row(
            _fmt_date(entry.attempt_date),
            str(entry.item_id),
            entry.question_type,
            "[green]correct[/green]" if entry.is_correct else "[red]wrong[/red]",
            str(entry.confidence),
            _styled_level(entry.level_at_attempt),
        )
    console.print(table)


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show system and per-student statistics."""
    try:
        services = _services(ctx)
        system = services.stats.system_stats()
        students = services.stats.student_stats()
    except WordwiseError as e:
        _fail(e)

    summary = Table(title="System")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Words", str(system.total_words))
    summary.add_row("Attempts", str(system.total_attempts))
    summary.add_row("Mastered", str(system.mastered_count))
    summary.add_row("Learning", str(system.learning_count))
    for level, count in sorted(system.level_counts.items()):
        summary.add_row(f"Level {level}", str(count))
    console.print(summary)

    table = Table(title="Students")
    table.add_column("User")
    table.add_column("Mastered", justify="right")
    table.add_column("Learning", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Accuracy", justify="right")
    for s in students:
        table.add_row(
            s.user_id,
            str(s.mastered_count),
            str(s.learning_count),
            str(s.total_attempts),
            f"{s.accuracy:.1f}%",
        )
    console.print(table)


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Bind host"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings: Settings = ctx.obj["settings"]
    # The app factory reads settings from the environment
    os.environ["WORDWISE_DATABASE_URL"] = settings.database_url
    get_settings.cache_clear()
    configure_logging(settings)
    logger.info(f"Serving on {host or settings.api_host}:{port or settings.api_port}")
    uvicorn.run(
        "wordwise.api.main:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
