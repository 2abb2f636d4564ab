"""Command-line interface for readingtracker.

Built with Typer for commands and Rich for output.
"""

from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db import get_db
from .db.schemas import ReadingSessionCreate, SessionType
from .errors import SessionDateError
from .logger import setup_logger

# Create the main app
app = typer.Typer(
    name="readingtracker",
    help="Track reading sessions, streaks and monthly reports.",
    no_args_is_help=True,
)

session_app = typer.Typer(help="Log and list reading sessions.")
app.add_typer(session_app, name="session")

streak_app = typer.Typer(help="Show reading streaks.")
app.add_typer(streak_app, name="streak")

report_app = typer.Typer(help="Reading reports.")
app.add_typer(report_app, name="report")

# Rich console for pretty output
console = Console()


@app.callback()
def main_callback() -> None:
    """Configure logging before any command runs."""
    config = get_config()
    setup_logger(level=config.log_level, log_file=config.log_file)


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing Z and naive values mean UTC."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_instant(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M UTC")


# ============================================================================
# Session Commands
# ============================================================================


@session_app.command("log")
def session_log(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
    minutes: int = typer.Option(..., "--minutes", "-m", help="Minutes read"),
    pages: int = typer.Option(0, "--pages", "-p", help="Pages read"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Start (ISO-8601, default now)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="End (ISO-8601)"),
    book: Optional[str] = typer.Option(None, "--book", "-b", help="Book ID"),
    session_type: SessionType = typer.Option(SessionType.FREE, "--type", "-t", help="Session type"),
) -> None:
    """Log a reading session and update the streak."""
    from pydantic import ValidationError

    from .reading import SessionManager

    try:
        started_at = parse_instant(start) if start else None
        ended_at = parse_instant(end) if end else None
    except ValueError:
        print_error("Invalid date format. Use ISO-8601, e.g. 2024-05-01T20:30:00Z")
        raise typer.Exit(1)

    try:
        payload = ReadingSessionCreate(
            user_id=user,
            book_id=book,
            session_type=session_type,
            duration_minutes=minutes,
            pages_read=pages,
            started_at=started_at,
            ended_at=ended_at,
        )
    except ValidationError as e:
        print_error(f"Invalid session: {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    manager = SessionManager(get_db())
    try:
        record, streak = manager.log_session(payload)
    except SessionDateError as e:
        print_error(str(e))
        raise typer.Exit(1)

    content = (
        f"Logged: {record.duration_minutes} min, {record.pages_read} pages\n"
        f"Started: {format_instant(record.started_at)}\n\n"
        f"Current Streak: {streak.current_streak} days\n"
        f"Longest Streak: {streak.longest_streak} days"
    )
    console.print(Panel(content, title="[green]Session Logged[/green]"))


@session_app.command("list")
def session_list(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
    limit: int = typer.Option(10, "--limit", "-n", help="Sessions to show"),
    offset: int = typer.Option(0, "--offset", help="Sessions to skip"),
) -> None:
    """List reading sessions, most recent first."""
    from .reading import SessionManager

    manager = SessionManager(get_db())
    try:
        sessions = manager.list_sessions(user, limit=limit, offset=offset)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not sessions:
        print_info("No reading sessions yet.")
        return

    table = Table(title="Reading Sessions", show_header=True, header_style="bold magenta")
    table.add_column("Started", style="cyan")
    table.add_column("Ended")
    table.add_column("Type", style="yellow")
    table.add_column("Minutes", justify="right")
    table.add_column("Pages", justify="right")

    for record in sessions:
        table.add_row(
            format_instant(record.started_at),
            format_instant(record.ended_at),
            record.session_type,
            str(record.duration_minutes),
            str(record.pages_read),
        )

    console.print(table)


# ============================================================================
# Streak Commands
# ============================================================================


@streak_app.command("show")
def streak_show(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
) -> None:
    """Show current and longest streak."""
    from .streaks import StreakManager

    streak = StreakManager(get_db()).get_streak(user)

    if streak.longest_streak == 0:
        print_info("No reading activity yet. Start your streak!")
        return

    content = (
        f"[bold]Current Streak:[/bold] {streak.current_streak} days\n"
        f"[bold]Longest Streak:[/bold] {streak.longest_streak} days\n"
        f"Last read: {format_instant(streak.last_read_date)}"
    )
    console.print(Panel(content, title="[blue]Streak Status[/blue]"))


# ============================================================================
# Report Commands
# ============================================================================


@report_app.command("monthly")
def report_monthly(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Year"),
    month: Optional[int] = typer.Option(None, "--month", "-m", help="Month (1-12)"),
) -> None:
    """Show per-day reading for a month."""
    from calendar import month_name

    from .analytics import ReadingAnalytics

    today = datetime.now(timezone.utc).date()
    if year is None:
        year = today.year
    if month is None:
        month = today.month

    try:
        report = ReadingAnalytics(get_db()).monthly_report(user, year, month)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"\n[bold]{month_name[month]} {year}[/bold]")
    console.print(
        f"Sessions: {report.session_count} | "
        f"Minutes: {report.total_minutes_read} | Pages: {report.total_pages_read}\n"
    )

    if not report.days:
        print_info("No reading this month.")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Minutes", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("Sessions", justify="right")

    for day in report.days:
        table.add_row(day.date, str(day.minutes_read), str(day.pages_read), str(day.session_count))

    console.print(table)


@report_app.command("summary")
def report_summary(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
) -> None:
    """Show all-time reading totals."""
    from .analytics import ReadingAnalytics

    summary = ReadingAnalytics(get_db()).summary(user)
    console.print(
        Panel(
            f"Sessions: {summary.session_count}\n"
            f"Minutes: {summary.total_minutes_read}\n"
            f"Pages: {summary.total_pages_read}",
            title="[blue]Reading Summary[/blue]",
        )
    )


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"readingtracker version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
