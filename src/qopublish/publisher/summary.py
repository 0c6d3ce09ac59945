"""Console summaries of publish runs, rendered with rich."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qopublish.types import BatchReport, BatchState, FileState

MAX_COL = 150

ya = "[green]+[/green]"
na = "[red]-[/red]"
wa = "[yellow]![/yellow]"
sk = "[blue]~[/blue]"

_MARKS = {
    FileState.MARKDOWN_CONVERTED: ya,
    FileState.SKIPPED: sk,
    FileState.SCRIPT_CONVERTED: wa,
    FileState.PENDING: wa,
    FileState.FAILED: na,
}


def shorten(msg: str, width: int = MAX_COL) -> str:
    msg = " ".join(str(msg).split())
    if len(msg) > width:
        msg = msg[: width - 3] + "..."
    return msg


def print_summary(report: BatchReport, console: Optional[Console] = None):
    """Print a formatted summary of a run report."""
    if console is None:
        console = Console(color_system="standard")

    table = Table(show_header=False, box=None)
    table.add_column("Status")

    counts = report.counts()
    table.add_row(
        f"[bold]Notebooks:[/bold] {len(report.records)} "
        f"({counts[FileState.MARKDOWN_CONVERTED]} converted, "
        f"{counts[FileState.SKIPPED]} skipped, "
        f"{counts[FileState.FAILED]} failed)"
    )
    for rec in sorted(report.records, key=lambda r: r.name):
        line = f"  {_MARKS[rec.state]} {escape(rec.name)} [dim]{rec.state.value}[/dim]"
        if rec.duration:
            line += f" [dim]({rec.duration:.1f}s)[/dim]"
        table.add_row(line)
        if rec.state == FileState.FAILED and rec.error:
            table.add_row(f"     {escape(shorten(rec.error))}")

    if report.published:
        table.add_row("\n[bold]Published to:[/bold]")
        for dest in report.published:
            table.add_row(f"  {ya} {escape(dest)}")

    if report.state == BatchState.DONE:
        title, style = "Publish Summary", "blue"
    else:
        title, style = f"Publish Summary ({report.state.value})", "red"
        if report.error:
            table.add_row(f"\n{na} {escape(shorten(report.error))}")

    console.print(Panel(table, title=title, border_style=style, padding=(1, 2)))


def print_status(
    status: list[tuple[str, bool, bool]], console: Optional[Console] = None
):
    """Print which notebooks already have script and markdown outputs."""
    if console is None:
        console = Console(color_system="standard")

    if not status:
        console.print("No notebooks found")
        return

    table = Table(title="Notebooks")
    table.add_column("Notebook")
    table.add_column("Script", justify="center")
    table.add_column("Markdown", justify="center")
    table.add_column("Status")
    for name, has_script, has_markdown in status:
        table.add_row(
            escape(name),
            ya if has_script else na,
            ya if has_markdown else na,
            "converted" if has_script and has_markdown else "pending",
        )
    console.print(table)
