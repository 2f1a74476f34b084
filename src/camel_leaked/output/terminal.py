"""Rich terminal reporter."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from camel_leaked.findings.models import ScanResult

CONTEXT_LIMIT = 100


def truncate(text: str, limit: int = CONTEXT_LIMIT) -> str:
    """Shorten *text* to *limit* characters, marking the cut with ``...``."""
    return text if len(text) <= limit else text[:limit] + "..."


def render(
    result: ScanResult,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print scan results to the terminal using Rich."""
    console = console or Console()

    if not result.findings:
        console.print()
        console.print("[bold green]✅ No secrets detected in the diff[/bold green]")
        if show_summary:
            _print_summary(console, result)
        return

    console.print()
    console.print("[bold red]🚨 SECRET LEAK DETECTED! 🚨[/bold red]")
    table = Table(
        title="Potential secrets",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Rule", style="cyan", min_width=16)
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Content", min_width=15)
    table.add_column("Context", style="dim")

    for finding in result.findings:
        table.add_row(
            finding.rule_name,
            finding.file or "-",
            str(finding.line_number) if finding.line_number is not None else "-",
            Text(finding.content),
            Text(truncate(finding.context.strip())),
        )

    console.print(table)

    if show_summary:
        _print_summary(console, result)

    console.print()
    console.print(
        "[bold red]❌ Remove these secrets, or add '# camel-leaked-ignore' "
        "to lines that are false positives.[/bold red]"
    )


def _print_summary(console: Console, result: ScanResult) -> None:
    console.print()
    console.print(f"[dim]Files scanned:[/dim]  {result.files_scanned}")
    console.print(f"[dim]Findings:[/dim]       {result.total_findings}")
    console.print(f"[dim]Duration:[/dim]       {result.scan_duration_ms:.0f}ms")
