# Rich console output: scan summary, failing findings grouped by severity, then passed checks.

from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vibecheck.findings.models import Finding, Severity
from vibecheck.reporting.summary import SEVERITY_HEADINGS, group_by_severity, split_results

# rich style per severity
SEVERITY_STYLE = {
    Severity.CRITICAL: "bold white on red",
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: Severity) -> str:
    return SEVERITY_STYLE.get(severity, DEFAULT_SEVERITY_STYLE)


def print_findings(
    findings: Sequence[Finding],
    show_passed: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Print scan results using Rich.

    Shows a header panel and tally, failing findings grouped by severity
    (critical first) with location, details, code and recommendation, then
    the passed checks when show_passed is set.
    """
    console = console or Console()
    failed, passed = split_results(findings)

    if not failed:
        console.print(
            Panel(
                f"[green]All checks passed![/green] {len(passed)} checks performed.",
                title="VibeCheck Scan Results",
                border_style="green",
                box=box.ROUNDED,
            )
        )
    else:
        console.print(
            Panel(
                f"[yellow]Found {len(failed)} potential issue{'s' if len(failed) != 1 else ''}.[/yellow]",
                title="VibeCheck Scan Results",
                border_style="red",
                box=box.ROUNDED,
            )
        )

    for severity, group in group_by_severity(findings):
        if not group:
            continue
        console.print()
        console.print(Text(f"{SEVERITY_HEADINGS[severity]} ({len(group)})", style=_severity_style(severity)))
        for f in group:
            _print_issue(f, console)

    if show_passed and passed:
        console.print()
        table = Table(
            title=f"Passed Checks ({len(passed)})",
            show_header=True,
            header_style="bold green",
            box=box.SIMPLE,
            padding=(0, 1),
        )
        table.add_column("Check", style="white")
        table.add_column("Details", style="dim")
        for f in passed:
            table.add_row(Text(f"✓ {f.name}", style="green"), Text(f.details))
        console.print(table)

    _print_summary(findings, console)


def _print_issue(finding: Finding, console: Console) -> None:
    title = Text(f"✗ {finding.name}", style="red")
    if finding.location:
        title.append(f" ({finding.display_location})", style="cyan")
    console.print(title)
    if finding.details:
        console.print(f"  {finding.details}", markup=False, highlight=False)
    if finding.location and finding.location.code:
        console.print(Text(f"  |-- {finding.location.code}", style="dim"))
    if finding.recommendation:
        console.print(Text(f"  Recommendation: {finding.recommendation}", style="green"))
    console.print()


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    """Pass/fail tally panel."""
    failed, passed = split_results(findings)
    summary_parts = [f"[bold]{len(findings)} check result{'s' if len(findings) != 1 else ''}[/bold]"]
    for severity, group in group_by_severity(findings):
        if group:
            summary_parts.append(f"[{_severity_style(severity)}]{len(group)} {severity.value}[/]")
    summary_parts.append(f"[green]{len(passed)} passed[/green]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if failed else "green",
            box=box.ROUNDED,
        )
    )
