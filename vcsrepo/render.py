"""
Rendering functions for vcsrepo output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Dict, Any, Optional

console = Console()


def render_table(headers: List[str], rows: List[List[str]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(val) for val in row])

    console.print(table)


def render_packages_table(packages: List[Dict[str, Any]], title: Optional[str] = None) -> None:
    """
    Render scanned package records as a pretty table.

    Args:
        packages: List of package record dictionaries
        title: Optional table title (usually the repository URL)
    """
    if not packages:
        console.print("[yellow]No packages found.[/yellow]")
        return

    table = Table(
        title=title or "Packages",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Name", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Normalized", style="dim")
    table.add_column("Source", style="blue")
    table.add_column("Reference", style="yellow")

    for package in packages:
        source = package.get('source') or {}
        reference = str(source.get('reference', ''))
        # commit hashes are long, the first 12 chars are enough to tell them apart
        if len(reference) > 12 and ' ' not in reference and '/' not in reference:
            reference = reference[:12]

        version = package.get('version', '')
        if str(version).startswith('dev-') or str(version).endswith('-dev'):
            version = f"[yellow]{version}[/yellow]"

        table.add_row(
            package.get('name') or '',
            version,
            package.get('version_normalized', ''),
            source.get('type', ''),
            reference
        )

    console.print(table)


def render_skipped_table(skipped: List[Dict[str, Any]]) -> None:
    """Render skipped tags and branches with the reason each was skipped."""
    if not skipped:
        return

    table = Table(
        title="Skipped",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Type", style="cyan")
    table.add_column("Name", style="yellow")
    table.add_column("Reason", style="red")
    table.add_column("Message", style="dim")

    for item in skipped:
        table.add_row(
            item.get('type', ''),
            item.get('name', ''),
            item.get('reason') or '',
            item.get('message') or ''
        )

    console.print(table)


def print_scan_summary(summary: Dict[str, Any]) -> None:
    """Print summary statistics for a repository scan."""
    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Repository: {summary.get('url', 'N/A')}")
    if summary.get('package_name'):
        console.print(f"  Package: {summary['package_name']}")
    console.print(f"  Tags and branches: {summary.get('total', 0)}")
    console.print(f"  [green]Imported: {summary.get('imported', 0)}[/green]")
    if summary.get('skipped'):
        console.print(f"  [yellow]Skipped: {summary['skipped']}[/yellow]")
