"""koko version -- display build metadata."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from koko.version import BuildInfo, load_build_info

console = Console()


def version_command() -> None:
    """Show the version, commit, and build details of this binary."""
    render_build_info(load_build_info())


def render_build_info(info: BuildInfo) -> None:
    table = Table(title="koko", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in info.as_rows():
        table.add_row(name, value)
    console.print(table)
