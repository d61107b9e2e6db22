# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# Copyright (C) 2025 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# zpool-summary/src/zpool_summary/display.py

"""Rich tabular display for pool summaries."""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .summary import Decision, format_byte_size


def get_pool_status(decision: Decision) -> tuple[str, str]:
    """Get status label and color for a pool."""
    if decision.has_errors:
        return "ERRORS", "red"
    elif decision.is_low:
        return "low", "yellow"
    elif not decision.include:
        return "hidden", "dim"
    else:
        return "OK", "green"


def format_free_pct(decision: Decision) -> Text:
    """Format free space as a percentage of pool size."""
    # Decisions built directly by callers may describe an empty pool
    if decision.size == 0:
        return Text("N/A", style="dim")

    pct = 100 * decision.avail / decision.size
    style = "yellow" if decision.is_low else "green"
    return Text(f"{pct:.1f}%", style=style)


def create_pools_table(decisions: list[Decision]) -> Table:
    """Create detailed pools table."""
    table = Table(title="Pool Summary", show_edge=True)

    table.add_column("Pool", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Avail", justify="right")
    table.add_column("Free", justify="right")
    table.add_column("Boot", justify="center", style="dim")
    table.add_column("Status", justify="center")

    for decision in decisions:
        label, color = get_pool_status(decision)
        row_style = "bold" if color == "red" else None

        table.add_row(
            decision.name,
            format_byte_size(decision.size),
            format_byte_size(decision.avail),
            format_free_pct(decision),
            "yes" if decision.is_bootpool else "-",
            Text(label, style=color),
            style=row_style
        )

    return table


def display_pools(decisions: list[Decision], console: Console | None = None):
    """Display pool decisions using a rich table."""
    if console is None:
        console = Console()

    if not decisions:
        console.print("[dim]No pools found[/dim]")
        return

    console.print(create_pools_table(decisions))

    console.print("\n[dim]Legend:[/dim]")
    console.print("[dim]  Free: available space as share of pool size[/dim]")
    console.print("[dim]  Status: OK, low (little free space), ERRORS, "
                  "hidden (healthy boot pool)[/dim]")
