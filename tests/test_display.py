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
# zpool-summary/tests/test_display.py

"""Tests for rich display functionality."""

from io import StringIO

from rich.console import Console

from zpool_summary import Decision
from zpool_summary.display import (
    create_pools_table,
    display_pools,
    format_free_pct,
    get_pool_status,
)
from zpool_summary.summary import GIB


def _decision(name="tank", avail=50 * GIB, used=50 * GIB, has_errors=False,
              is_low=False, is_bootpool=False, include=True) -> Decision:
    return Decision(
        name=name,
        avail=avail,
        used=used,
        has_errors=has_errors,
        is_low=is_low,
        is_bootpool=is_bootpool,
        include=include,
    )


class TestDisplayHelpers:
    """Test display helper functions."""

    def test_get_pool_status(self):
        """Test status label and color logic."""
        assert get_pool_status(_decision()) == ("OK", "green")
        assert get_pool_status(_decision(is_low=True)) == ("low", "yellow")

        # Errors take precedence over low space
        assert get_pool_status(
            _decision(has_errors=True, is_low=True)
        ) == ("ERRORS", "red")

        # Healthy boot pool
        assert get_pool_status(
            _decision(is_bootpool=True, include=False)
        ) == ("hidden", "dim")

    def test_format_free_pct(self):
        text = format_free_pct(_decision(avail=25 * GIB, used=75 * GIB))
        assert text.plain == "25.0%"
        assert text.style == "green"

        text = format_free_pct(_decision(avail=GIB, used=99 * GIB, is_low=True))
        assert text.plain == "1.0%"
        assert text.style == "yellow"

        # Empty pool
        text = format_free_pct(_decision(avail=0, used=0))
        assert text.plain == "N/A"


class TestTables:
    """Test table creation."""

    def test_pools_table(self):
        decisions = [
            _decision("zroot"),
            _decision("tank", has_errors=True),
            _decision("bootpool", avail=GIB, used=GIB, is_bootpool=True,
                      include=False),
        ]

        table = create_pools_table(decisions)
        assert table.title == "Pool Summary"
        assert len(table.columns) == 6
        assert table.row_count == 3

        # Render to verify
        console = Console(file=StringIO(), width=120)
        console.print(table)
        output = console.file.getvalue()
        assert "zroot" in output
        assert "100G" in output
        assert "ERRORS" in output
        assert "hidden" in output

    def test_full_display(self):
        console = Console(file=StringIO(), force_terminal=True)
        display_pools([_decision()], console)
        output = console.file.getvalue()

        assert "Pool Summary" in output
        assert "Legend:" in output

    def test_display_without_pools(self):
        console = Console(file=StringIO())
        display_pools([], console)
        assert "No pools found" in console.file.getvalue()
