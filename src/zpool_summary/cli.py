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
# zpool-summary/src/zpool_summary/cli.py

"""Command-line interface for the ZFS pool status line."""

import json
import sys

import typer
from loguru import logger
from rich.console import Console

from .display import display_pools
from .parser import (
    LIST_COMMAND,
    STATUS_COMMAND,
    command_output,
    ssh_exec_factory,
)
from .summary import (
    FALLBACK_LINE,
    GIB,
    TIB,
    Thresholds,
    build_line,
    summarize_pools,
)

app = typer.Typer()


@app.command()
def summary(
    ssh_host: str | None = typer.Option(
        None,
        "--ssh-host",
        help="Summarize pools of a remote host over SSH"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output per-pool decisions as JSON"
    ),
    details: bool = typer.Option(
        False,
        "--details",
        help="Show a table of every pool instead of the status line"
    ),
    bootpool_gib: int = typer.Option(
        5,
        "--bootpool-gib",
        envvar="ZPOOL_SUMMARY_BOOTPOOL_GIB",
        help="Pools smaller than this are hidden while healthy"
    ),
    large_pool_tib: int = typer.Option(
        1,
        "--large-pool-tib",
        envvar="ZPOOL_SUMMARY_LARGE_POOL_TIB",
        help="Pools this large are low below 5% free instead of 10%"
    ),
    reverse: bool = typer.Option(
        True,
        "--reverse/--no-reverse",
        envvar="ZPOOL_SUMMARY_REVERSE",
        help="List pools in reverse name order"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging output on stderr"
    ),
):
    """Print a one-line summary of ZFS pool space and errors.

    Always exits successfully so status bars never act on the exit code.
    """
    # Configure logging
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")

    try:
        thresholds = Thresholds(
            large_pool_bytes=large_pool_tib * TIB,
            bootpool_max_bytes=bootpool_gib * GIB,
            reverse_order=reverse,
        )

        # Create SSH command function if host provided
        ssh_command = None
        if ssh_host:
            ssh_command = ssh_exec_factory(ssh_host)
            logger.info(f"Using SSH host {ssh_host}")

        decisions = summarize_pools(
            lambda: command_output(LIST_COMMAND, ssh_command),
            lambda: command_output(STATUS_COMMAND, ssh_command),
            thresholds,
        )
    except Exception as e:
        logger.error(f"Summary failed: {e}")
        if json_output:
            typer.echo("[]")
        else:
            typer.echo(FALLBACK_LINE, nl=False)
        return

    if json_output:
        output = [decision.to_dict() for decision in decisions]
        typer.echo(json.dumps(output, indent=2))
    elif details:
        display_pools(decisions, Console())
    else:
        typer.echo(build_line(decisions), nl=False)


if __name__ == "__main__":
    app()
