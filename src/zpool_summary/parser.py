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
# zpool-summary/src/zpool_summary/parser.py

import re
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from loguru import logger

LIST_COMMAND: Final[list[str]] = [
    "zfs", "get", "-d", "0", "-Hp", "-o", "name,property,value",
    "available,used",
]
STATUS_COMMAND: Final[list[str]] = ["zpool", "status"]

PROPERTY_AVAILABLE: Final[str] = "available"
PROPERTY_USED: Final[str] = "used"
MAX_VALUE: Final[int] = 2**64 - 1

# `man zpool-create`: must begin with a letter, then alphanumerics and "_-: ."
POOL_NAME_RE: Final = re.compile(r"[A-Za-z][A-Za-z0-9_\-: .]*")
STATUS_PADDING_RE: Final = re.compile(r"(^|[ \n]) +")

HEALTHY_DEVICE_SUFFIX: Final[str] = "ONLINE 0 0 0"


@dataclass
class PoolMeta:
    """Capacity of a single pool, in bytes."""
    avail: int = 0
    used: int = 0

    @property
    def size(self) -> int:
        return self.avail + self.used

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {'avail': self.avail, 'used': self.used, 'size': self.size}


def is_valid_pool_name(name: str) -> bool:
    """Check a pool name against the zpool naming rules."""
    return POOL_NAME_RE.fullmatch(name) is not None


def _parse_value(value: str) -> int:
    """Parse an unsigned 64-bit byte count, returning 0 when invalid."""
    if not (value.isascii() and value.isdigit()):
        return 0
    number = int(value)
    return number if number <= MAX_VALUE else 0


def parse_list(output: str) -> dict[str, PoolMeta]:
    """Parse `zfs get -Hp -o name,property,value available,used` output.

    Format: name<TAB>property<TAB>value, one record per line, no header.

    Any malformed line discards everything parsed so far and an empty dict
    is returned. Partial capacity data is never returned.
    """
    pools: dict[str, PoolMeta] = {}

    for lineno, line in enumerate(output.split('\n'), start=1):
        if not line:
            continue

        columns = line.split('\t')
        if len(columns) != 3:
            logger.warning(
                f"Discarding pool list: line {lineno} has "
                f"{len(columns)} columns, expected 3"
            )
            return {}

        name, prop, raw_value = (column.strip() for column in columns)
        value = _parse_value(raw_value)

        # Don't propagate garbage if the output format changed
        if not name or not prop or value == 0:
            logger.warning(
                f"Discarding pool list: empty or zero field on line {lineno}: "
                f"{line!r}"
            )
            return {}

        if not is_valid_pool_name(name):
            logger.warning(f"Discarding pool list: invalid pool name {name!r}")
            return {}

        if prop == PROPERTY_AVAILABLE:
            pools.setdefault(name, PoolMeta()).avail = value
        elif prop == PROPERTY_USED:
            pools.setdefault(name, PoolMeta()).used = value
        else:
            logger.warning(f"Discarding pool list: unknown property {prop!r}")
            return {}

    logger.debug(f"Parsed {len(pools)} pools from pool list")
    return dict(sorted(pools.items()))


def normalize_status(output: str) -> str:
    """Strip indentation and collapse column padding to single spaces."""
    return STATUS_PADDING_RE.sub(r"\1", output.replace('\t', ' '))


def parse_status(output: str) -> dict[str, bool]:
    """Parse `zpool status` output into a pool name -> has_errors mapping.

    Only the device table of each pool is inspected. A device row is healthy
    when it ends with "ONLINE 0 0 0"; any other row counts as an error. A
    table without device rows is treated as an error as well.
    """
    statuses: dict[str, bool] = {}
    name = ""

    lines = iter(normalize_status(output).split('\n'))
    for line in lines:
        if line.startswith("pool: "):
            name = line[len("pool: "):]
            continue

        if not line.startswith("NAME STATE"):
            continue

        error_count = 0
        healthy_count = 0

        # Device rows run until the next blank line
        for row in lines:
            if not row:
                break
            if row.endswith(HEALTHY_DEVICE_SUFFIX):
                healthy_count += 1
            else:
                error_count += 1

        if name:
            has_errors = error_count > 0 or healthy_count == 0
            # The first block for a pool wins
            statuses.setdefault(name, has_errors)
            logger.debug(
                f"Pool {name}: {healthy_count} healthy, "
                f"{error_count} other device rows"
            )
        else:
            logger.debug("Device table without a pool name, skipping")

        name = ""

    return statuses


def command_output(
    command: list[str], ssh_command: Callable | None = None
) -> str:
    """Run a command and return its standard output.

    Args:
        command: Command and arguments to run
        ssh_command: Optional function to execute commands via SSH
                    Should accept command string and return output string

    Returns:
        Standard output of the command, or "" if it could not be started.
        Standard error is always discarded.
    """
    if ssh_command:
        return ssh_command(" ".join(command))

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False
        )
    except OSError as e:
        logger.warning(f"Could not run {command[0]}: {e}")
        return ""

    if result.returncode != 0:
        logger.debug(f"{' '.join(command)} exited with {result.returncode}")
    return result.stdout


def ssh_exec_factory(host: str, ssh_options: list[str] | None = None):
    """Create an SSH command executor for a specific host.

    Args:
        host: SSH hostname
        ssh_options: Additional SSH options (e.g., ["-i", "/path/to/key"])
    """
    ssh_options = ssh_options or []

    def ssh_exec(command: str) -> str:
        ssh_cmd = ["ssh"] + ssh_options + [host, command]
        result = subprocess.run(
            ssh_cmd,
            capture_output=True,
            text=True,
            check=False
        )
        return result.stdout
    return ssh_exec


def list_pools(ssh_command: Callable | None = None) -> dict[str, PoolMeta]:
    """Fetch and parse pool capacities."""
    return parse_list(command_output(LIST_COMMAND, ssh_command))


def stat_pools(ssh_command: Callable | None = None) -> dict[str, bool]:
    """Fetch and parse pool error states."""
    return parse_status(command_output(STATUS_COMMAND, ssh_command))
