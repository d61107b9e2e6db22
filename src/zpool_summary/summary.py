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
# zpool-summary/src/zpool_summary/summary.py

"""Pool classification and status line rendering."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from loguru import logger

from .parser import PoolMeta, parse_list, parse_status

KIB: Final[int] = 1024
GIB: Final[int] = KIB**3
TIB: Final[int] = KIB**4

# Heuristics, not protocol: override through Thresholds
LARGE_POOL_BYTES: Final[int] = TIB
LARGE_POOL_DIVISOR: Final[int] = 20  # < 5% free is low
SMALL_POOL_DIVISOR: Final[int] = 10  # < 10% free is low
BOOTPOOL_MAX_BYTES: Final[int] = 5 * GIB

FALLBACK_LINE: Final[str] = "Unknown\n"
ERRORS_SUFFIX: Final[str] = " (ERRORS)"
LOW_SUFFIX: Final[str] = " (low)"

IEC_UNITS: Final[tuple[str, ...]] = ("B", "K", "M", "G", "T", "P", "E")


@dataclass(frozen=True)
class Thresholds:
    """Space heuristics used to classify pools."""
    large_pool_bytes: int = LARGE_POOL_BYTES
    large_pool_divisor: int = LARGE_POOL_DIVISOR
    small_pool_divisor: int = SMALL_POOL_DIVISOR
    bootpool_max_bytes: int = BOOTPOOL_MAX_BYTES
    # Reverse name order so "zroot" is more likely to be listed first
    reverse_order: bool = True

    def __post_init__(self):
        if self.large_pool_divisor <= 0 or self.small_pool_divisor <= 0:
            raise ValueError("Low space divisors must be positive")
        if self.large_pool_bytes <= 0 or self.bootpool_max_bytes < 0:
            raise ValueError(
                f"Invalid pool size thresholds: large={self.large_pool_bytes}, "
                f"bootpool={self.bootpool_max_bytes}"
            )


DEFAULT_THRESHOLDS: Final = Thresholds()


@dataclass(frozen=True)
class Decision:
    """How a single pool is reported."""
    name: str
    avail: int
    used: int
    has_errors: bool
    is_low: bool
    is_bootpool: bool
    include: bool

    @property
    def size(self) -> int:
        return self.avail + self.used

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            'name': self.name,
            'avail': self.avail,
            'used': self.used,
            'size': self.size,
            'has_errors': self.has_errors,
            'is_low': self.is_low,
            'is_bootpool': self.is_bootpool,
            'include': self.include,
        }


def classify_pool(name: str, meta: PoolMeta, has_errors: bool,
                  thresholds: Thresholds = DEFAULT_THRESHOLDS) -> Decision:
    """Decide whether a pool is low on space and whether to show it."""
    size = meta.size

    if size >= thresholds.large_pool_bytes:
        divisor = thresholds.large_pool_divisor
    else:
        divisor = thresholds.small_pool_divisor
    is_low = meta.avail < size // divisor

    # Small pools are assumed to be boot pools and hidden while healthy
    is_bootpool = size < thresholds.bootpool_max_bytes
    include = not is_bootpool or has_errors or is_low

    return Decision(
        name=name,
        avail=meta.avail,
        used=meta.used,
        has_errors=has_errors,
        is_low=is_low,
        is_bootpool=is_bootpool,
        include=include,
    )


def classify_pools(pools: dict[str, PoolMeta], statuses: dict[str, bool],
                   thresholds: Thresholds = DEFAULT_THRESHOLDS
                   ) -> list[Decision]:
    """Classify every pool, in display order.

    Pools missing from `statuses` are assumed to have errors.
    """
    names = sorted(pools, reverse=thresholds.reverse_order)

    decisions = []
    for name in names:
        has_errors = statuses.get(name, True)
        if name not in statuses:
            logger.debug(f"No status for pool {name}, assuming errors")
        decisions.append(
            classify_pool(name, pools[name], has_errors, thresholds)
        )
    return decisions


def format_byte_size(num_bytes: int) -> str:
    """Format a byte count with IEC short units (e.g. 512B, 4.5G, 332G)."""
    if num_bytes < KIB:
        return f"{num_bytes}B"

    value = float(num_bytes)
    for unit in IEC_UNITS[1:]:
        value /= KIB
        # Compare after rounding so 1023.9K moves on to 1.0M
        if round(value) < KIB:
            break

    if round(value, 1) < 10:
        return f"{value:.1f}{unit}"
    return f"{value:.0f}{unit}"


def build_line(decisions: list[Decision],
               format_size: Callable[[int], str] = format_byte_size) -> str:
    """Render the one-line summary for a status bar."""
    if not decisions:
        return FALLBACK_LINE

    entries = []
    for decision in decisions:
        if not decision.include:
            continue

        entry = f"{decision.name}: {format_size(decision.avail)}"
        if decision.has_errors:
            entry += ERRORS_SUFFIX
        elif decision.is_low:
            entry += LOW_SUFFIX
        entries.append(entry)

    return " ".join(entries) + "\n"


def summarize_pools(fetch_list: Callable[[], str],
                    fetch_status: Callable[[], str],
                    thresholds: Thresholds = DEFAULT_THRESHOLDS
                    ) -> list[Decision]:
    """Fetch, parse and classify pools.

    Args:
        fetch_list: Function returning `zfs get` output
        fetch_status: Function returning `zpool status` output
        thresholds: Space heuristics

    Returns:
        Decisions in display order, or an empty list if no pools were parsed.
        The status source is only queried when there are pools.
    """
    pools = parse_list(fetch_list())
    if not pools:
        logger.info("No pools parsed")
        return []

    statuses = parse_status(fetch_status())
    logger.info(f"Found {len(pools)} pools, {len(statuses)} with status")
    return classify_pools(pools, statuses, thresholds)


def summarize(fetch_list: Callable[[], str],
              fetch_status: Callable[[], str],
              thresholds: Thresholds = DEFAULT_THRESHOLDS,
              format_size: Callable[[int], str] = format_byte_size) -> str:
    """Produce the status line from the two command outputs."""
    decisions = summarize_pools(fetch_list, fetch_status, thresholds)
    return build_line(decisions, format_size)
