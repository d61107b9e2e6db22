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
# zpool-summary/src/zpool_summary/__init__.py

"""ZFS pool summary for status bars.

Parse `zfs get` and `zpool status` output and condense pool free space and
device errors into a single line.
"""

from .parser import (
    PoolMeta,
    is_valid_pool_name,
    list_pools,
    normalize_status,
    parse_list,
    parse_status,
    stat_pools,
)
from .summary import (
    Decision,
    Thresholds,
    build_line,
    classify_pool,
    classify_pools,
    format_byte_size,
    summarize,
    summarize_pools,
)

__version__ = "0.1.0"

__all__ = [
    "Decision",
    "PoolMeta",
    "Thresholds",
    "build_line",
    "classify_pool",
    "classify_pools",
    "format_byte_size",
    "is_valid_pool_name",
    "list_pools",
    "normalize_status",
    "parse_list",
    "parse_status",
    "stat_pools",
    "summarize",
    "summarize_pools",
]
