"""
hostfacts.collectors.memory
AUTHOR: carter-vin

Memory collector
- Linux /proc/meminfo
- every <base>Total counter with a matching Available/Free counter becomes a pool
- byte counts plus human-readable sizes (binary units)

Output shape (per pool):
  "system": {
    "available": "344 MiB",
    "available_bytes": 360353792,
    "capacity": "80.32%",
    "total": "1.71 GiB",
    "total_bytes": 1831251968,
    "used": "1.37 GiB",
    "used_bytes": 1470898176
  }
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from hostfacts.errors import ProbeParseError
from hostfacts.rawsource import DEFAULT_ROOT, read_pseudo_file

MEMINFO_PATH = "/proc/meminfo"

UNIT_MULTIPLIERS = {
    "kB": 1024,
    "mB": 1_000_000,
    "MB": 1_000_000,
    "B": 1,
}

SIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")

AVAILABLE_SUFFIXES = ("Available", "_Available", "Free", "_Free")

POOL_NAMES = {
    "Mem": "system",
    "Swap": "swap",
}


@dataclass(frozen=True)
class MemoryPool:
    name: str
    total_bytes: int
    available_bytes: int
    used_bytes: int
    capacity: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": format_bytes(self.total_bytes),
            "total_bytes": self.total_bytes,
            "available": format_bytes(self.available_bytes),
            "available_bytes": self.available_bytes,
            "used": format_bytes(self.used_bytes),
            "used_bytes": self.used_bytes,
            "capacity": self.capacity,
        }


def parse_meminfo(contents: str) -> dict[str, int]:
    """
    Parse /proc/meminfo into a dict of values in bytes

    Lines that do not parse are skipped; last occurrence of a label wins
    """
    values: dict[str, int] = {}
    for line in contents.splitlines():
        label, sep, rest = line.partition(":")
        if not sep:
            continue
        parts = rest.split()
        if not parts:
            continue
        try:
            value = int(parts[0])
        except ValueError:
            continue
        if value < 0:
            continue
        unit = parts[1] if len(parts) > 1 else "B"
        # Unknown units are taken as bytes
        values[label] = value * UNIT_MULTIPLIERS.get(unit, 1)
    return values


def format_bytes(num_bytes: int) -> str:
    """
    Human-readable size using binary units: 1048576000 -> "1000 MiB"
    """
    if num_bytes <= 0:
        return "0 B"

    idx = math.floor(math.log2(num_bytes) / 10)
    idx = min(max(idx, 0), len(SIZE_UNITS) - 1)
    unit = SIZE_UNITS[idx]
    scaled = num_bytes / (1 << (idx * 10))

    if scaled >= 100 or unit == "B":
        return f"{scaled:.0f} {unit}"
    if scaled >= 10:
        return f"{scaled:.1f} {unit}"
    return f"{scaled:.2f} {unit}"


def format_capacity(used_bytes: int, total_bytes: int) -> str:
    if total_bytes == 0:
        return "0.00%"
    return f"{used_bytes / total_bytes * 100:.2f}%"


def _strip_total_suffix(label: str) -> str:
    return label[: -len("Total")].rstrip("_")


def _find_available(values: dict[str, int], base: str) -> Optional[int]:
    for suffix in AVAILABLE_SUFFIXES:
        value = values.get(f"{base}{suffix}")
        if value is not None:
            return value
    return None


def pool_name(base: str) -> str:
    return POOL_NAMES.get(base, base.lower())


def build_memory_facts(values: dict[str, int]) -> dict[str, MemoryPool]:
    """
    Group flat counters into named pools, ordered by pool name

    Dropped pools:
    - total of zero
    - no Available/Free counterpart (partial data is not reported)
    """
    pools: dict[str, MemoryPool] = {}

    for label, total_bytes in values.items():
        if not label.endswith("Total") or total_bytes == 0:
            continue

        base = _strip_total_suffix(label)
        available_bytes = _find_available(values, base)
        if available_bytes is None:
            continue

        # Noisy sources can report more available than total
        available_bytes = min(available_bytes, total_bytes)
        used_bytes = max(total_bytes - available_bytes, 0)

        name = pool_name(base)
        pools[name] = MemoryPool(
            name=name,
            total_bytes=total_bytes,
            available_bytes=available_bytes,
            used_bytes=used_bytes,
            capacity=format_capacity(used_bytes, total_bytes),
        )

    return dict(sorted(pools.items()))


class MemoryCollector:
    name = "memory"

    def __init__(self, root: Path = DEFAULT_ROOT) -> None:
        self.root = root

    def collect(self) -> dict[str, Any]:
        contents = read_pseudo_file(self.root, MEMINFO_PATH)
        values = parse_meminfo(contents)
        if not values:
            raise ProbeParseError(MEMINFO_PATH, "no memory counters found")

        pools = build_memory_facts(values)
        return {name: pool.to_dict() for name, pool in pools.items()}
