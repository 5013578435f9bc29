"""
hostfacts.collectors.kernel
AUTHOR: carter-vin

Kernel collector
- single-value reads from /proc/sys/kernel
- version/majorversion derived from the release string only
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hostfacts.rawsource import DEFAULT_ROOT, read_pseudo_file

OSTYPE_PATH = "/proc/sys/kernel/ostype"
ARCH_PATH = "/proc/sys/kernel/arch"
RELEASE_PATH = "/proc/sys/kernel/osrelease"


@dataclass(frozen=True)
class KernelFacts:
    ostype: str
    arch: str
    release: str
    version: str
    majorversion: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ostype": self.ostype,
            "arch": self.arch,
            "release": self.release,
            "version": self.version,
            "majorversion": self.majorversion,
        }


def parse_version(release: str) -> str:
    """
    Release up to the first "-": "5.15.0-48-generic" -> "5.15.0"
    """
    return release.split("-", 1)[0]


def parse_majorversion(release: str) -> str:
    """
    First two dotted components: "5.15.0-48" -> "5.15", "5" -> "5"
    """
    return ".".join(release.split(".")[:2])


def kernel_facts_from_release(ostype: str, arch: str, release: str) -> KernelFacts:
    release = release.strip()
    return KernelFacts(
        ostype=ostype.strip(),
        arch=arch.strip(),
        release=release,
        version=parse_version(release),
        majorversion=parse_majorversion(release),
    )


class KernelCollector:
    name = "kernel"

    def __init__(self, root: Path = DEFAULT_ROOT) -> None:
        self.root = root

    def collect(self) -> dict[str, Any]:
        facts = kernel_facts_from_release(
            ostype=read_pseudo_file(self.root, OSTYPE_PATH),
            arch=read_pseudo_file(self.root, ARCH_PATH),
            release=read_pseudo_file(self.root, RELEASE_PATH),
        )
        return facts.to_dict()
