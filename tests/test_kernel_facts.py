"""
Contract tests for kernel release parsing and the kernel collector
"""

from pathlib import Path

import pytest

from hostfacts.collectors.kernel import KernelCollector, parse_majorversion, parse_version
from hostfacts.errors import ProbeIOError


def _write_kernel_files(root: Path, *, ostype: str, arch: str, release: str) -> None:
    kernel = root / "proc" / "sys" / "kernel"
    kernel.mkdir(parents=True)
    (kernel / "ostype").write_text(ostype, encoding="utf-8")
    (kernel / "arch").write_text(arch, encoding="utf-8")
    (kernel / "osrelease").write_text(release, encoding="utf-8")


def test_parse_version() -> None:
    """
    version stops at the first dash
    """
    assert parse_version("5.15.0-48-generic") == "5.15.0"
    assert parse_version("5.15") == "5.15"


def test_parse_majorversion() -> None:
    """
    majorversion keeps the first two dotted components
    """
    assert parse_majorversion("5.15.0-48") == "5.15"
    assert parse_majorversion("5") == "5"
    assert parse_majorversion("6.8.0-1013-aws") == "6.8"


def test_kernel_collector_strips_newlines(tmp_path: Path) -> None:
    """
    Pseudo-file values arrive with trailing newlines; facts do not
    """
    _write_kernel_files(tmp_path, ostype="Linux\n", arch="x86_64\n", release="5.15.0-48-generic\n")

    facts = KernelCollector(root=tmp_path).collect()

    assert facts == {
        "ostype": "Linux",
        "arch": "x86_64",
        "release": "5.15.0-48-generic",
        "version": "5.15.0",
        "majorversion": "5.15",
    }


def test_kernel_collector_missing_release_is_io_error(tmp_path: Path) -> None:
    """
    An unreadable pseudo-file fails the kernel collector
    """
    with pytest.raises(ProbeIOError, match="ostype"):
        KernelCollector(root=tmp_path).collect()
