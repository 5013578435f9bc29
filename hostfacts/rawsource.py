"""
hostfacts.rawsource
AUTHOR: carter-vin

Raw host sources
- pseudo-file reads relative to an explicit filesystem root
- bounded subprocess calls returning decoded JSON

No parsing beyond decoding lives here
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Sequence

from hostfacts.errors import ProbeIOError, ProbeSubprocessError

DEFAULT_ROOT = Path("/")
DEFAULT_TIMEOUT_S = 10.0


def host_path(root: Path, path: str) -> Path:
    """
    Resolve an absolute host path under root

    host_path(Path("/tmp/fake"), "/proc/meminfo") -> /tmp/fake/proc/meminfo
    """
    return root / path.lstrip("/")


def read_pseudo_file(root: Path, path: str) -> str:
    """
    Read a pseudo-file as text

    Raises ProbeIOError when the file is missing or unreadable
    """
    target = host_path(root, path)
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProbeIOError(str(target), f"{type(e).__name__}: {e}") from e


def run_cmd(cmd: Sequence[str], timeout_s: float = DEFAULT_TIMEOUT_S) -> tuple[int, str, str]:
    """
    Run a command and return (rc, stdout, stderr)

    Output is decoded strictly as UTF-8; launch failures, timeouts and
    undecodable output raise ProbeSubprocessError
    """
    probe = " ".join(cmd)
    try:
        p = subprocess.run(
            list(cmd),
            capture_output=True,
            timeout=timeout_s,
            check=False,
        )
    except FileNotFoundError as e:
        raise ProbeSubprocessError(probe, f"command not found: {cmd[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise ProbeSubprocessError(probe, f"timed out after {timeout_s:g}s") from e
    except OSError as e:
        raise ProbeSubprocessError(probe, f"failed to launch: {e}") from e

    try:
        stdout = p.stdout.decode("utf-8")
        stderr = p.stderr.decode("utf-8", errors="replace")
    except UnicodeDecodeError as e:
        raise ProbeSubprocessError(probe, "output is not valid UTF-8") from e

    return p.returncode, stdout.strip(), stderr.strip()


def run_json_command(cmd: Sequence[str], timeout_s: float = DEFAULT_TIMEOUT_S) -> Any:
    """
    Run a command that prints JSON and return the decoded payload
    """
    rc, stdout, stderr = run_cmd(cmd, timeout_s=timeout_s)
    probe = " ".join(cmd)

    if rc != 0:
        raise ProbeSubprocessError(probe, f"exit status {rc}: {stderr or 'no stderr'}")

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeSubprocessError(probe, f"output is not JSON: {e}") from e
