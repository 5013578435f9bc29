"""
Contract tests for the collect command: one document, partial on failure, exit 0
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from hostfacts.main import app

MEMINFO = """\
MemTotal:       2048000 kB
MemAvailable:   1024000 kB
SwapTotal:      1024000 kB
SwapFree:        512000 kB
"""


def _fake_root(root: Path, *, meminfo: bool = True) -> Path:
    kernel = root / "proc" / "sys" / "kernel"
    kernel.mkdir(parents=True)
    (kernel / "ostype").write_text("Linux\n", encoding="utf-8")
    (kernel / "arch").write_text("aarch64\n", encoding="utf-8")
    (kernel / "osrelease").write_text("6.1.0-13-arm64\n", encoding="utf-8")
    if meminfo:
        (root / "proc" / "meminfo").write_text(MEMINFO, encoding="utf-8")
    return root


def test_collect_prints_one_document(tmp_path: Path) -> None:
    """
    Selected collectors appear as top-level keys of a single JSON object
    """
    runner = CliRunner()
    root = _fake_root(tmp_path)

    result = runner.invoke(
        app,
        ["collect", "--root", str(root), "--only", "kernel", "--only", "memory"],
    )

    assert result.exit_code == 0

    document = json.loads(result.stdout)
    assert set(document) == {"kernel", "memory"}
    assert document["kernel"]["majorversion"] == "6.1"
    assert document["kernel"]["version"] == "6.1.0"
    assert document["memory"]["system"]["capacity"] == "50.00%"


def test_failing_collectors_are_dropped_not_fatal(tmp_path: Path) -> None:
    """
    Missing meminfo and a missing ip command leave only the kernel key
    """
    runner = CliRunner()
    root = _fake_root(tmp_path, meminfo=False)

    result = runner.invoke(
        app,
        [
            "collect",
            "--root",
            str(root),
            "--ip-command",
            "host-facts-missing-ip-binary -j addr show",
        ],
    )

    assert result.exit_code == 0

    document = json.loads(result.stdout)
    assert set(document) == {"kernel"}


def test_unknown_collector_is_rejected(tmp_path: Path) -> None:
    """
    --only must name a registered collector
    """
    runner = CliRunner()

    result = runner.invoke(app, ["collect", "--root", str(tmp_path), "--only", "gpu"])

    assert result.exit_code != 0
    assert "unknown collectors" in result.output


def test_collectors_command_lists_names() -> None:
    """
    The registry is a fixed, ordered list
    """
    runner = CliRunner()

    result = runner.invoke(app, ["collectors"])

    assert result.exit_code == 0
    assert result.stdout.split() == ["kernel", "memory", "network"]


def _stderr_runner() -> CliRunner:
    # click >= 8.2 always keeps stderr separate and dropped mix_stderr
    try:
        return CliRunner(mix_stderr=False)
    except TypeError:
        return CliRunner()


def test_debug_reports_failed_collector_on_stderr(tmp_path: Path) -> None:
    """
    --debug keeps stdout a single document and narrates the run on stderr
    """
    runner = _stderr_runner()
    root = _fake_root(tmp_path)

    result = runner.invoke(
        app,
        [
            "collect",
            "--debug",
            "--root",
            str(root),
            "--ip-command",
            "host-facts-missing-ip-binary -j addr show",
        ],
    )

    assert result.exit_code == 0

    document = json.loads(result.stdout)
    assert set(document) == {"kernel", "memory"}

    events = [json.loads(line) for line in result.stderr.splitlines() if line.strip()]
    event_types = [e["event_type"] for e in events]

    assert event_types[0] == "facts_start"
    assert event_types[-1] == "facts_shutdown"
    assert "facts_emitted" in event_types

    failed = [e for e in events if e["event_type"] == "collector_failed"]
    assert [e["collector"] for e in failed] == ["network"]
    assert failed[0]["error_type"] == "subprocess"

    completed = {e["collector"] for e in events if e["event_type"] == "collector_completed"}
    assert completed == {"kernel", "memory"}
