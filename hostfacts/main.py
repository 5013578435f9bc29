"""
hostfacts.main
------------
AUTHOR: carter-vin

PURPOSE:
- One snapshot of kernel, memory and network facts as a single JSON object
- Stable CLI entrypoint
- Runtime environment visibility for operators and debugging

Key contract:
- `host-facts collect` prints exactly one JSON object to stdout and exits 0,
  even when some (or all) collectors fail
- diagnostics (--debug) go to stderr as JSON event lines
"""

from __future__ import annotations

import platform
import shlex
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import typer

from hostfacts.collectors.base import CollectorOutcome
from hostfacts.config import COLLECTOR_NAMES, FactsConfig, build_collectors
from hostfacts.logging import emit_event
from hostfacts.model import facts_to_json, validate_facts
from hostfacts.orchestrate import collect_facts
from hostfacts.rawsource import DEFAULT_TIMEOUT_S

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="host-facts: single-snapshot host facts collector",
)

TOOL_VERSION = "0.1.0"

# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


def run_snapshot(config: FactsConfig) -> str:
    """
    Collect, merge, validate and serialize one facts document
    """

    def _on_failure(outcome: CollectorOutcome) -> None:
        if config.debug:
            emit_event(
                "collector_failed",
                tool_version=TOOL_VERSION,
                collector=outcome.name,
                error_type=outcome.error_type,
                message=outcome.error_message,
                elapsed_ms=outcome.elapsed_ms,
            )

    def _on_success(outcome: CollectorOutcome) -> None:
        if config.debug:
            emit_event(
                "collector_completed",
                tool_version=TOOL_VERSION,
                collector=outcome.name,
                elapsed_ms=outcome.elapsed_ms,
            )

    document = collect_facts(
        build_collectors(config),
        validate=validate_facts,
        on_failure=_on_failure,
        on_success=_on_success,
    )

    return facts_to_json(document, pretty=config.pretty)

# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Root command behavior: print a short hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: host-facts --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print tool version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"host-facts v{TOOL_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("collectors")
def list_collectors() -> None:
    """
    List registered collector names
    """
    for name in COLLECTOR_NAMES:
        typer.echo(name)


@app.command("collect")
def collect(
    root: Path = typer.Option(
        Path("/"),
        help="Filesystem root that /proc paths and lease files resolve under.",
    ),
    only: Optional[List[str]] = typer.Option(
        None,
        "--only",
        help="Collector to run (repeatable). Default: all.",
    ),
    ip_command: str = typer.Option(
        "ip -j addr show",
        help="Address-enumeration command printing iproute2 JSON.",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT_S,
        help="Timeout (seconds) for the address-enumeration command.",
        min=0.1,
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Indent the JSON document.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Emit diagnostic JSON events to stderr.",
    ),
) -> None:
    """
    Collect one facts snapshot and print it

    Failure semantics:
    - a failing collector is left out of the document
    - the command still exits 0
    """
    try:
        config = FactsConfig(
            root=root,
            ip_command=tuple(shlex.split(ip_command)),
            command_timeout_s=timeout,
            collectors=tuple(only) if only else COLLECTOR_NAMES,
            debug=debug,
            pretty=pretty,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    if config.debug:
        emit_event(
            "facts_start",
            tool_version=TOOL_VERSION,
            root=str(config.root),
            collectors=list(config.collectors),
        )

    try:
        document_json = run_snapshot(config)
        typer.echo(document_json)

        if config.debug:
            emit_event(
                "facts_emitted",
                tool_version=TOOL_VERSION,
                bytes=len(document_json),
            )
    finally:
        if config.debug:
            emit_event("facts_shutdown", tool_version=TOOL_VERSION)


if __name__ == "__main__":
    app()
