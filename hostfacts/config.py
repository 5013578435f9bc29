"""
hostfacts.config
AUTHOR: carter-vin

Run configuration + collector registry

There is no config file and no environment lookup: FactsConfig is built from
CLI options only, and the collector set is a fixed, explicit list.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hostfacts.collectors.base import Collector
from hostfacts.collectors.kernel import KernelCollector
from hostfacts.collectors.memory import MemoryCollector
from hostfacts.collectors.network import DEFAULT_IP_COMMAND, NetworkCollector
from hostfacts.rawsource import DEFAULT_ROOT, DEFAULT_TIMEOUT_S

COLLECTOR_NAMES = ("kernel", "memory", "network")


@dataclass(frozen=True)
class FactsConfig:
    """
    Settings for one snapshot run

    - root: filesystem root that pseudo-file paths resolve under
    - ip_command: address-enumeration command (must print iproute2 JSON)
    - command_timeout_s: upper bound for the address-enumeration command
    - collectors: names to run, in output order
    - debug: emit diagnostic events to stderr
    - pretty: indent the printed document
    """

    root: Path = DEFAULT_ROOT
    ip_command: tuple[str, ...] = DEFAULT_IP_COMMAND
    command_timeout_s: float = DEFAULT_TIMEOUT_S
    collectors: tuple[str, ...] = COLLECTOR_NAMES
    debug: bool = False
    pretty: bool = False

    def __post_init__(self) -> None:
        unknown = sorted(set(self.collectors) - set(COLLECTOR_NAMES))
        if unknown:
            raise ValueError(f"unknown collectors: {', '.join(unknown)}")
        if self.command_timeout_s <= 0:
            raise ValueError("command_timeout_s must be > 0")
        if not self.ip_command:
            raise ValueError("ip_command must be non-empty")


def build_collectors(config: FactsConfig) -> list[Collector]:
    """
    Construct the selected collectors in the order given by config.collectors
    """
    factories = {
        "kernel": lambda: KernelCollector(root=config.root),
        "memory": lambda: MemoryCollector(root=config.root),
        "network": lambda: NetworkCollector(
            root=config.root,
            command=config.ip_command,
            timeout_s=config.command_timeout_s,
        ),
    }
    # dict.fromkeys drops repeated names while keeping order
    return [factories[name]() for name in dict.fromkeys(config.collectors)]
