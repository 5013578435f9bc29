"""hostfacts.collectors package exports."""

from hostfacts.collectors.base import Collector, CollectorOutcome, run_collector
from hostfacts.collectors.kernel import KernelCollector
from hostfacts.collectors.memory import MemoryCollector
from hostfacts.collectors.network import NetworkCollector

__all__ = [
    "Collector",
    "CollectorOutcome",
    "KernelCollector",
    "MemoryCollector",
    "NetworkCollector",
    "run_collector",
]
