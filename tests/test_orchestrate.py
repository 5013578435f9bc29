"""
Contract tests for collector fan-out, failure isolation and merge
"""

import threading

import pytest

from hostfacts.collectors.base import run_collector
from hostfacts.errors import ProbeIOError
from hostfacts.model import validate_facts
from hostfacts.orchestrate import collect_facts, run_all


class StaticCollector:
    def __init__(self, name, value):
        self.name = name
        self.value = value

    def collect(self):
        return dict(self.value)


class FailingCollector:
    def __init__(self, name, exc):
        self.name = name
        self.exc = exc

    def collect(self):
        raise self.exc


class BarrierCollector:
    """Only completes when every BarrierCollector is running at the same time"""

    def __init__(self, name, barrier):
        self.name = name
        self.barrier = barrier

    def collect(self):
        self.barrier.wait(timeout=5)
        return {"ok": True}


def test_failed_collector_is_omitted() -> None:
    """
    A fails, B succeeds -> document has B only, and the run completes
    """
    failures = []

    document = collect_facts(
        [
            FailingCollector("a", ProbeIOError("/proc/a", "missing")),
            StaticCollector("b", {"x": 1}),
        ],
        on_failure=failures.append,
    )

    assert document == {"b": {"x": 1}}
    assert [f.name for f in failures] == ["a"]
    assert failures[0].error_type == "io"
    assert "/proc/a" in failures[0].error_message


def test_unexpected_exception_is_isolated() -> None:
    """
    Non-CollectError exceptions are captured as data too
    """
    outcome = run_collector(FailingCollector("boom", KeyError("ifname")))

    assert not outcome.ok
    assert outcome.value is None
    assert outcome.error_type == "KeyError"


def test_all_failures_yield_empty_document() -> None:
    """
    Every collector failing still returns a (empty) document
    """
    document = collect_facts([FailingCollector("a", RuntimeError("x"))])
    assert document == {}


def test_collectors_run_concurrently() -> None:
    """
    Collectors that wait on each other only finish if run in parallel
    """
    barrier = threading.Barrier(3)
    collectors = [BarrierCollector(name, barrier) for name in ("kernel", "memory", "network")]

    outcomes = run_all(collectors)

    assert [o.name for o in outcomes] == ["kernel", "memory", "network"]
    assert all(o.ok for o in outcomes)


def test_merge_keeps_registration_order() -> None:
    """
    Document keys follow registration order, not completion order
    """
    document = collect_facts(
        [
            StaticCollector("network", {"n": 1}),
            StaticCollector("kernel", {"k": 1}),
        ]
    )
    assert list(document) == ["network", "kernel"]


def test_duplicate_names_rejected() -> None:
    """
    Merge keys must be unique across the registered set
    """
    with pytest.raises(ValueError, match="duplicate collector name"):
        run_all([StaticCollector("kernel", {}), StaticCollector("kernel", {})])


def test_invalid_facts_are_dropped_as_failures() -> None:
    """
    Facts that break document invariants are left out; the rest still merge
    """
    failures = []
    successes = []

    document = collect_facts(
        [
            StaticCollector("kernel", {"kernel": "Linux"}),
            StaticCollector(
                "network",
                {"primary": "eth9", "interfaces": {"eth0": {}}, "hostname": "box", "domain": None, "fqdn": "box"},
            ),
        ],
        validate=validate_facts,
        on_failure=failures.append,
        on_success=successes.append,
    )

    assert document == {"kernel": {"kernel": "Linux"}}
    assert [s.name for s in successes] == ["kernel"]
    assert [f.name for f in failures] == ["network"]
    assert failures[0].error_type == "invalid_facts"
    assert failures[0].value is None
    assert "eth9" in failures[0].error_message
