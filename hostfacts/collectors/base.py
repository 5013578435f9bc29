"""
hostfacts.collectors.base
AUTHOR: carter-vin

Collector contract + light result wrapper -> prevent collector errors from crashing the run
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from hostfacts.errors import CollectError


class Collector(Protocol):
    """
    One named facts document from one host subsystem

    - name: constant merge key, unique across the registered set
    - collect: facts dict, or raise CollectError
    """

    name: str

    def collect(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class CollectorOutcome:
    """
    Normalized collector result
    - ok: false=failure, error details in error fields
    - value: facts document if ok=true
    """

    name: str
    ok: bool
    value: Optional[dict[str, Any]] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    elapsed_ms: int = 0


def run_collector(collector: Collector) -> CollectorOutcome:
    """
    Run collector & collect failure as data
    """
    start = time.monotonic()
    try:
        v = collector.collect()
        return CollectorOutcome(
            name=collector.name,
            ok=True,
            value=v,
            elapsed_ms=_elapsed_ms(start),
        )
    except CollectError as e:
        return CollectorOutcome(
            name=collector.name,
            ok=False,
            error_type=e.kind.value,
            error_message=str(e),
            elapsed_ms=_elapsed_ms(start),
        )
    except Exception as e:
        # Bugs in one probe still must not take down the others
        return CollectorOutcome(
            name=collector.name,
            ok=False,
            error_type=type(e).__name__,
            error_message=str(e),
            elapsed_ms=_elapsed_ms(start),
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
