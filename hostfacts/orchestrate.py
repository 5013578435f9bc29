"""
hostfacts.orchestrate
AUTHOR: carter-vin

Fan-out / fan-in of collectors

Contract:
- every collector runs in its own worker; no ordering between them
- outcomes are merged on the calling thread after all workers finish
- failed collectors are left out of the document, never fatal
"""

from __future__ import annotations

import concurrent.futures
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence

from hostfacts.collectors.base import Collector, CollectorOutcome, run_collector

OutcomeCallback = Callable[[CollectorOutcome], None]
FactsValidator = Callable[[str, Any], None]

INVALID_FACTS = "invalid_facts"


def check_unique_names(collectors: Sequence[Collector]) -> None:
    seen: set[str] = set()
    for collector in collectors:
        if collector.name in seen:
            raise ValueError(f"duplicate collector name: {collector.name}")
        seen.add(collector.name)


def run_all(collectors: Sequence[Collector]) -> list[CollectorOutcome]:
    """
    Run collectors concurrently; outcomes in registration order
    """
    check_unique_names(collectors)
    if not collectors:
        return []

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(collectors)) as pool:
        futures = [pool.submit(run_collector, c) for c in collectors]
        return [future.result() for future in futures]


def _checked(outcome: CollectorOutcome, validate: Optional[FactsValidator]) -> CollectorOutcome:
    """
    Turn a successful outcome whose facts fail validation into a failed one
    """
    if not outcome.ok or validate is None:
        return outcome
    try:
        validate(outcome.name, outcome.value)
    except ValueError as e:
        return replace(
            outcome,
            ok=False,
            value=None,
            error_type=INVALID_FACTS,
            error_message=str(e),
        )
    return outcome


def merge_outcomes(
    outcomes: Sequence[CollectorOutcome],
    *,
    validate: Optional[FactsValidator] = None,
    on_failure: Optional[OutcomeCallback] = None,
    on_success: Optional[OutcomeCallback] = None,
) -> dict[str, Any]:
    """
    Build the facts document {collector name: facts} from outcomes

    Facts rejected by validate are dropped like any other failure
    """
    document: dict[str, Any] = {}
    for outcome in outcomes:
        outcome = _checked(outcome, validate)
        if outcome.ok:
            document[outcome.name] = outcome.value
            if on_success is not None:
                on_success(outcome)
        elif on_failure is not None:
            on_failure(outcome)
    return document


def collect_facts(
    collectors: Sequence[Collector],
    *,
    validate: Optional[FactsValidator] = None,
    on_failure: Optional[OutcomeCallback] = None,
    on_success: Optional[OutcomeCallback] = None,
) -> dict[str, Any]:
    return merge_outcomes(
        run_all(collectors),
        validate=validate,
        on_failure=on_failure,
        on_success=on_success,
    )
