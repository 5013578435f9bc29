"""
hostfacts.model
AUTHOR: carter-vin

Facts document validation + deterministic serialization

Design goals:
- Top-level keys are collector names, values are facts objects
- Stable key order in output (sort_keys)
- Never print a document that breaks its own invariants
"""

from __future__ import annotations

import json
from typing import Any


def validate_facts(name: str, facts: Any) -> None:
    """
    Validate one collector's facts before they enter the document

    Raises ValueError on invalid
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"collector name must be a non-empty string: {name!r}")
    if not isinstance(facts, dict):
        raise ValueError(f"{name} facts must be a dict")

    if name == "network":
        primary = facts.get("primary")
        interfaces = facts.get("interfaces") or {}
        if primary not in interfaces:
            raise ValueError(f"network.primary {primary!r} is not a known interface")

        hostname = facts.get("hostname")
        domain = facts.get("domain")
        expected_fqdn = f"{hostname}.{domain}" if domain else hostname
        if facts.get("fqdn") != expected_fqdn:
            raise ValueError("network.fqdn does not match hostname/domain")


def facts_to_json(document: dict[str, Any], *, pretty: bool = False) -> str:
    """
    Serialize a facts document

    Rules:
    - sort_keys=True ensures stable key order
    - compact separators unless pretty
    - ensure_ascii=False keeps UTF-8 readable

    Output single JSON object string
    """
    if pretty:
        return json.dumps(document, sort_keys=True, indent=2, ensure_ascii=False)

    return json.dumps(
        document,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def validate_document(document: dict[str, Any]) -> None:
    """
    Validate a merged facts document

    Raises ValueError on invalid
    """
    if not isinstance(document, dict):
        raise ValueError("document must be a dict")

    for name, facts in document.items():
        validate_facts(name, facts)
