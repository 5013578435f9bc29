"""
Contract tests for facts document validation and serialization
"""

import json

import pytest

from hostfacts.model import facts_to_json, validate_document


def _network(primary: str = "eth0") -> dict:
    return {
        "hostname": "web01",
        "domain": "example.org",
        "fqdn": "web01.example.org",
        "primary": primary,
        "interfaces": {"eth0": {"bindings": ["10.0.0.2"], "bindings6": []}},
    }


def test_valid_document_passes() -> None:
    """
    Collector-keyed dict documents validate
    """
    validate_document({"kernel": {"ostype": "Linux"}, "network": _network()})
    validate_document({})


def test_primary_must_be_an_interface() -> None:
    """
    network.primary must name an entry of network.interfaces
    """
    with pytest.raises(ValueError, match="primary"):
        validate_document({"network": _network(primary="wlan0")})


def test_fqdn_must_match_identity() -> None:
    """
    network.fqdn is hostname.domain
    """
    network = _network()
    network["fqdn"] = "web01"
    with pytest.raises(ValueError, match="fqdn"):
        validate_document({"network": network})


def test_facts_must_be_objects() -> None:
    """
    Every collector value is a JSON object
    """
    with pytest.raises(ValueError, match="kernel"):
        validate_document({"kernel": "Linux"})


def test_serialization_is_stable() -> None:
    """
    Sorted keys, compact by default, indented with pretty
    """
    document = {"memory": {"swap": {}}, "kernel": {"release": "6.8.0", "arch": "x86_64"}}

    compact = facts_to_json(document)
    assert compact == '{"kernel":{"arch":"x86_64","release":"6.8.0"},"memory":{"swap":{}}}'

    pretty = facts_to_json(document, pretty=True)
    assert "\n" in pretty
    assert json.loads(pretty) == document
